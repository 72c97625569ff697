"""Baby studio: portraits of a potential child from two parent photos."""

import random
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from creativestudio.builders import catalogs
from creativestudio.builders.common import BatchContext, Option, OptionCategory, SourceImage, pick, resolve_pool
from creativestudio.models.requests import GenerationTask, ImageModel
from creativestudio.models.results import ResultKey
from creativestudio.utils.image_utils import build_filename, indexed_timestamp, sanitize_source_filename

PROMPT_TEMPLATE = """Analyze the facial features of the two adults in the provided images (Parent 1 and Parent 2). Generate a photorealistic image of their potential child.
{gender}- **Child's Age:** The child should be {age}.
- **Composition:** The scene should be a {composition}.
- **Setting:** The photo is set {background}.
- **Attire & Action:** The child is {clothing} and is {action}.
Ensure the resulting child's features are a plausible and natural blend of both parents. The final image should be a high-quality, professional photograph."""


class BabyGender(str, Enum):
    BOY = "Boy"
    GIRL = "Girl"
    SURPRISE_ME = "Surprise Me"


class BabyOptions(BaseModel):
    """User selections of the baby studio. Category lists select by category name."""

    age: Optional[str] = Field(None, description="Age option name; random when unknown")
    gender: BabyGender = BabyGender.SURPRISE_ME
    image_count: int = Field(4, ge=1, le=100)
    aspect_ratio: str = "auto"
    model: str = ImageModel.NANO_BANANA.value

    composition: list[str] = Field(default_factory=list)
    use_custom_composition: bool = False
    custom_composition: str = ""

    background: list[str] = Field(default_factory=list)
    use_custom_background: bool = False
    custom_backgrounds: str = ""

    clothing: list[str] = Field(default_factory=list)
    use_custom_clothing: bool = False
    custom_clothing: str = ""

    action: list[str] = Field(default_factory=list)
    use_custom_action: bool = False
    custom_action: str = ""


def clothing_categories(gender: BabyGender) -> list[OptionCategory]:
    if gender == BabyGender.BOY:
        return [*catalogs.BABY_CLOTHING_STYLES_UNISEX, *catalogs.BABY_CLOTHING_STYLES_BOY]
    if gender == BabyGender.GIRL:
        return [*catalogs.BABY_CLOTHING_STYLES_UNISEX, *catalogs.BABY_CLOTHING_STYLES_GIRL]
    return [
        *catalogs.BABY_CLOTHING_STYLES_UNISEX,
        *catalogs.BABY_CLOTHING_STYLES_BOY,
        *catalogs.BABY_CLOTHING_STYLES_GIRL,
    ]


def select_age(age: Optional[str], rng: Optional[random.Random] = None) -> Option:
    for option in catalogs.BABY_AGES:
        if option.name == age:
            return option
    return pick(catalogs.BABY_AGES, rng)


def build_baby_tasks(
    options: BabyOptions,
    parent1: SourceImage,
    parent2: SourceImage,
    context: BatchContext,
    rng: Optional[random.Random] = None,
) -> list[GenerationTask]:
    """``image_count`` tasks sampling composition, background, clothing and action."""
    age = select_age(options.age, rng)
    compositions = resolve_pool(
        catalogs.BABY_COMPOSITIONS, options.composition, options.custom_composition, options.use_custom_composition, "composition"
    )
    backgrounds = resolve_pool(
        catalogs.BABY_BACKGROUNDS, options.background, options.custom_backgrounds, options.use_custom_background, "background"
    )
    clothing = resolve_pool(
        clothing_categories(options.gender), options.clothing, options.custom_clothing, options.use_custom_clothing, "clothing"
    )
    actions = resolve_pool(catalogs.BABY_ACTIONS, options.action, options.custom_action, options.use_custom_action, "action")

    gender_line = ""
    if options.gender != BabyGender.SURPRISE_ME:
        gender_line = f"- **Child's Gender:** The child should be a baby {options.gender.value.lower()}.\n"
    gender_id = options.gender.value.lower().replace(" ", "")
    p1 = sanitize_source_filename(parent1.filename, 30, fallback="parent1")
    p2 = sanitize_source_filename(parent2.filename, 30, fallback="parent2")

    tasks = []
    for i in range(options.image_count):
        composition = pick(compositions, rng)
        background = pick(backgrounds, rng)
        outfit = pick(clothing, rng)
        action = pick(actions, rng)

        prompt = PROMPT_TEMPLATE.format(
            gender=gender_line,
            age=age.prompt,
            composition=composition.prompt,
            background=background.prompt,
            clothing=outfit.prompt,
            action=action.prompt,
        )
        filename = build_filename(
            context.session_id,
            ["baby", p1, p2, gender_id, age.id, composition.id],
            indexed_timestamp(context.timestamp, i),
        )
        prefix = f"{options.gender.value} " if options.gender != BabyGender.SURPRISE_ME else ""
        tasks.append(
            GenerationTask(
                prompt=prompt,
                images=(*parent1.images, *parent2.images),
                image_urls=(*parent1.image_urls, *parent2.image_urls),
                model=options.model,
                aspect_ratio=options.aspect_ratio,
                filename=filename,
                key=ResultKey(batch_timestamp=context.timestamp, source_index=0, variant_index=i),
                labels={"description": f"{prefix}{age.name} - {composition.name}"},
            )
        )
    return tasks
