"""Hair studio: random hairstyle/color/pose/adornment combinations for one portrait."""

import random
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from creativestudio.builders import catalogs
from creativestudio.builders.common import (
    BatchContext,
    Option,
    SourceImage,
    custom_options,
    pick,
    resolve_pool,
    split_custom,
)
from creativestudio.config import NATIVE_IMAGE_MODEL
from creativestudio.models.requests import GenerationTask
from creativestudio.models.results import ResultKey
from creativestudio.utils.image_utils import build_filename, indexed_timestamp, sanitize_component, sanitize_source_filename

STATIC_POSE_SUFFIX = (
    " It is crucial to preserve the exact same facial expression, head angle, pose, and lighting from the "
    "original photo. Only apply the specified changes. DO NOT CHANGE ANYTHING ELSE!!!"
)
UNCHANGED_PROMPT = "Return the original image exactly as it is, without any changes or modifications."


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ColorOption(str, Enum):
    ORIGINAL = "original"
    RANDOM = "random"
    BOLD = "bold"
    COMPLEX_NATURAL = "complex_natural"
    MULTICOLOR_BOLD = "multicolor_bold"


class PoseStyle(str, Enum):
    STATIC = "static"
    RANDOM = "random"


class AdornmentOption(str, Enum):
    ORIGINAL = "original"
    RANDOM = "random"


COLOR_TABLES = {
    ColorOption.RANDOM: catalogs.HAIR_COLORS,
    ColorOption.BOLD: catalogs.BOLD_HAIR_COLORS,
    ColorOption.COMPLEX_NATURAL: catalogs.COMPLEX_NATURAL_HAIR_COLORS,
    ColorOption.MULTICOLOR_BOLD: catalogs.MULTICOLOR_BOLD_HAIR_COLORS,
}


class HairOptions(BaseModel):
    """User selections of the hair studio."""

    gender: Gender = Gender.FEMALE
    image_count: int = Field(4, ge=1, le=100)
    aspect_ratio: str = "auto"
    model: str = NATIVE_IMAGE_MODEL

    keep_original_hairstyle: bool = False
    hairstyle_categories: list[str] = Field(default_factory=list)
    use_custom_hairstyles: bool = False
    custom_hairstyles: str = ""

    color_options: list[ColorOption] = Field(default_factory=list)
    use_custom_hair_colors: bool = False
    custom_hair_colors: str = ""

    pose_options: list[PoseStyle] = Field(default_factory=list)
    use_custom_poses: bool = False
    custom_poses: str = ""

    adornment_options: list[AdornmentOption] = Field(default_factory=list)
    use_custom_adornments: bool = False
    custom_adornments: str = ""


def hairstyle_pool(options: HairOptions) -> list[Option]:
    if options.keep_original_hairstyle:
        return [catalogs.ORIGINAL_HAIRSTYLE]
    if options.use_custom_hairstyles:
        custom = custom_options(options.custom_hairstyles, "style")
        if custom:
            return custom
    gendered = catalogs.MALE_HAIRSTYLES if options.gender == Gender.MALE else catalogs.FEMALE_HAIRSTYLES
    pool = resolve_pool([*gendered, catalogs.AVANT_GARDE_HAIRSTYLES], options.hairstyle_categories)
    return pool or [catalogs.ORIGINAL_HAIRSTYLE]


def color_pool(options: HairOptions) -> list[Optional[str]]:
    """Colors to sample from. None keeps the original color."""
    if options.use_custom_hair_colors and split_custom(options.custom_hair_colors):
        return split_custom(options.custom_hair_colors)
    pool: list[Optional[str]] = []
    if not options.color_options or ColorOption.ORIGINAL in options.color_options:
        pool.append(None)
    for choice, table in COLOR_TABLES.items():
        if choice in options.color_options:
            pool.extend(table)
    return pool or [None]


def pose_pool(options: HairOptions) -> list[Optional[str]]:
    if options.use_custom_poses and split_custom(options.custom_poses):
        return split_custom(options.custom_poses)
    pool: list[Optional[str]] = []
    if PoseStyle.STATIC in options.pose_options:
        pool.append(None)
    if PoseStyle.RANDOM in options.pose_options:
        pool.extend(catalogs.POSE_PROMPTS)
    return pool or [None]


def adornment_pool(options: HairOptions) -> list[Optional[str]]:
    if options.use_custom_adornments and split_custom(options.custom_adornments):
        return split_custom(options.custom_adornments)
    pool: list[Optional[str]] = []
    if AdornmentOption.ORIGINAL in options.adornment_options:
        pool.append(None)
    if AdornmentOption.RANDOM in options.adornment_options:
        adornments = catalogs.MALE_BEARDS if options.gender == Gender.MALE else catalogs.FEMALE_ACCESSORIES
        pool.extend(a.name for a in adornments if not a.id.endswith("_none"))
    return pool or [None]


def build_prompt(
    hairstyle: Option,
    color: Optional[str],
    pose: Optional[str],
    adornment: Optional[str],
    gender: Gender,
) -> str:
    changes_style = hairstyle.id != catalogs.ORIGINAL_HAIRSTYLE.id
    prompt = f'Apply a "{hairstyle.name}" hairstyle to the person in the image.' if changes_style else ""

    instructions = []
    if color:
        if changes_style:
            instructions.append(f'Change the hair color to "{color}".')
        else:
            instructions.append(
                f'Change ONLY the hair color to "{color}", keeping the original hairstyle, texture, and length exactly the same.'
            )
    if adornment:
        if gender == Gender.MALE:
            instructions.append(f'Add a "{adornment}" facial hairstyle.')
        else:
            instructions.append(f'Add a "{adornment}" accessory.')
    if pose:
        command = pose.removeprefix("Render a new portrait expression of them ")
        instructions.append(f"Change their pose and expression to be {command}")

    if instructions:
        joined = " Also, ".join(instruction.rstrip(".") for instruction in instructions)
        prompt = f"{prompt} IMPORTANT: {joined}." if prompt else f"For the person in the image, {joined}."
    if not pose:
        prompt += STATIC_POSE_SUFFIX
    return prompt.strip() or UNCHANGED_PROMPT


def build_hair_tasks(
    options: HairOptions,
    source: SourceImage,
    context: BatchContext,
    source_index: int = 0,
    rng: Optional[random.Random] = None,
) -> list[GenerationTask]:
    """``image_count`` tasks, each sampling one value per axis from its pool."""
    styles = hairstyle_pool(options)
    colors = color_pool(options)
    poses = pose_pool(options)
    adornments = adornment_pool(options)
    source_name = sanitize_source_filename(source.filename, 60)

    tasks = []
    for i in range(options.image_count):
        hairstyle = pick(styles, rng)
        color = pick(colors, rng)
        pose = pick(poses, rng)
        adornment = pick(adornments, rng)

        filename = build_filename(
            context.session_id,
            [
                source_name,
                options.gender.value,
                sanitize_component(hairstyle.id),
                sanitize_component(color or "original", 30),
            ],
            indexed_timestamp(context.timestamp, i),
        )
        tasks.append(
            GenerationTask(
                prompt=build_prompt(hairstyle, color, pose, adornment, options.gender),
                images=source.images,
                image_urls=source.image_urls,
                model=options.model,
                aspect_ratio=options.aspect_ratio,
                filename=filename,
                key=ResultKey(batch_timestamp=context.timestamp, source_index=source_index, variant_index=i),
                labels={"hairstyle": hairstyle.name, "color": color or "original"},
            )
        )
    return tasks
