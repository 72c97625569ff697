"""Architecture studio: restyle one scene per scope, time of day, theme and camera angle."""

import random
from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel, Field, model_validator

from creativestudio.builders import catalogs
from creativestudio.builders.common import BatchContext, Option, SourceImage, pick, resolve_id_pool
from creativestudio.models.requests import GenerationTask, ImageModel
from creativestudio.models.results import ResultKey
from creativestudio.utils.image_utils import build_filename, indexed_timestamp, sanitize_component, sanitize_source_filename

CURRENT_STYLE = Option(id="current", name="Current Style", prompt="")
PROMPT_TAIL = (
    "Maintain photorealistic quality and architectural accuracy. "
    "Preserve the overall spatial layout and structural proportions. "
    "Ensure all architectural elements are harmonious and professionally designed. "
)
PRESERVE_ANGLE = "Preserve the exact camera angle, framing, and perspective from the original image. "
KEEP_STYLE = "Maintain the current architectural style and design elements exactly as shown"


class Scope(str, Enum):
    INTERIOR = "interior"
    EXTERIOR = "exterior"
    FACADE = "facade"
    GARDEN = "garden"
    LANDSCAPE = "landscape"


class ArchitectureOptions(BaseModel):
    """
    User selections of the architecture studio.

    With ``images_per_style`` set, every style in the pool gets exactly that
    many images; otherwise ``image_count`` images sample a style at random.
    """

    scope: Scope = Scope.INTERIOR
    styles: list[str] = Field(default_factory=list, description="Selected style ids for the scope")
    use_custom_styles: bool = False
    custom_styles: str = ""
    time: str = "current"
    theme: str = "none"
    camera_angle: str = "preserve"
    image_count: int = Field(4, ge=1, le=100)
    images_per_style: Optional[int] = Field(None, ge=1, le=20)
    aspect_ratio: str = "auto"
    model: str = ImageModel.NANO_BANANA.value

    @model_validator(mode="after")
    def validate_known_scope_options(self):
        if self.time not in {t.id for t in catalogs.ARCHITECTURE_TIMES}:
            raise ValueError(f"Unknown time of day: {self.time}")
        if self.theme not in {t.id for t in catalogs.ARCHITECTURE_THEMES}:
            raise ValueError(f"Unknown theme: {self.theme}")
        return self


def styles_for_scope(scope: Scope) -> Sequence[Option]:
    return catalogs.ARCHITECTURE_STYLES.get(scope.value, catalogs.ARCHITECTURE_STYLES[Scope.INTERIOR.value])


def _lookup(options: Sequence[Option], option_id: str, default: Option) -> Option:
    return next((option for option in options if option.id == option_id), default)


def build_prompt(style: Option, time_prompt: str, theme_prompt: str, camera_prompt: str) -> str:
    components = [style.prompt or KEEP_STYLE, *(p for p in (time_prompt, theme_prompt, camera_prompt) if p)]
    prompt = f"Transform this architectural scene to have {', '.join(components)}. {PROMPT_TAIL}"
    if not camera_prompt:
        prompt += PRESERVE_ANGLE
    return prompt.strip()


def style_sequence(
    options: ArchitectureOptions,
    pool: Sequence[Option],
    rng: Optional[random.Random] = None,
) -> list[Option]:
    """Styles in task order: K per style in exhaustive mode, random draws otherwise."""
    if options.images_per_style:
        return [style for style in pool for _ in range(options.images_per_style)]
    return [pick(pool, rng) for _ in range(options.image_count)]


def build_architecture_tasks(
    options: ArchitectureOptions,
    source: SourceImage,
    context: BatchContext,
    source_index: int = 0,
    rng: Optional[random.Random] = None,
) -> list[GenerationTask]:
    pool = resolve_id_pool(
        styles_for_scope(options.scope), options.styles, options.custom_styles, options.use_custom_styles, "style"
    ) or [CURRENT_STYLE]
    time = _lookup(catalogs.ARCHITECTURE_TIMES, options.time, catalogs.ARCHITECTURE_TIMES[0])
    theme = _lookup(catalogs.ARCHITECTURE_THEMES, options.theme, catalogs.ARCHITECTURE_THEMES[0])
    camera = _lookup(catalogs.CAMERA_ANGLE_OPTIONS, options.camera_angle, catalogs.CAMERA_ANGLE_OPTIONS[0])

    time_name = time.name if time.prompt else "Current"
    theme_name = theme.name if theme.prompt else "None"
    source_name = sanitize_source_filename(source.filename, 40)

    tasks = []
    for i, style in enumerate(style_sequence(options, pool, rng)):
        filename = build_filename(
            context.session_id,
            [
                source_name,
                sanitize_component(options.scope.value),
                sanitize_component(style.name, 30),
                sanitize_component(time_name, 20),
                sanitize_component(theme_name, 20),
            ],
            indexed_timestamp(context.timestamp, i),
        )
        tasks.append(
            GenerationTask(
                prompt=build_prompt(style, time.prompt, theme.prompt, camera.prompt),
                images=source.images,
                image_urls=source.image_urls,
                model=options.model,
                aspect_ratio=options.aspect_ratio,
                filename=filename,
                key=ResultKey(batch_timestamp=context.timestamp, source_index=source_index, variant_index=i),
                labels={"style": style.name, "time": time_name, "theme": theme_name},
            )
        )
    return tasks
