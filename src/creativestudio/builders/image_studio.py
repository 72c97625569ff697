"""Image studio and pro studio: every input image crossed with every prompt."""

from typing import Optional, Sequence

from pydantic import BaseModel, Field

from creativestudio.builders.common import BatchContext, SourceImage, compose_prompt
from creativestudio.models.errors import InvalidInputError
from creativestudio.models.requests import GenerationTask, ImageModel
from creativestudio.models.results import ResultKey
from creativestudio.utils.image_utils import base_filename, sanitize_component

DEFAULT_FILENAME_TEMPLATE = "{original_filename}_{short_id}_after_{set_id}_{timestamp}_{version_index}"


class ImageStudioOptions(BaseModel):
    """Prompts and output settings of the image studio."""

    prompts: list[str] = Field(..., min_length=1)
    prepend_prompt: str = ""
    append_prompt: str = ""
    model: str = ImageModel.NANO_BANANA.value
    aspect_ratio: str = "auto"
    width: Optional[int] = Field(None, ge=1)
    height: Optional[int] = Field(None, ge=1)
    image_size: Optional[str] = None
    filename_template: str = DEFAULT_FILENAME_TEMPLATE


class ProStudioOptions(BaseModel):
    """Prompts and output settings of the pro studio (all images feed every prompt)."""

    prompts: list[str] = Field(..., min_length=1)
    prepend_prompt: str = ""
    append_prompt: str = ""
    num_images: int = Field(1, ge=1, le=4, description="Images generated per prompt")
    resolution: str = "1K"
    aspect_ratio: str = "auto"
    model: str = ImageModel.NANO_BANANA_PRO.value
    filename_template: str = DEFAULT_FILENAME_TEMPLATE


def _check_prompts(prompts: Sequence[str]) -> None:
    if any(not prompt.strip() for prompt in prompts):
        raise InvalidInputError("Please fill all prompts.")


def render_filename(
    template: str,
    source: SourceImage,
    context: BatchContext,
    version_index: int,
    image_index: int = 0,
) -> str:
    """Fill a user filename template; keeps the source extension (png when it has none)."""
    name = source.filename
    extension = name.rsplit(".", 1)[1] if "." in name else "png"
    stem = base_filename(name, fallback=name).removeprefix("cropped_")
    short_id = sanitize_component(source.short_id) if source.short_id else f"img{image_index + 1}"
    filename = (
        template.replace("{timestamp}", context.timestamp)
        .replace("{set_id}", context.session_id)
        .replace("{original_filename}", sanitize_component(stem))
        .replace("{short_id}", short_id)
        .replace("{version_index}", str(version_index + 1))
    )
    return f"{filename}.{extension}"


def _dedupe_filenames(tasks: list[GenerationTask]) -> list[GenerationTask]:
    # Templates without {short_id} can still collide.
    seen: set[str] = set()
    unique = []
    for task in tasks:
        filename = task.filename
        counter = 2
        while filename in seen:
            stem, extension = task.filename.rsplit(".", 1)
            filename = f"{stem}_{counter}.{extension}"
            counter += 1
        seen.add(filename)
        unique.append(task if filename == task.filename else task.model_copy(update={"filename": filename}))
    return unique


def build_image_studio_tasks(
    options: ImageStudioOptions,
    sources: Sequence[SourceImage],
    context: BatchContext,
) -> list[GenerationTask]:
    """One task per (image, prompt) pair, keyed ``timestamp-imageIndex-promptIndex``."""
    if not sources:
        raise InvalidInputError("Please upload images and fill all prompts.")
    _check_prompts(options.prompts)

    tasks = []
    for image_index, source in enumerate(sources):
        for prompt_index, prompt in enumerate(options.prompts):
            tasks.append(
                GenerationTask(
                    prompt=compose_prompt(options.prepend_prompt, prompt, options.append_prompt),
                    images=source.images,
                    image_urls=source.image_urls,
                    model=options.model,
                    aspect_ratio=options.aspect_ratio,
                    width=options.width,
                    height=options.height,
                    image_size=options.image_size,
                    filename=render_filename(
                        options.filename_template, source, context, prompt_index, image_index=image_index
                    ),
                    key=ResultKey(
                        batch_timestamp=context.timestamp, source_index=image_index, variant_index=prompt_index
                    ),
                    labels={"prompt_index": str(prompt_index + 1)},
                )
            )
    return _dedupe_filenames(tasks)


def build_pro_studio_tasks(
    options: ProStudioOptions,
    sources: Sequence[SourceImage],
    context: BatchContext,
) -> list[GenerationTask]:
    """
    ``num_images`` single-image tasks per prompt, every input image attached.

    Keys are ``timestamp-promptIndex-imageSlot``, so each output slot fails and
    retries on its own.
    """
    if not sources:
        raise InvalidInputError("Please upload at least one image.")
    _check_prompts(options.prompts)

    images = tuple(blob for source in sources for blob in source.images)
    image_urls = tuple(url for source in sources for url in source.image_urls)

    tasks = []
    for prompt_index, prompt in enumerate(options.prompts):
        final_prompt = compose_prompt(options.prepend_prompt, prompt, options.append_prompt)
        for slot in range(options.num_images):
            filename = render_filename(options.filename_template, sources[0], context, prompt_index)
            if options.num_images > 1:
                stem, extension = filename.rsplit(".", 1)
                filename = f"{stem}_{slot + 1}.{extension}"
            tasks.append(
                GenerationTask(
                    prompt=final_prompt,
                    images=images,
                    image_urls=image_urls,
                    model=options.model,
                    aspect_ratio=options.aspect_ratio,
                    resolution=options.resolution,
                    num_images=1,
                    filename=filename,
                    key=ResultKey(batch_timestamp=context.timestamp, source_index=prompt_index, variant_index=slot),
                    labels={"prompt_index": str(prompt_index + 1)},
                )
            )
    return _dedupe_filenames(tasks)
