"""Ad cloner: one edit task per ad variation, sent to the native image model."""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from creativestudio.builders.common import BatchContext, SourceImage
from creativestudio.models.errors import InvalidInputError
from creativestudio.models.requests import GenerationTask, ImageModel
from creativestudio.models.responses import AdVariation
from creativestudio.models.results import ResultKey
from creativestudio.utils.image_utils import sanitize_component

logger = logging.getLogger(__name__)


class AdClonerOptions(BaseModel):
    """Image settings of the ad cloner."""

    model: str = ImageModel.GEMINI_FLASH_IMAGE.value
    aspect_ratio: Optional[str] = Field(None, description="Output aspect ratio; the model decides when unset")


def ad_filename(context: BatchContext, title: str, variation_index: int, generation_index: int = 0) -> str:
    clean_title = sanitize_component(title.split("||")[0].strip(), 50)
    return f"{context.session_id}_{clean_title}_var{variation_index + 1}_gen{generation_index + 1}_{context.timestamp}.jpg"


def build_ad_cloner_tasks(
    variations: Sequence[AdVariation],
    ad_image: SourceImage,
    subject_images: Sequence[SourceImage],
    context: BatchContext,
    options: Optional[AdClonerOptions] = None,
    indices: Optional[Sequence[int]] = None,
) -> list[GenerationTask]:
    """
    One task per variation, keyed ``timestamp-0-variationIndex``.

    Every task carries the ad image first and then the subject images, all
    inline. ``indices`` limits the batch to some variations (e.g. the ones
    that have no image yet); keys and filenames keep the variation's position.
    """
    options = options or AdClonerOptions()
    if not ad_image.images:
        raise InvalidInputError("Original ad image is required.")

    images = (*ad_image.images, *(blob for subject in subject_images for blob in subject.images))
    wanted = range(len(variations)) if indices is None else indices

    tasks = []
    for index in wanted:
        if not 0 <= index < len(variations):
            raise InvalidInputError(f"No ad variation {index + 1}")
        variation = variations[index]
        if not variation.prompt.strip():
            logger.warning(f"⚠️ [AdClonerBuilder] Skipping variation {index + 1}: no edit prompt")
            continue
        tasks.append(
            GenerationTask(
                prompt=variation.prompt,
                images=images,
                model=options.model,
                aspect_ratio=options.aspect_ratio or "auto",
                filename=ad_filename(context, variation.title, index),
                key=ResultKey(batch_timestamp=context.timestamp, source_index=0, variant_index=index),
                labels={"variation": variation.display_title},
            )
        )
    return tasks
