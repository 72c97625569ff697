"""Video and timeline studios: one clip per image, or per consecutive image pair."""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from creativestudio.builders.common import BatchContext, SourceImage
from creativestudio.models.requests import VIDEO_MODEL, GenerationTask
from creativestudio.models.results import ResultKey
from creativestudio.utils.image_utils import build_filename, indexed_timestamp, sanitize_source_filename

logger = logging.getLogger(__name__)


class VideoOptions(BaseModel):
    aspect_ratio: str = "auto"
    resolution: str = "720p"
    duration: str = "5"


class VideoClip(BaseModel):
    """A still and the prompt describing how it should move."""

    model_config = ConfigDict(frozen=True)

    image: SourceImage
    prompt: str = ""


class TimelinePair(BaseModel):
    """Transition clip between two consecutive timeline images."""

    model_config = ConfigDict(frozen=True)

    start: SourceImage
    end: SourceImage
    prompt: str = ""


def _video_task(
    prompt: str,
    sources: Sequence[SourceImage],
    filename: str,
    key: ResultKey,
    options: VideoOptions,
) -> GenerationTask:
    return GenerationTask(
        prompt=prompt.strip(),
        images=tuple(blob for source in sources for blob in source.images),
        image_urls=tuple(url for source in sources for url in source.image_urls),
        model=VIDEO_MODEL,
        aspect_ratio=options.aspect_ratio,
        resolution=options.resolution,
        duration=options.duration,
        filename=filename,
        key=key,
    )


def build_video_tasks(
    clips: Sequence[VideoClip],
    context: BatchContext,
    options: Optional[VideoOptions] = None,
) -> list[GenerationTask]:
    """One task per clip that has a prompt; clips without one are skipped."""
    options = options or VideoOptions()
    tasks = []
    for index, clip in enumerate(clips):
        if not clip.prompt.strip():
            logger.warning(f"⚠️ [VideoBuilder] Skipping {clip.image.filename}: no video prompt")
            continue
        filename = build_filename(
            context.session_id,
            [sanitize_source_filename(clip.image.filename, 60)],
            indexed_timestamp(context.timestamp, index),
            extension="mp4",
        )
        key = ResultKey(batch_timestamp=context.timestamp, source_index=index, variant_index=0)
        tasks.append(_video_task(clip.prompt, [clip.image], filename, key, options))
    return tasks


def timeline_pairs(images: Sequence[SourceImage], prompts: Sequence[str] = ()) -> list[TimelinePair]:
    """Consecutive (start, end) pairs; ``prompts[i]`` belongs to pair i."""
    return [
        TimelinePair(start=start, end=end, prompt=prompts[i] if i < len(prompts) else "")
        for i, (start, end) in enumerate(zip(images, images[1:]))
    ]


def build_timeline_tasks(
    pairs: Sequence[TimelinePair],
    context: BatchContext,
    options: Optional[VideoOptions] = None,
) -> list[GenerationTask]:
    """One start/end-frame clip per pair that has a prompt."""
    options = options or VideoOptions()
    tasks = []
    for index, pair in enumerate(pairs):
        if not pair.prompt.strip():
            logger.warning(f"⚠️ [TimelineBuilder] Skipping pair {index + 1}: no video prompt")
            continue
        filename = build_filename(
            context.session_id,
            [
                "timeline",
                f"{index + 1:02d}",
                sanitize_source_filename(pair.start.filename, 30),
                sanitize_source_filename(pair.end.filename, 30),
            ],
            context.timestamp,
            extension="mp4",
        )
        key = ResultKey(batch_timestamp=context.timestamp, source_index=index, variant_index=0)
        tasks.append(_video_task(pair.prompt, [pair.start, pair.end], filename, key, options))
    return tasks
