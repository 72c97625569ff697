"""Per-studio task builders: user selections in, GenerationTasks out."""

from creativestudio.builders.ad_cloner import AdClonerOptions, build_ad_cloner_tasks
from creativestudio.builders.architecture import ArchitectureOptions, build_architecture_tasks
from creativestudio.builders.baby import BabyOptions, build_baby_tasks
from creativestudio.builders.common import BatchContext, Option, OptionCategory, SourceImage, resolve_pool
from creativestudio.builders.hair import HairOptions, build_hair_tasks
from creativestudio.builders.image_studio import (
    ImageStudioOptions,
    ProStudioOptions,
    build_image_studio_tasks,
    build_pro_studio_tasks,
)
from creativestudio.builders.video import (
    TimelinePair,
    VideoClip,
    VideoOptions,
    build_timeline_tasks,
    build_video_tasks,
    timeline_pairs,
)

__all__ = [
    "AdClonerOptions",
    "ArchitectureOptions",
    "BabyOptions",
    "BatchContext",
    "HairOptions",
    "ImageStudioOptions",
    "Option",
    "OptionCategory",
    "ProStudioOptions",
    "SourceImage",
    "TimelinePair",
    "VideoClip",
    "VideoOptions",
    "build_ad_cloner_tasks",
    "build_architecture_tasks",
    "build_baby_tasks",
    "build_hair_tasks",
    "build_image_studio_tasks",
    "build_pro_studio_tasks",
    "build_timeline_tasks",
    "build_video_tasks",
    "resolve_pool",
    "timeline_pairs",
]
