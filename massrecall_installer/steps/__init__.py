from .step_10_prepare_target import PrepareTargetStep
from .step_20_acquire_archives import AcquireArchivesStep
from .step_30_extract_archives import ExtractArchivesStep
from .step_40_place_content import PlaceContentStep
from .step_50_create_shortcut import CreateShortcutStep

__all__ = [
    "PrepareTargetStep",
    "AcquireArchivesStep",
    "ExtractArchivesStep",
    "PlaceContentStep",
    "CreateShortcutStep",
]
