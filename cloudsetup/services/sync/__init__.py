from .mirror_command import build_mirror_argv, mirror_command_text
from .sync_scheduler import SyncScheduler

__all__ = [
    "SyncScheduler",
    "build_mirror_argv",
    "mirror_command_text",
]
