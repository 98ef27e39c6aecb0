from .path_translation import drive_mount_point, split_drive, translate_foreign_path
from .symlink_bridge import SymlinkBridgeResolver

__all__ = [
    "SymlinkBridgeResolver",
    "translate_foreign_path",
    "split_drive",
    "drive_mount_point",
]
