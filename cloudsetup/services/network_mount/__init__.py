"""
Network Mount Module

Components:
- NetworkMountService: orchestrator (mount managers -> symlink bridge -> mirror job)
- BaseMountManager: abstract base class with shared fstab reconciliation
- WebDAVMountManager: davfs2 client, secret store and fstab
- SMBMountManager: CIFS credentials file, mount and fstab
- MountManagerFactory: mount kind registry
- MountConfigHandler: settings -> MountSpec / FstabEntry
"""

from .base_mounter import BaseMountManager
from .mount_config import MountConfigHandler
from .mount_service import NetworkMountService
from .mounter_factory import MountManagerFactory, UnsupportedMountKindError
from .smb_mounter import SMBMountManager
from .webdav_mounter import WebDAVMountManager

__all__ = [
    "NetworkMountService",
    "BaseMountManager",
    "WebDAVMountManager",
    "SMBMountManager",
    "MountManagerFactory",
    "UnsupportedMountKindError",
    "MountConfigHandler",
]
