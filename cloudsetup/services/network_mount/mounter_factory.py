"""Mount Manager Factory - maps mount kinds to manager implementations."""

from typing import Dict, List, Mapping, Optional, Type

from ...config import Settings
from ...models import MountKind
from ..credentials import Prompter
from ..system import PackageHooks, SystemEffector
from .base_mounter import BaseMountManager
from .smb_mounter import SMBMountManager
from .webdav_mounter import WebDAVMountManager


class UnsupportedMountKindError(Exception):
    """Raised when no manager is registered for a mount kind."""
    pass


def default_mount_managers() -> Dict[MountKind, Type[BaseMountManager]]:
    return {
        MountKind.WEBDAV: WebDAVMountManager,
        MountKind.SMB: SMBMountManager,
    }


class MountManagerFactory:
    """Creates the managers selected in settings, in the configured order."""

    def __init__(self, registry: Optional[Mapping[MountKind, Type[BaseMountManager]]] = None):
        self._registry = dict(registry or default_mount_managers())

    def create_manager(
        self,
        kind: MountKind,
        settings: Settings,
        effector: SystemEffector,
        prompter: Prompter,
        package_hooks: Mapping[str, PackageHooks],
    ) -> BaseMountManager:
        manager_cls = self._registry.get(kind)
        if manager_cls is None:
            raise UnsupportedMountKindError(f"No mount manager registered for: {kind.value}")
        return manager_cls(settings, effector, prompter, package_hooks)

    def create_managers(
        self,
        settings: Settings,
        effector: SystemEffector,
        prompter: Prompter,
        package_hooks: Mapping[str, PackageHooks],
    ) -> List[BaseMountManager]:
        return [
            self.create_manager(kind, settings, effector, prompter, package_hooks)
            for kind in settings.selected_mounts
        ]
