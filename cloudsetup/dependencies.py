from typing import Any, Dict, Mapping

from .config import Settings
from .services.credentials import Prompter, RichPrompter
from .services.network_mount import NetworkMountService
from .services.system import LocalSystemEffector, PackageHooks, SystemEffector, default_package_hooks

# Instances shared across one run; built once at startup
_singletons: Dict[str, Any] = {}


def get_effector(settings: Settings) -> SystemEffector:
    if "effector" not in _singletons:
        _singletons["effector"] = LocalSystemEffector(verbose=settings.verbose)
    return _singletons["effector"]


def get_prompter() -> Prompter:
    if "prompter" not in _singletons:
        _singletons["prompter"] = RichPrompter()
    return _singletons["prompter"]


def get_package_hooks() -> Mapping[str, PackageHooks]:
    if "package_hooks" not in _singletons:
        _singletons["package_hooks"] = default_package_hooks()
    return _singletons["package_hooks"]


def get_mount_service(settings: Settings) -> NetworkMountService:
    if "mount_service" not in _singletons:
        _singletons["mount_service"] = NetworkMountService(
            settings,
            get_effector(settings),
            get_prompter(),
            get_package_hooks(),
        )
    return _singletons["mount_service"]


def override_dependency(name: str, instance: Any) -> None:
    """Replace a shared instance before it is first requested (used by tests)."""
    _singletons[name] = instance


def reset_singletons() -> None:
    _singletons.clear()
