"""
Client package installation with per-package hooks.

Hooks are looked up in a registry keyed by package name. The registry is
built once at startup (see dependencies.get_package_hooks) and handed to the
mount managers, so no code branches on package names elsewhere.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional

from ...core.exceptions import InstallationError
from ...models import StepOutcome
from .command import CommandError
from .effector import SystemEffector

NONINTERACTIVE_ENV: Mapping[str, str] = {"DEBIAN_FRONTEND": "noninteractive"}

PreInstallHook = Callable[[SystemEffector], None]
# Post-install hooks return caller-visible notices
PostInstallHook = Callable[[SystemEffector, str], List[str]]


@dataclass(frozen=True)
class PackageHooks:
    pre_install: Optional[PreInstallHook] = None
    post_install: Optional[PostInstallHook] = None


@dataclass
class InstallResult:
    outcome: StepOutcome
    notices: List[str] = field(default_factory=list)


def preseed_davfs2(effector: SystemEffector) -> None:
    # Answers the "allow unprivileged users to mount" question up front
    effector.set_debconf_selection("davfs2 davfs2/suid_file boolean true")


def join_davfs2_group(effector: SystemEffector, user: str) -> List[str]:
    try:
        effector.add_user_to_group(user, "davfs2")
    except CommandError as e:
        logging.warning(f"Could not add {user} to the davfs2 group: {e}")
        return [f"Add {user} to the davfs2 group manually (usermod -aG davfs2 {user})."]

    notice = (
        f"User {user} was added to the davfs2 group. The membership only takes "
        f"effect after logging out and back in."
    )
    logging.warning(notice)
    return [notice]


def default_package_hooks() -> Dict[str, PackageHooks]:
    return {
        "davfs2": PackageHooks(pre_install=preseed_davfs2, post_install=join_davfs2_group),
        "cifs-utils": PackageHooks(),
    }


def ensure_package(
    effector: SystemEffector,
    binary: str,
    package: str,
    user: str,
    hooks: Mapping[str, PackageHooks],
) -> InstallResult:
    """Install package non-interactively unless binary is already available."""
    if effector.is_command_available(binary):
        logging.debug(f"{package} is already installed ({binary} found).")
        return InstallResult(StepOutcome.ALREADY_SATISFIED)

    package_hooks = hooks.get(package, PackageHooks())
    logging.info(f"Installing {package}...")

    try:
        if package_hooks.pre_install:
            package_hooks.pre_install(effector)
        effector.install_package(package, env=NONINTERACTIVE_ENV)
    except CommandError as e:
        raise InstallationError(package, str(e)) from e

    logging.info(f"{package} installed successfully.")

    notices: List[str] = []
    if package_hooks.post_install:
        notices = package_hooks.post_install(effector, user)
    return InstallResult(StepOutcome.APPLIED, notices)
