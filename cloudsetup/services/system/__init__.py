"""
System access layer.

Everything that touches the host (packages, mounts, fstab, crontab, files
outside the working tree) goes through a SystemEffector so the
reconciliation logic above it can run against a fake.
"""

from .command import CmdResult, CommandError, run_command
from .effector import LocalSystemEffector, SystemEffector
from .package_hooks import PackageHooks, default_package_hooks, ensure_package

__all__ = [
    "CmdResult",
    "CommandError",
    "run_command",
    "SystemEffector",
    "LocalSystemEffector",
    "PackageHooks",
    "default_package_hooks",
    "ensure_package",
]
