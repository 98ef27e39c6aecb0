"""Process-wide handler for errors that escape the provisioning run."""

import logging
import sys
from types import TracebackType
from typing import Optional, Type

_installed_context: Optional[str] = None


def install_error_handler(context: str) -> None:
    """
    Install the handler once, with a human-readable failure context.

    Uncaught exceptions are logged as "<context>: <error>" with the traceback
    before the interpreter exits with status 1. KeyboardInterrupt keeps the
    default behaviour.
    """
    global _installed_context
    if _installed_context is not None:
        logging.debug(f"Error handler already installed ({_installed_context})")
        return

    _installed_context = context

    def _handle(
        exc_type: Type[BaseException],
        exc_value: BaseException,
        exc_traceback: Optional[TracebackType],
    ) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("cloudsetup").critical(
            f"{context}: {exc_value}",
            exc_info=(exc_type, exc_value, exc_traceback),
        )

    sys.excepthook = _handle


def installed_context() -> Optional[str]:
    return _installed_context


def reset_error_handler() -> None:
    """Restore the default excepthook (used by tests)."""
    global _installed_context
    _installed_context = None
    sys.excepthook = sys.__excepthook__
