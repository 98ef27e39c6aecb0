import argparse
import logging
import sys
from typing import List, Optional

from .config import Settings, resolve_settings
from .core.error_handler import install_error_handler
from .core.exceptions import ProvisioningError
from .dependencies import get_effector, get_mount_service
from .logging_config import log_message, setup_logging, start_log_buffer
from .models import ProvisioningReport
from .utils.host_config import list_all_settings_files

ERROR_CONTEXT = "Failed to set up cloud client"

DESCRIPTION = (
    "Set up remote storage on this workstation: mount a WebDAV cloud and an "
    "SMB share from another host, link the other host's cloud folder locally "
    "and schedule an hourly one-way mirror into it."
)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="cloud-setup", description=DESCRIPTION)
    p.add_argument("-c", "--config", default=None, help="Override file with key=value settings")
    p.add_argument("-d", "--debug", action="store_true", help="Enable debug output messages for detailed logging")
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show standard output from commands (suppressed by default)",
    )
    return p


def run(settings: Settings) -> ProvisioningReport:
    """Validate privileges once, then reconcile mounts, bridge and mirror job."""
    get_effector(settings).validate_privileges()
    report = get_mount_service(settings).run()
    log_summary(report)
    return report


def log_summary(report: ProvisioningReport) -> None:
    for step in report.steps:
        detail = f" ({step.detail})" if step.detail else ""
        logging.info(f"{step.step}: {step.outcome.value}{detail}")
    for notice in report.notices:
        log_message(notice, "WARNING")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    install_error_handler(ERROR_CONTEXT)

    startup_log = start_log_buffer()
    settings = resolve_settings(args.config, debug=args.debug, verbose=args.verbose)
    setup_logging(settings)
    startup_log.replay()
    startup_log.close()
    logging.debug(f"Override files available: {list_all_settings_files() or 'none'}")

    try:
        run(settings)
    except ProvisioningError as e:
        if e.exit_code == 0:
            log_message(str(e), "INFO")
        else:
            log_message(f"{ERROR_CONTEXT}: {e}", "ERROR")
        return e.exit_code

    log_message("Cloud client setup completed.", "INFO")
    return 0
