"""
Sync Scheduler - one immediate mirror run plus an hourly cron job.

Dedup of the cron job is a literal text search for the composed command
(" >> <log> 2>&1" included). Changing the log path or the command's
formatting produces a second line instead of replacing the first.
"""

import logging
from pathlib import Path
from typing import List

from ...config import Settings
from ...core.exceptions import PersistenceError
from ...models import ProvisioningReport, StepOutcome, SyncJob
from ...utils.file_operations import contains_literal, directory_has_content
from ..system import CommandError, SystemEffector
from .mirror_command import build_mirror_argv, mirror_command_text


class SyncScheduler:
    def __init__(self, settings: Settings, effector: SystemEffector):
        self._settings = settings
        self._effector = effector

    def build_job(self, argv: List[str]) -> SyncJob:
        return SyncJob(
            command=mirror_command_text(argv),
            log_path=self._settings.sync_log_path,
            schedule=self._settings.sync_schedule,
        )

    def schedule(self, destination: Path, report: ProvisioningReport) -> StepOutcome:
        source = Path(self._settings.mirror_source_path)

        if not destination.is_dir():
            logging.warning(f"Mirror destination {destination} is not a directory. Skipping mirror job.")
            report.record("sync", StepOutcome.SKIPPED, f"{destination} missing")
            return StepOutcome.SKIPPED

        # An empty source would make rsync --delete wipe the destination
        if not directory_has_content(source, ignore=[self._settings.sync_reserved_dir]):
            logging.warning(f"Mirror source {source} is empty. Skipping mirror job.")
            report.record("sync", StepOutcome.SKIPPED, f"{source} empty")
            return StepOutcome.SKIPPED

        argv = build_mirror_argv(source, destination, self._settings.sync_reserved_dir)
        logging.info(f"Mirroring {source} -> {destination}...")
        result = self._effector.run_mirror(argv)
        if result.ok:
            logging.info("Mirror completed.")
        else:
            logging.error(f"Mirror run failed ({result.returncode}): {result.stderr.strip()}")

        outcome = self.register_job(self.build_job(argv))
        report.record("sync", outcome, str(destination))
        return outcome

    def register_job(self, job: SyncJob) -> StepOutcome:
        """Append the job to the crontab unless its literal command is already there."""
        try:
            current = self._effector.read_scheduled_jobs()
        except CommandError as e:
            raise PersistenceError("crontab", f"cannot read the current crontab: {e}") from e

        if contains_literal(current, job.scheduled_command):
            logging.info("Mirror job is already scheduled in the crontab.")
            return StepOutcome.ALREADY_SATISFIED

        try:
            self._effector.make_directory(str(Path(job.log_path).parent))
            self._effector.register_scheduled_job(job.crontab_line())
        except (CommandError, OSError) as e:
            raise PersistenceError("crontab", str(e)) from e

        logging.info(f"Mirror job scheduled ({job.schedule}), logging to {job.log_path}.")
        return StepOutcome.APPLIED
