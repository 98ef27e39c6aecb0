"""
Tests for the WebDAV mount manager.

Runs the manager against FakeSystemEffector with the secret store and fstab
in tmp_path, so every idempotency check reads and appends real files.
"""

import os
import stat
from pathlib import Path

import pytest

from cloudsetup.core.exceptions import MountError, PersistenceError, UserAbort
from cloudsetup.models import CredentialRecord, ProvisioningReport, StepOutcome
from cloudsetup.services.network_mount import WebDAVMountManager

from fakes import FakeSystemEffector

URL = "https://cloud.example.com/remote.php/dav/files/me"


def accepting_prompter(make_prompter):
    # gate: yes; address, username, password; accept
    return make_prompter(answers=["cloud.example.com", "me", "s3cret"], confirms=[True, True])


def lines(path) -> list:
    return [line for line in Path(path).read_text().splitlines() if line.strip()]


@pytest.fixture
def manager_for(settings, effector, package_hooks):
    def _build(prompter, eff=None):
        return WebDAVMountManager(settings, eff or effector, prompter, package_hooks)

    return _build


class TestFirstRun:
    """Empty secret store, first run, operator accepts."""

    def test_secret_and_fstab_written_and_mounted_once(self, settings, effector, manager_for, make_prompter):
        fstab_before = lines(settings.fstab_path)
        report = ProvisioningReport()

        outcome = manager_for(accepting_prompter(make_prompter)).reconcile(report)

        assert outcome == StepOutcome.APPLIED
        assert lines(settings.webdav_secrets_path) == [f"{URL} me s3cret"]
        fstab_after = lines(settings.fstab_path)
        assert len(fstab_after) == len(fstab_before) + 1
        assert fstab_after[-1] == f"{URL} {settings.personal_mount_path} davfs user,rw,auto 0 0"
        assert effector.mounts == [
            {"target": settings.personal_mount_path, "source": None, "fs_type": None, "options": None}
        ]
        assert effector.reloads == 1

    def test_fstab_written_before_mount(self, settings, effector, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        names = effector.names_called()
        fstab_append = effector.calls.index(("append_line", settings.fstab_path))
        assert fstab_append < names.index("reload_service_manager") < names.index("mount_filesystem")

    def test_secret_store_is_owner_only(self, settings, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        mode = stat.S_IMODE(os.stat(settings.webdav_secrets_path).st_mode)
        assert mode == 0o600

    def test_secret_store_seeded_from_template(self, settings, manager_for, make_prompter):
        Path(settings.webdav_secrets_template).write_text("# davfs2 secrets file\n")

        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        assert lines(settings.webdav_secrets_path) == ["# davfs2 secrets file", f"{URL} me s3cret"]

    def test_mount_point_created(self, settings, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        assert Path(settings.personal_mount_path).is_dir()

    def test_report_records_steps(self, manager_for, make_prompter):
        report = ProvisioningReport()

        manager_for(accepting_prompter(make_prompter)).reconcile(report)

        assert report.outcome_of("webdav.client") == StepOutcome.ALREADY_SATISFIED
        assert report.outcome_of("webdav.secret") == StepOutcome.APPLIED
        assert report.outcome_of("webdav.mount") == StepOutcome.APPLIED


class TestIdempotence:
    def test_second_run_adds_nothing(self, settings, effector, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())
        fstab_after_first = lines(settings.fstab_path)

        report = ProvisioningReport()
        manager_for(accepting_prompter(make_prompter)).reconcile(report)

        assert lines(settings.webdav_secrets_path) == [f"{URL} me s3cret"]
        assert lines(settings.fstab_path) == fstab_after_first
        assert len(effector.mounts) == 1
        assert report.outcome_of("webdav.secret") == StepOutcome.ALREADY_SATISFIED
        assert report.outcome_of("webdav.mount") == StepOutcome.ALREADY_SATISFIED

    def test_ensure_secret_entry_twice(self, settings, manager_for, make_prompter):
        manager = manager_for(make_prompter())
        record = CredentialRecord(subject=URL, username="me", secret="s3cret")

        assert manager.ensure_secret_entry(record) == StepOutcome.APPLIED
        assert manager.ensure_secret_entry(record) == StepOutcome.ALREADY_SATISFIED
        assert len(lines(settings.webdav_secrets_path)) == 1


class TestExistingFstabEntry:
    """fstab already has a line with the same source prefix."""

    def test_no_append_and_no_mount(self, settings, effector, manager_for, make_prompter):
        with open(settings.fstab_path, "a") as f:
            f.write(f"{URL} /somewhere/else davfs noauto 0 0\n")
        fstab_before = lines(settings.fstab_path)

        report = ProvisioningReport()
        manager_for(accepting_prompter(make_prompter)).reconcile(report)

        assert lines(settings.fstab_path) == fstab_before
        assert effector.mounts == []
        assert effector.reloads == 0
        assert report.outcome_of("webdav.mount") == StepOutcome.ALREADY_SATISFIED


class TestClientInstall:
    def test_missing_client_is_installed_with_notice(self, make_prompter, manager_for):
        effector = FakeSystemEffector()
        report = ProvisioningReport()

        manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(report)

        assert effector.installed == ["davfs2"]
        assert report.outcome_of("webdav.client") == StepOutcome.APPLIED
        assert any("davfs2 group" in notice for notice in report.notices)


class TestFailures:
    def test_operator_declines(self, settings, effector, manager_for, make_prompter):
        prompter = make_prompter(confirms=[False])

        with pytest.raises(UserAbort) as exc_info:
            manager_for(prompter).reconcile(ProvisioningReport())

        assert exc_info.value.exit_code == 0
        assert prompter.asked == []
        assert not Path(settings.webdav_secrets_path).exists()
        assert effector.mounts == []

    def test_blank_gate_answer_declines_by_default(self, manager_for, make_prompter):
        prompter = make_prompter(confirms=[None])

        with pytest.raises(UserAbort):
            manager_for(prompter).reconcile(ProvisioningReport())

    def test_mount_failure_is_fatal_and_keeps_fstab_line(self, settings, make_prompter, manager_for):
        effector = FakeSystemEffector(available_commands={"mount.davfs"}, fail_on={"mount_filesystem"})

        with pytest.raises(MountError) as exc_info:
            manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(ProvisioningReport())

        assert exc_info.value.exit_code == 1
        assert lines(settings.fstab_path)[-1].startswith(URL)
        assert len(effector.mounts) == 1

    def test_secret_store_write_failure_is_fatal(self, settings, make_prompter, manager_for):
        effector = FakeSystemEffector(available_commands={"mount.davfs"}, fail_on={"write_protected_file"})

        with pytest.raises(PersistenceError):
            manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(ProvisioningReport())

        assert effector.mounts == []

    def test_reload_failure_is_not_fatal(self, make_prompter, manager_for):
        effector = FakeSystemEffector(available_commands={"mount.davfs"}, fail_on={"reload_service_manager"})

        outcome = manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(ProvisioningReport())

        assert outcome == StepOutcome.APPLIED
        assert len(effector.mounts) == 1


class TestSeeding:
    def test_configured_address_and_user_are_not_prompted(self, settings, effector, package_hooks, make_prompter):
        seeded = settings.model_copy(update={"webdav_address": "cloud.example.com", "webdav_username": "me"})
        prompter = make_prompter(answers=["s3cret"], confirms=[True, True])

        WebDAVMountManager(seeded, effector, prompter, package_hooks).reconcile(ProvisioningReport())

        assert [label for label, _ in prompter.asked] == ["Password"]
        assert lines(settings.webdav_secrets_path) == [f"{URL} me s3cret"]

    def test_url_preview_shown(self, manager_for, make_prompter):
        prompter = accepting_prompter(make_prompter)

        manager_for(prompter).reconcile(ProvisioningReport())

        assert f"URL: {URL}" in prompter.shown
