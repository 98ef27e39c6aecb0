"""
Tests for the SMB/CIFS mount manager.
"""

import os
import stat
from pathlib import Path

import pytest

from cloudsetup.core.exceptions import MountError, PersistenceError
from cloudsetup.models import ProvisioningReport, StepOutcome
from cloudsetup.services.network_mount import SMBMountManager

from fakes import FakeSystemEffector


def accepting_prompter(make_prompter):
    # host, share, username, password; accept
    return make_prompter(answers=["desktop.local", "C$", "me", "s3cret"], confirms=[True])


def lines(path) -> list:
    return [line for line in Path(path).read_text().splitlines() if line.strip()]


@pytest.fixture
def manager_for(settings, effector, package_hooks):
    def _build(prompter, eff=None):
        return SMBMountManager(settings, eff or effector, prompter, package_hooks)

    return _build


class TestMountPointGuard:
    """The foreign mount point is already an active mount."""

    def test_manager_is_skipped_entirely(self, settings, make_prompter, manager_for):
        effector = FakeSystemEffector(active_mounts={settings.foreign_mount_point})
        prompter = make_prompter()
        fstab_before = lines(settings.fstab_path)
        report = ProvisioningReport()

        outcome = manager_for(prompter, eff=effector).reconcile(report)

        assert outcome == StepOutcome.SKIPPED
        assert prompter.asked == []
        assert prompter.questions == []
        assert effector.calls == []
        assert lines(settings.fstab_path) == fstab_before
        assert report.outcome_of("smb.mount") == StepOutcome.SKIPPED


class TestFirstRun:
    def test_credentials_file_written_owner_only(self, settings, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        path = settings.smb_credentials_path
        assert Path(path).read_text() == "username=me\npassword=s3cret\n"
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_mount_uses_protocol_and_ownership_options(self, settings, effector, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        assert effector.mounts == [
            {
                "target": settings.foreign_mount_point,
                "source": "//desktop.local/C$",
                "fs_type": "cifs",
                "options": f"credentials={settings.smb_credentials_path},vers=3.0,uid=1000,gid=1000",
            }
        ]
        assert effector.privileged_dirs == [settings.foreign_mount_point]

    def test_fstab_line_appended_after_mount(self, settings, effector, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())

        assert lines(settings.fstab_path)[-1] == (
            f"//desktop.local/C$ {settings.foreign_mount_point} cifs "
            f"credentials={settings.smb_credentials_path},vers=3.0,uid=1000,gid=1000 0 0"
        )
        names = effector.names_called()
        assert names.index("mount_filesystem") < effector.calls.index(("append_line", settings.fstab_path))

    def test_client_installed_when_missing(self, settings, make_prompter, manager_for):
        effector = FakeSystemEffector()
        report = ProvisioningReport()

        manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(report)

        assert effector.installed == ["cifs-utils"]
        assert report.outcome_of("smb.client") == StepOutcome.APPLIED

    def test_host_with_slashes_is_normalised(self, settings, effector, manager_for, make_prompter):
        prompter = make_prompter(answers=["//desktop.local/", "/Users/", "me", "pw"], confirms=[True])

        manager_for(prompter).reconcile(ProvisioningReport())

        assert effector.mounts[0]["source"] == "//desktop.local/Users"


class TestFstabIdempotence:
    def test_existing_share_line_is_kept(self, settings, effector, manager_for, make_prompter):
        with open(settings.fstab_path, "a") as f:
            f.write("//desktop.local/C$ /mnt/old cifs guest 0 0\n")
        fstab_before = lines(settings.fstab_path)
        report = ProvisioningReport()

        manager_for(accepting_prompter(make_prompter)).reconcile(report)

        assert lines(settings.fstab_path) == fstab_before
        assert report.outcome_of("smb.fstab") == StepOutcome.ALREADY_SATISFIED

    def test_second_run_is_skipped_by_guard(self, settings, effector, manager_for, make_prompter):
        manager_for(accepting_prompter(make_prompter)).reconcile(ProvisioningReport())
        fstab_after_first = lines(settings.fstab_path)

        # The fake marks the target as mounted after the first run
        second_prompter = make_prompter()
        outcome = manager_for(second_prompter).reconcile(ProvisioningReport())

        assert outcome == StepOutcome.SKIPPED
        assert lines(settings.fstab_path) == fstab_after_first
        assert len(effector.mounts) == 1


class TestFailures:
    def test_credentials_write_failure_is_fatal(self, make_prompter, manager_for):
        effector = FakeSystemEffector(available_commands={"mount.cifs"}, fail_on={"write_protected_file"})

        with pytest.raises(PersistenceError) as exc_info:
            manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(ProvisioningReport())

        assert exc_info.value.exit_code == 1
        assert effector.mounts == []

    def test_mount_point_creation_failure_is_fatal(self, make_prompter, manager_for):
        effector = FakeSystemEffector(available_commands={"mount.cifs"}, fail_on={"make_directory"})

        with pytest.raises(MountError):
            manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(ProvisioningReport())

        assert effector.mounts == []

    def test_mount_failure_is_fatal_and_leaves_fstab_untouched(self, settings, make_prompter, manager_for):
        effector = FakeSystemEffector(available_commands={"mount.cifs"}, fail_on={"mount_filesystem"})
        fstab_before = lines(settings.fstab_path)

        with pytest.raises(MountError):
            manager_for(accepting_prompter(make_prompter), eff=effector).reconcile(ProvisioningReport())

        assert lines(settings.fstab_path) == fstab_before


class TestSeeding:
    def test_configured_host_share_and_user_are_not_prompted(self, settings, effector, package_hooks, make_prompter):
        seeded = settings.model_copy(update={"smb_host": "nas", "smb_share": "Users", "smb_username": "me"})
        prompter = make_prompter(answers=["pw"], confirms=[True])

        SMBMountManager(seeded, effector, prompter, package_hooks).reconcile(ProvisioningReport())

        assert [label for label, _ in prompter.asked] == ["Password"]
        assert effector.mounts[0]["source"] == "//nas/Users"
