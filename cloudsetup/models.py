import shlex
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


MASKED_SECRET = "********"


class MountKind(str, Enum):
    """Remote storage protocols the mount managers know how to reconcile."""

    WEBDAV = "webdav"
    SMB = "smb"


class StepOutcome(str, Enum):
    """Result of a single reconciliation step"""

    APPLIED = "APPLIED"  # State was missing and has been written
    ALREADY_SATISFIED = "ALREADY_SATISFIED"  # Idempotency check found existing state
    SKIPPED = "SKIPPED"  # Precondition not met, nothing attempted


class CredentialRecord(BaseModel):
    """
    Credentials for one remote subject.

    subject is the WebDAV URL or the SMB ``host/share`` string. The secret is
    held as a SecretStr so it never shows up in reprs or log lines.
    """

    model_config = ConfigDict(frozen=True)

    subject: str
    username: str
    secret: SecretStr

    def secret_store_line(self) -> str:
        return f"{self.subject} {self.username} {self.secret.get_secret_value()}"

    def smb_credentials_text(self) -> str:
        return (
            f"username={self.username}\n"
            f"password={self.secret.get_secret_value()}\n"
        )


class MountSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MountKind
    remote_address: str
    remote_share_path: str = ""
    local_mount_point: str
    credential_ref: str

    @property
    def source(self) -> str:
        """Literal fstab source, also the uniqueness key for persistence checks."""
        if self.kind == MountKind.SMB:
            return f"//{self.remote_address}/{self.remote_share_path.strip('/')}"
        return self.remote_address


class FstabEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    fs_type: str
    options: str
    dump: int = 0
    passno: int = 0

    def render(self) -> str:
        return f"{self.source} {self.target} {self.fs_type} {self.options} {self.dump} {self.passno}"


class SymlinkBridge(BaseModel):
    model_config = ConfigDict(frozen=True)

    local_path: Path
    resolved_target: Path


class SyncJob(BaseModel):
    """Recurring mirror job as registered with cron."""

    model_config = ConfigDict(frozen=True)

    command: str
    log_path: str
    schedule: str = "0 * * * *"

    @property
    def scheduled_command(self) -> str:
        """Composed command text as it appears in the crontab, also the literal dedup key."""
        composed = f"{self.command} >> {shlex.quote(self.log_path)} 2>&1"
        # cron turns an unescaped % into a newline
        return composed.replace("%", "\\%")

    def crontab_line(self) -> str:
        return f"{self.schedule} {self.scheduled_command}"


class StepResult(BaseModel):
    step: str
    outcome: StepOutcome
    detail: str = ""


class ProvisioningReport(BaseModel):
    """Summary of one run, logged by the CLI at the end."""

    steps: List[StepResult] = Field(default_factory=list)
    notices: List[str] = Field(default_factory=list)
    bridge: Optional[SymlinkBridge] = None

    def record(self, step: str, outcome: StepOutcome, detail: str = "") -> StepResult:
        result = StepResult(step=step, outcome=outcome, detail=detail)
        self.steps.append(result)
        return result

    def outcome_of(self, step: str) -> Optional[StepOutcome]:
        for result in reversed(self.steps):
            if result.step == step:
                return result.outcome
        return None
