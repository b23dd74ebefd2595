from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import StatusOutcome


class SensorError(Exception):
    """Base class for every failure that can replace a channel value."""


class ReaderProcessError(SensorError):
    """The reader program could not be run or exited abnormally."""

    def __init__(
        self,
        command: str,
        args: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
        cause: Optional[BaseException] = None,
    ) -> None:
        self.command = command
        self.args_list = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        cmdline = " ".join((self.command, *self.args_list))
        if self.returncode is None:
            return f"Command failed: {cmdline}: {self.cause}"
        detail = f"Command failed: {cmdline} (exit {self.returncode})"
        if self.stderr:
            detail += f": {self.stderr.strip()}"
        return detail


class ReadingParseError(SensorError):
    def __init__(self, channel: str, token: Optional[str]) -> None:
        self.channel = channel
        self.token = token
        super().__init__(f"Unparseable {channel} value: {token!r}")


class SensorStatusError(SensorError):
    def __init__(self, outcome: "StatusOutcome", status_code: Optional[int]) -> None:
        self.outcome = outcome
        self.status_code = status_code
        if outcome.value == "timeout":
            msg = f"dht22 read timeout: status code: {status_code}"
        else:
            msg = f"dht22 read failed with status code: {status_code}"
        super().__init__(msg)
