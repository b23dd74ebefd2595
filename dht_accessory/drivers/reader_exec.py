from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from ..domain.errors import ReaderProcessError
from ..domain.models import RawSample

logger = logging.getLogger(__name__)


class SubprocessReaderInvoker:
    """
    Runs an external reader program and captures its stdout.
    Responsible for: spawning, waiting, exit-status checks. No parsing.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def invoke(
        self,
        command: str,
        args: Sequence[str] = (),
        timeout_s: Optional[float] = None,
    ) -> RawSample:
        """
        Returns a RawSample; a process-level failure is carried in
        ``RawSample.error`` rather than raised.
        """
        logger.debug("Exec: %s %s", command, " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            # not found, not executable, ...
            return RawSample(stdout="", error=ReaderProcessError(command, args, cause=e))

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError:
            await _kill(proc)
            return RawSample(
                stdout="",
                error=ReaderProcessError(
                    command, args, cause=TimeoutError(f"no output within {timeout_s}s")
                ),
            )
        except asyncio.CancelledError:
            # poller teardown; the reader must not outlive it
            await _kill(proc)
            raise

        out = stdout.decode(self._encoding, errors="replace")
        if proc.returncode != 0:
            err = stderr.decode(self._encoding, errors="replace")
            return RawSample(
                stdout=out,
                error=ReaderProcessError(command, args, returncode=proc.returncode, stderr=err),
            )
        return RawSample(stdout=out)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass  # already exited
    await proc.wait()
