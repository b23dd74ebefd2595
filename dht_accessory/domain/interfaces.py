from __future__ import annotations
from typing import Awaitable, Optional, Protocol, Sequence, Union, runtime_checkable
from .models import RawSample, Reading


@runtime_checkable
class ReaderInvoker(Protocol):
    async def invoke(
        self,
        command: str,
        args: Sequence[str],
        timeout_s: Optional[float] = None,
    ) -> RawSample:
        ...


@runtime_checkable
class ReadingSink(Protocol):
    def __call__(self, reading: Reading) -> Union[None, Awaitable[None]]:
        ...
