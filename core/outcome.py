"""
Explicit results for best-effort steps.

Extraction, scoring and notification may fail without failing the request.
Instead of swallowing exceptions at each call site, those calls run through
``attempt`` and hand back an ``Outcome`` which the caller inspects and logs.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from core.exceptions import EnrichmentFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the failure that prevented it."""

    value: Optional[T] = None
    error: Optional[EnrichmentFailure] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: EnrichmentFailure) -> "Outcome[T]":
        return cls(error=error)

    @classmethod
    def skip(cls) -> "Outcome[T]":
        return cls(skipped=True)

    def value_or(self, default: T) -> T:
        return self.value if self.ok else default

    def log_failure(self, step: str, **context) -> None:
        """Log the failure of a best-effort step, if there was one."""
        if self.error is None:
            return
        details = " ".join(f"{key}={value}" for key, value in context.items())
        logger.warning(
            f"Best-effort step '{step}' failed ({self.error.error_code}): "
            f"{self.error.message} {details}".rstrip()
        )


async def attempt(
    awaitable: Awaitable[T],
    *,
    failure: type[EnrichmentFailure],
    timeout: Optional[float] = None,
) -> Outcome[T]:
    """Await a fallible external call and convert any failure into an Outcome.

    Args:
        awaitable: The call to run
        failure: EnrichmentFailure subclass used to wrap foreign exceptions
        timeout: Seconds before the call is abandoned; a timeout is an ordinary failure

    Returns:
        Outcome holding the value or the failure
    """
    try:
        if timeout is not None:
            value = await asyncio.wait_for(awaitable, timeout=timeout)
        else:
            value = await awaitable
    except asyncio.CancelledError:
        raise
    except asyncio.TimeoutError:
        return Outcome.failure(failure(f"timed out after {timeout}s"))
    except EnrichmentFailure as exc:
        if isinstance(exc, failure):
            return Outcome.failure(exc)
        return Outcome.failure(failure(exc.message))
    except Exception as exc:
        return Outcome.failure(failure(f"{type(exc).__name__}: {exc}"))
    return Outcome.success(value)
