"""Result type for operations whose failures are reported as booleans."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from image_storage.core.errors import classify_error
from image_storage.core.logging import log_context


@dataclass(frozen=True)
class Outcome:
    ok: bool
    reason: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def success(cls) -> "Outcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome":
        return cls(ok=False, reason=f"{type(error).__name__}: {error}", error_type=classify_error(error))

    def report(self, logger: logging.Logger, operation: str, key: str) -> bool:
        """Log the failure reason, if any, and collapse to the boolean result."""
        if not self.ok and self.reason is not None:
            level = logging.DEBUG if self.error_type == "NOT_FOUND" else logging.WARNING
            with log_context(logger, operation=operation, key=key) as log:
                log.log(level, f"{operation} failed for {key} [{self.error_type}]: {self.reason}")
        return self.ok


def attempt(action: Callable[[], bool]) -> Outcome:
    """Run ``action`` and capture any exception as a failed outcome."""
    try:
        ok = action()
    except Exception as exc:  # noqa: BLE001 - failures are reported through the outcome
        return Outcome.failure(exc)
    if ok:
        return Outcome.success()
    return Outcome(ok=False, reason="backend did not report success", error_type="BACKEND")
