"""Attempt records and outcomes for the retry controller.

Every attempt ends in exactly one tagged outcome:
- Ok: a value was extracted and validated
- Retryable: the attempt failed in a way the next attempt may fix
- Fatal: a caller error surfaced while building the attempt

The controller branches on the tag only. It never looks inside the value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RetryReason(Enum):
    """Why an attempt did not produce a conforming value."""

    TRANSPORT_FAILED = "transport_failed"
    """No usable response envelope (network error, non-2xx, non-JSON body)."""

    EXTRACTION_FAILED = "extraction_failed"
    """Response text could not be parsed as JSON, even after fence stripping."""

    VALIDATION_FAILED = "validation_failed"
    """JSON was parsed but does not conform to the schema."""


@dataclass(frozen=True)
class Ok:
    """Attempt produced a valid value."""

    value: Any


@dataclass(frozen=True)
class Retryable:
    """Attempt failed; another attempt may succeed."""

    reason: RetryReason


@dataclass(frozen=True)
class Fatal:
    """Attempt hit a programmer error that retrying cannot fix."""

    error: Exception


AttemptOutcome = Ok | Retryable | Fatal


@dataclass(frozen=True)
class Attempt:
    """Everything observed during one request/response/validate cycle.

    Exists only inside one loop iteration of the retry controller.
    """

    number: int
    outcome: AttemptOutcome
    request: dict[str, Any] | None = None
    body: dict[str, Any] | None = None
    content: str | None = None
    value: Any = None
