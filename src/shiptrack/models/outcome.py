"""Outcome of a single endpoint read.

The reader never raises for transport or content problems; it returns
one of these variants instead so that callers can apply a per-resource
policy without exception plumbing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Fetched:
    """Success status with a JSON body."""

    payload: Any


@dataclass(frozen=True, slots=True)
class NotFound:
    """The resource does not exist (yet). Not an error."""


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """Network failure, timeout or non-success status."""

    message: str
    status_code: int | None = None


@dataclass(frozen=True, slots=True)
class SchemaFailure:
    """Success status, but the body is not JSON."""

    message: str


EndpointOutcome = Fetched | NotFound | TransportFailure | SchemaFailure
