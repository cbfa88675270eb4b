"""
outcomes.py — Tagged result of asking one provider for something.

The orchestrator never inspects exceptions or None to decide whether to fall
back.  Each provider attempt is turned into exactly one of:

    Success(value)      the provider answered
    Unavailable(reason) the capability is absent (no credential, switched off)
    Failure(error)      the provider was reachable but the call failed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from ytflow.errors import ProviderFailureError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Unavailable:
    reason: str


@dataclass(frozen=True)
class Failure:
    error: ProviderFailureError


ProviderOutcome = Union[Success[T], Unavailable, Failure]


def attempt(
    name: str,
    available: bool,
    call: Callable[[], T],
    unavailable_reason: str = "capability not available",
) -> ProviderOutcome[T]:
    """
    Run *call* only when the capability is *available*, tagging the result.

    Only ProviderFailureError is converted into a Failure; anything else is a
    programming error and propagates.
    """
    if not available:
        logger.info("%s unavailable: %s", name, unavailable_reason)
        return Unavailable(unavailable_reason)
    try:
        return Success(call())
    except ProviderFailureError as exc:
        logger.warning("%s failed: %s", name, exc.message)
        return Failure(exc)
