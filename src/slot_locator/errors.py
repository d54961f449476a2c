#!/usr/bin/env python3
"""Error types raised by the slot locator.

Every failure surfaces to the entry point, which maps it to a descriptive
message and a non-zero exit status. Nothing here is retried.
"""

from typing import Any


class SlotLocatorError(Exception):
    """Base class for all slot locator failures."""


class InvalidInput(SlotLocatorError, ValueError):
    """The target timestamp (or another user value) could not be used."""


class OracleUnavailable(SlotLocatorError):
    """A remote call failed: transport, HTTP status, RPC error or bad payload.

    Attributes:
        method: JSON-RPC method that failed, when known
        code: JSON-RPC error code, when the provider returned one
    """

    def __init__(self, message: str, method: str | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.code = code


class NoTimestampResolved(SlotLocatorError):
    """A slot and its bounded neighbourhood all lack a block time."""

    def __init__(self, slot: int, probed: int) -> None:
        super().__init__(
            f"No block time found for slot {slot} or the {probed} slots probed around it"
        )
        self.slot = slot
        self.probed = probed


class SlotNotFound(SlotLocatorError):
    """The slot chosen by the search has no retrievable block metadata."""

    def __init__(self, slot: int, detail: Any = None) -> None:
        message = f"Block metadata not found for slot {slot}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.slot = slot


class SearchTimeout(SlotLocatorError):
    """The search deadline passed before the window collapsed.

    Attributes:
        best_slot: Best slot found so far with a block time <= target, if any
        best_time: Block time of best_slot
        low: Lower bound of the window when the search stopped
        high: Upper bound of the window when the search stopped
    """

    def __init__(
        self,
        timeout: float,
        low: int,
        high: int,
        best_slot: int | None = None,
        best_time: int | None = None
    ) -> None:
        message = f"Search exceeded {timeout:g}s with window [{low}, {high}]"
        if best_slot is not None:
            message += f"; best candidate so far is slot {best_slot} (block time {best_time})"
        super().__init__(message)
        self.timeout = timeout
        self.low = low
        self.high = high
        self.best_slot = best_slot
        self.best_time = best_time
