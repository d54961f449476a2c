#!/usr/bin/env python3
"""Contract for the remote timestamp oracle consumed by the slot locator."""

from typing import Protocol

from .models import BlockInfo


class TimestampOracle(Protocol):
    """Answers slot, block time and block metadata queries.

    Calls are independent and idempotent. Transport failures raise
    ``OracleUnavailable`` and are never retried by the caller.
    """

    async def current_slot(self) -> int:
        """Return the newest finalized slot."""

    async def block_time(self, slot: int) -> int | None:
        """Return the block's Unix time, or None when the slot was skipped."""

    async def block_info(self, slot: int) -> BlockInfo:
        """Return block metadata; raise ``SlotNotFound`` when there is no block."""
