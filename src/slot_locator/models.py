#!/usr/bin/env python3
"""Data models for the slot locator.

This module provides immutable data classes for the block metadata returned
by the RPC provider and for the final result of a slot search.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class BlockInfo:
    """Block metadata for a single slot, as returned by ``getBlock``.

    Attributes:
        slot: The slot the block was produced in
        blockhash: Base58 block hash
        parent_slot: Slot of the parent block
        block_time: Unix timestamp of the block, if the node recorded one
        block_height: Block height, if the node reported one
    """

    slot: int
    blockhash: str
    parent_slot: int
    block_time: int | None = None
    block_height: int | None = None

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"BlockInfo(slot={self.slot}, "
            f"hash={self.blockhash[:10]}..., "
            f"time={self.block_time})"
        )

    @classmethod
    def from_rpc(cls, slot: int, result: dict[str, Any]) -> "BlockInfo":
        """Build from the ``result`` object of a ``getBlock`` response."""
        return cls(
            slot=slot,
            blockhash=result.get("blockhash") or "",
            parent_slot=result.get("parentSlot") or 0,
            block_time=result.get("blockTime"),
            block_height=result.get("blockHeight"),
        )


@dataclass(frozen=True, slots=True)
class SearchResult:
    """The slot found for a target timestamp.

    Built once when the search converges and never modified afterwards.

    Attributes:
        target_timestamp: The Unix timestamp that was searched for
        slot: The winning slot (always one with a block time)
        block_time: Block time of the winning slot
        blockhash: Block hash of the winning slot
        block_height: Block height of the winning slot, if known
        parent_slot: Parent slot of the winning block
        queries: Number of block time lookups issued during the search
        unresolved_probes: Midpoints whose neighbourhood had no block time
        elapsed: Wall-clock seconds spent searching
    """

    target_timestamp: int
    slot: int
    block_time: int
    blockhash: str
    block_height: int | None = None
    parent_slot: int | None = None
    queries: int = 0
    unresolved_probes: tuple[int, ...] = field(default_factory=tuple)
    elapsed: float = 0.0

    @property
    def is_exact(self) -> bool:
        """True when the block time equals the target timestamp."""
        return self.block_time == self.target_timestamp

    @property
    def is_after_target(self) -> bool:
        """True only when the target predates every block the search could see."""
        return self.block_time > self.target_timestamp

    @property
    def delta(self) -> int:
        """Seconds between the target and the block time, never negative."""
        return abs(self.target_timestamp - self.block_time)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"SearchResult(slot={self.slot}, "
            f"time={self.block_time}, "
            f"delta={self.delta}, "
            f"exact={self.is_exact})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "target_timestamp": self.target_timestamp,
            "slot": self.slot,
            "block_time": self.block_time,
            "blockhash": self.blockhash,
            "block_height": self.block_height,
            "parent_slot": self.parent_slot,
            "delta": self.delta,
            "is_exact": self.is_exact,
            "queries": self.queries,
            "unresolved_probes": list(self.unresolved_probes),
            "elapsed": self.elapsed
        }
