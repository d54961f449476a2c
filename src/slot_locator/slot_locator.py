#!/usr/bin/env python3
"""Binary search for the Solana slot at or right before a timestamp.

The search treats the oracle's block times as a non-decreasing function of
the slot, with holes where slots were skipped. Skipped midpoints are
resolved by probing the slots right after them. Longer skipped runs (such
as the empty prefix before a node's earliest retained block) are crossed by
bisecting for the first block after the run. Once the window collapses a
small neighbourhood is scanned and the newest block at or before the target
wins.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .config import SearchConfig
from .errors import NoTimestampResolved, SearchTimeout
from .models import SearchResult
from .oracle import TimestampOracle

# Get logger for this module
logger = logging.getLogger(__name__)


@dataclass
class _SearchState:
    """Scratch state of a single ``locate`` call."""

    target: int
    started: float
    times: dict[int, int | None] = field(default_factory=dict)
    unresolved: list[int] = field(default_factory=list)
    best: tuple[int, int] | None = None

    def observe(self, slot: int, block_time: int | None) -> None:
        self.times[slot] = block_time
        if block_time is None or block_time > self.target:
            return
        if self.best is None or (block_time, slot) > (self.best[1], self.best[0]):
            self.best = (slot, block_time)


class SlotLocator:
    """Finds the newest slot whose block time does not exceed a target.

    The search is strictly sequential: every midpoint depends on the outcome
    of the previous lookup. Oracle failures propagate unchanged.
    """

    def __init__(
        self,
        oracle: TimestampOracle,
        config: SearchConfig | None = None,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Initialize the SlotLocator.

        :param oracle: Source of slots, block times and block metadata
        :param config: Search tuning (probe limit, final window, deadline)
        :param clock: Monotonic clock used for the search deadline
        """
        self.oracle = oracle
        self.config = config or SearchConfig()
        self.clock = clock

    async def locate(self, target_timestamp: int) -> SearchResult:
        """
        Find the slot whose block time is closest to, but not after, a target.

        If the target predates every block the search can see, the earliest
        block found is returned and the result is flagged ``is_after_target``.

        :param target_timestamp: Unix timestamp in seconds
        :return: The search result with block metadata of the winning slot
        :raises NoTimestampResolved: If no slot looked at has a block time
        :raises SearchTimeout: If the configured deadline passes first
        :raises SlotNotFound: If the winning slot has no block metadata
        :raises OracleUnavailable: If any remote call fails
        """
        state = _SearchState(target=target_timestamp, started=self.clock())

        current = await self.oracle.current_slot()
        logger.info(f"Current slot: {current}")
        logger.info(f"Starting binary search for timestamp {target_timestamp}")

        if newest := await self._resolve_backward(state, current):
            slot, block_time = newest
            if block_time <= target_timestamp:
                logger.info(f"Target is at or after the newest block (slot {slot})")
                return await self._finish(state, slot, block_time)
            high = slot
        else:
            high = current
        low = 0

        while high - low > 1:
            self._check_deadline(state, low, high)

            mid = low + (high - low) // 2
            resolved = await self._resolve_forward(state, mid, high)

            if resolved is None and mid + self.config.probe_limit < high - 1:
                state.unresolved.append(mid)
                logger.warning(
                    f"No block time within {self.config.probe_limit} slots after {mid}, "
                    f"looking for the next block before slot {high}"
                )
                resolved = await self._first_block_after_gap(
                    state, mid + self.config.probe_limit + 1, high
                )

            if resolved is None:
                # Nothing in [mid, high) has a block
                high = mid
                continue

            slot, block_time = resolved
            if block_time <= target_timestamp:
                low = slot
            else:
                high = mid

        logger.info(f"Search converged on window [{low}, {high}]")
        slot, block_time = await self._select_final(state, low, high, current)
        return await self._finish(state, slot, block_time)

    async def _block_time(self, state: _SearchState, slot: int) -> int | None:
        if slot in state.times:
            return state.times[slot]

        block_time = await self.oracle.block_time(slot)
        state.observe(slot, block_time)
        if block_time is None:
            logger.info(f"No timestamp for slot {slot}")
        else:
            logger.info(f"Slot {slot} has timestamp {block_time}")
        return block_time

    async def _resolve_forward(
        self, state: _SearchState, mid: int, high: int
    ) -> tuple[int, int] | None:
        """Return the first slot in [mid, mid + probe_limit] below ``high`` with a block time."""
        for slot in range(mid, min(mid + self.config.probe_limit, high - 1) + 1):
            block_time = await self._block_time(state, slot)
            if block_time is not None:
                if slot != mid:
                    logger.info(f"Found timestamp {block_time} at nearby slot {slot}")
                return slot, block_time
        return None

    async def _first_block_after_gap(
        self, state: _SearchState, start: int, high: int
    ) -> tuple[int, int] | None:
        """Return the first slot in [start, high) with a block time, or None.

        Assumes the slots before ``start`` belong to one run of skipped
        slots, so bisecting on "a block exists within probe_limit" finds
        where that run ends in O(log n) forward scans.
        """
        lo, hi = start, high
        found: tuple[int, int] | None = None

        while lo < hi:
            self._check_deadline(state, lo, hi)

            mid = lo + (hi - lo) // 2
            resolved = await self._resolve_forward(state, mid, hi)
            if resolved is None:
                lo = min(mid + self.config.probe_limit + 1, hi)
            else:
                found = resolved
                hi = mid

        if found is not None:
            logger.info(f"Skipped run ends before slot {found[0]} (timestamp {found[1]})")
        return found

    async def _resolve_backward(
        self, state: _SearchState, slot: int
    ) -> tuple[int, int] | None:
        """Return the newest slot at or below ``slot`` with a block time, within the probe limit."""
        for candidate in range(slot, max(slot - self.config.probe_limit, 0) - 1, -1):
            block_time = await self._block_time(state, candidate)
            if block_time is not None:
                return candidate, block_time
        return None

    async def _select_final(
        self, state: _SearchState, low: int, high: int, current: int
    ) -> tuple[int, int]:
        start = max(low - self.config.final_window, 0)
        end = min(high + self.config.final_window, current)

        for slot in range(start, end + 1):
            await self._block_time(state, slot)

        # Every slot looked at during the search is a candidate, so blocks
        # found past a skipped run are never lost.
        candidates = [(s, t) for s, t in state.times.items() if t is not None]

        eligible = [c for c in candidates if c[1] <= state.target]
        if eligible:
            # Newest block time wins, then the highest slot sharing it
            return max(eligible, key=lambda c: (c[1], c[0]))

        if candidates:
            slot, block_time = min(candidates)
            logger.warning(
                f"Target {state.target} predates the earliest block found "
                f"(slot {slot}, timestamp {block_time})"
            )
            return slot, block_time

        raise NoTimestampResolved(low, len(state.times))

    def _check_deadline(self, state: _SearchState, low: int, high: int) -> None:
        timeout = self.config.search_timeout
        if not timeout or self.clock() - state.started <= timeout:
            return

        best_slot, best_time = state.best if state.best else (None, None)
        raise SearchTimeout(timeout, low, high, best_slot=best_slot, best_time=best_time)

    async def _finish(self, state: _SearchState, slot: int, block_time: int) -> SearchResult:
        block = await self.oracle.block_info(slot)

        result = SearchResult(
            target_timestamp=state.target,
            slot=slot,
            block_time=block_time,
            blockhash=block.blockhash,
            block_height=block.block_height,
            parent_slot=block.parent_slot,
            queries=len(state.times),
            unresolved_probes=tuple(state.unresolved),
            elapsed=self.clock() - state.started
        )
        logger.info(f"Search finished: {result}")
        return result
