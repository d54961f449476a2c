#!/usr/bin/env python3
"""Human-readable summary of a slot search."""

from datetime import datetime, timezone

from .models import SearchResult

EXPLORER_URL = "https://explorer.solana.com/block/{slot}"


def format_result(result: SearchResult, verbose: bool = False) -> list[str]:
    """Render the final block summary as printable lines.

    Args:
        result: The search result to describe
        verbose: Also include query statistics and an explorer link

    Returns:
        Lines ready to be printed, without trailing newlines
    """
    block_date = datetime.fromtimestamp(result.block_time, tz=timezone.utc)

    lines = [
        "",
        "✅ Found block:",
        f"📍 Slot: {result.slot}",
        f"🔗 Block hash: {result.blockhash}",
        f"⏰ Block time: {result.block_time} ({block_date.isoformat()})",
    ]
    if result.block_height is not None:
        lines.append(f"📏 Block height: {result.block_height}")

    if result.is_exact:
        lines.append("🎯 This block exactly matches the requested timestamp.")
    elif result.is_after_target:
        lines.append(f"⏩ This block is {result.delta} seconds after the requested timestamp.")
        lines.append("⚠️  Warning: the requested timestamp predates the earliest block found.")
    else:
        lines.append(f"⏪ This block is {result.delta} seconds before the requested timestamp.")

    if result.unresolved_probes:
        lines.append(
            f"⚠️  {len(result.unresolved_probes)} probe(s) found no block time nearby: "
            f"{', '.join(str(s) for s in result.unresolved_probes)}"
        )

    lines.append("")
    if verbose:
        lines.append(
            f"⚡ Performance: Search completed in {result.elapsed:.2f} seconds "
            f"({result.queries} block time lookups)"
        )
        lines.append(f"🌐 Block Explorer: {EXPLORER_URL.format(slot=result.slot)}")
    else:
        lines.append(f"⚡ Search completed in {result.elapsed:.2f} seconds")

    return lines
