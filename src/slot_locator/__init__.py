"""
Solana slot locator.

Finds the Solana slot whose block time is at or right before a given Unix
timestamp, using a binary search over a JSON-RPC provider.
"""

from .config import LocatorConfig, RpcConfig, SearchConfig
from .errors import (
    InvalidInput,
    NoTimestampResolved,
    OracleUnavailable,
    SearchTimeout,
    SlotLocatorError,
    SlotNotFound,
)
from .models import BlockInfo, SearchResult
from .slot_locator import SlotLocator
from .utils.rpc_utility import SolanaRpcOracle

__all__ = [
    "LocatorConfig",
    "RpcConfig",
    "SearchConfig",
    "SlotLocator",
    "SolanaRpcOracle",
    "BlockInfo",
    "SearchResult",
    "SlotLocatorError",
    "InvalidInput",
    "OracleUnavailable",
    "NoTimestampResolved",
    "SlotNotFound",
    "SearchTimeout",
]
__version__ = "0.1.0"
