import itertools
import json
import logging
from types import TracebackType
from typing import Any, ClassVar

import httpx

from ..errors import OracleUnavailable, SlotNotFound
from ..models import BlockInfo

logger = logging.getLogger(__name__)


class SolanaRpcOracle:
    """Timestamp oracle backed by a Solana JSON-RPC provider.

    Provides the three lookups the slot search needs: the newest finalized
    slot, the block time of a slot and the block metadata of a slot.

    Use it as an async context manager to share one connection pool across
    all lookups of a search; without it each request opens its own client.
    """

    # Block not available, slot skipped, slot skipped in long-term storage
    SLOT_UNAVAILABLE_CODES: ClassVar[frozenset[int]] = frozenset({-32004, -32007, -32009})

    BLOCK_OPTIONS: ClassVar[dict[str, Any]] = {
        "encoding": "json",
        "maxSupportedTransactionVersion": 0,
        "transactionDetails": "none",
        "rewards": False
    }

    def __init__(self, rpc_url: str, api_key: str = '', timeout: float = 10.0) -> None:
        """Initialize the RPC oracle.

        Args:
            rpc_url: JSON-RPC endpoint
            api_key: Credential sent as x-api-key (omitted when empty)
            timeout: Per-request timeout in seconds
        """
        self.rpc_url: str = rpc_url
        self.api_key: str = api_key
        self.timeout: float = timeout
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "SolanaRpcOracle":
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the shared HTTP client, if one is open."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def _send(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        response: httpx.Response = await client.post(
            self.rpc_url,
            json=payload,
            headers=self._headers()
        )
        response.raise_for_status()
        return response

    async def _rpc_post(self, method: str, params: list[Any]) -> dict[str, Any]:
        """Post a JSON-RPC request to the provider.

        Args:
            method: JSON-RPC method name
            params: Positional parameters

        Returns:
            The decoded JSON-RPC response object (with ``result`` or ``error``)

        Raises:
            OracleUnavailable: On transport errors, HTTP errors or a body
                that is not a JSON object
        """
        payload: dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params
        }
        logger.debug(f"Posting to {self.rpc_url}: {json.dumps(payload)}")

        try:
            if self._client is not None:
                response = await self._send(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._send(client, payload)
            body: Any = response.json()
        except httpx.HTTPStatusError as e:
            raise OracleUnavailable(
                f"{method} failed with HTTP status {e.response.status_code}",
                method=method
            ) from e
        except httpx.HTTPError as e:
            raise OracleUnavailable(f"{method} request failed: {e}", method=method) from e
        except ValueError as e:
            raise OracleUnavailable(f"{method} returned malformed JSON: {e}", method=method) from e

        if not isinstance(body, dict):
            raise OracleUnavailable(f"{method} returned unexpected payload: {body!r}", method=method)
        return body

    @staticmethod
    def _rpc_error(method: str, error: Any) -> OracleUnavailable:
        match error:
            case {"code": int(code), "message": message}:
                return OracleUnavailable(f"{method} RPC error {code}: {message}", method=method, code=code)
            case _:
                return OracleUnavailable(f"{method} RPC error: {error}", method=method)

    def _is_slot_unavailable(self, error: Any) -> bool:
        return isinstance(error, dict) and error.get("code") in self.SLOT_UNAVAILABLE_CODES

    async def current_slot(self) -> int:
        """Fetch the newest finalized slot.

        Raises:
            OracleUnavailable: If the request fails or the result is not a slot
        """
        body = await self._rpc_post("getSlot", [{"commitment": "finalized"}])

        match body:
            case {"error": error} if error is not None:
                raise self._rpc_error("getSlot", error)
            case {"result": int(slot)}:
                return slot
            case _:
                raise OracleUnavailable(f"getSlot returned unexpected payload: {body}", method="getSlot")

    async def block_time(self, slot: int) -> int | None:
        """Fetch the Unix block time of a slot.

        Args:
            slot: Slot to look up

        Returns:
            The block time, or None if the slot has no block

        Raises:
            OracleUnavailable: For any error other than a skipped/unavailable slot
        """
        body = await self._rpc_post("getBlockTime", [slot])

        match body:
            case {"error": error} if error is not None:
                if self._is_slot_unavailable(error):
                    logger.debug(f"Slot {slot} unavailable: {error.get('message')}")
                    return None
                raise self._rpc_error("getBlockTime", error)
            case {"result": None}:
                return None
            case {"result": int(block_time)}:
                return block_time
            case _:
                raise OracleUnavailable(
                    f"getBlockTime returned unexpected payload: {body}", method="getBlockTime"
                )

    async def block_info(self, slot: int) -> BlockInfo:
        """Fetch block metadata (hash, height, parent, time) for a slot.

        Args:
            slot: Slot to look up

        Returns:
            BlockInfo for the slot

        Raises:
            SlotNotFound: If the slot has no block
            OracleUnavailable: If the request fails
        """
        body = await self._rpc_post("getBlock", [slot, dict(self.BLOCK_OPTIONS)])

        match body:
            case {"error": error} if error is not None:
                if self._is_slot_unavailable(error):
                    raise SlotNotFound(slot, error.get("message"))
                raise self._rpc_error("getBlock", error)
            case {"result": dict(result)}:
                block = BlockInfo.from_rpc(slot, result)
                logger.debug(f"Fetched {block}")
                return block
            case {"result": None}:
                raise SlotNotFound(slot)
            case _:
                raise OracleUnavailable(f"getBlock returned unexpected payload: {body}", method="getBlock")
