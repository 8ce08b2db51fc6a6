import asyncio
import itertools
import logging
from decimal import Decimal
from typing import Any, List, Optional

import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from paystream.core.exceptions import ChainGatewayError, PaymentFailedError
from paystream.gateway.base import ChainGateway, network_name

logger = logging.getLogger(__name__)

WEI_PER_ETHER = Decimal(10) ** 18
TRANSFER_GAS = 21000


def to_wei(amount: Decimal) -> int:
    return int(Decimal(amount) * WEI_PER_ETHER)


def from_wei(value: int) -> Decimal:
    return Decimal(value) / WEI_PER_ETHER


class RpcError(Exception):
    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"RPC error {code}: {message}")


class JsonRpcChainGateway(ChainGateway):
    """
    Gateway backed by an Ethereum-compatible JSON-RPC node.

    The node must manage the paying account (eth_sendTransaction); blocking
    HTTP calls run in a worker thread so the event loop is never held.
    """

    def __init__(self, rpc_url: str, from_address: Optional[str] = None, timeout: float = 15.0,
                 session: Optional[requests.Session] = None):
        self.rpc_url = rpc_url
        self.from_address = from_address
        self.timeout = timeout
        self.session = session or requests.Session()
        self._ids = itertools.count(1)

    def _call_sync(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        response = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        body = response.json()
        if body.get("error"):
            error = body["error"]
            raise RpcError(error.get("code", -1), error.get("message", "unknown error"))
        return body.get("result")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(requests.exceptions.ConnectionError),
        reraise=True
    )
    def _read_sync(self, method: str, params: List[Any]) -> Any:
        """Read-only call; safe to repeat when the node drops the connection."""
        return self._call_sync(method, params)

    async def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        try:
            return await asyncio.to_thread(self._read_sync, method, params or [])
        except (RpcError, requests.RequestException, ValueError) as e:
            logger.error(f"RPC {method} failed: {e}")
            raise ChainGatewayError(f"RPC call {method} failed", details={"original_error": str(e)}) from e

    async def get_account(self) -> Optional[str]:
        if self.from_address:
            return self.from_address
        accounts = await self._call("eth_accounts")
        return accounts[0] if accounts else None

    async def get_network(self) -> str:
        chain_id = await self._call("eth_chainId")
        return network_name(int(chain_id, 16))

    async def get_balance(self, address: Optional[str] = None) -> Decimal:
        target = address or await self.get_account()
        if not target:
            raise ChainGatewayError("No wallet connected")
        balance = await self._call("eth_getBalance", [target, "latest"])
        return from_wei(int(balance, 16))

    async def submit_payment(self, to_address: str, amount: Decimal) -> str:
        sender = await self.get_account()
        if not sender:
            raise PaymentFailedError("No wallet connected")
        tx = {
            "from": sender,
            "to": to_address,
            "value": hex(to_wei(amount)),
            "gas": hex(TRANSFER_GAS),
        }
        try:
            return await asyncio.to_thread(self._call_sync, "eth_sendTransaction", [tx])
        except RpcError as e:
            raise PaymentFailedError(e.message, details={"to": to_address, "rpc_code": e.code}) from e
        except (requests.RequestException, ValueError) as e:
            raise PaymentFailedError(f"Transaction submission failed: {e}", details={"to": to_address}) from e
