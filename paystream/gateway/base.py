"""
Wallet/Chain Gateway interface.

The scheduler and analytics only depend on this contract; the concrete
gateway is chosen at startup (see paystream.gateway.build_gateway).
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

# Chain ids the dashboard knows how to name
NETWORK_NAMES = {
    1: "Ethereum Mainnet",
    137: "Polygon",
    56: "Binance Smart Chain",
    42161: "Arbitrum",
    10: "Optimism",
    43114: "Avalanche",
}


def network_name(chain_id: int) -> str:
    return NETWORK_NAMES.get(chain_id, f"Unknown Network ({chain_id})")


class ChainGateway(ABC):

    @abstractmethod
    async def get_account(self) -> Optional[str]:
        """Connected account address, or None when no wallet is connected."""

    @abstractmethod
    async def get_network(self) -> str:
        ...

    @abstractmethod
    async def get_balance(self, address: Optional[str] = None) -> Decimal:
        ...

    @abstractmethod
    async def submit_payment(self, to_address: str, amount: Decimal) -> str:
        """
        Send *amount* to *to_address* and return the transaction hash.

        Raises:
            PaymentFailedError: the chain rejected the payment or it could not be submitted.
        """
