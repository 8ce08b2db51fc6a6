"""
Simulated chain gateway.

Behaves like the demo dashboard chain: every payment waits a
random network delay, fails about 5% of the time and otherwise returns a
random 64-hex-digit transaction hash. Pass a seeded ``random.Random`` and a
zero failure rate for deterministic tests.
"""

import asyncio
import logging
import random
from decimal import Decimal
from typing import Dict, Iterable, Optional

from paystream.core.exceptions import PaymentFailedError
from paystream.gateway.base import ChainGateway

logger = logging.getLogger(__name__)


class MockChainGateway(ChainGateway):

    def __init__(
        self,
        account: Optional[str] = "0x0000000000000000000000000000000000000001",
        network: str = "Ethereum Mainnet",
        failure_rate: float = 0.05,
        min_delay: float = 0.0,
        max_delay: float = 0.0,
        starting_balance: Decimal = Decimal("1000000"),
        fail_addresses: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be between 0 and 1, got {failure_rate}")
        self.account = account
        self.network = network
        self.failure_rate = failure_rate
        self.min_delay = min_delay
        self.max_delay = max(max_delay, min_delay)
        self.fail_addresses = {a.lower() for a in (fail_addresses or [])}
        self.rng = rng or random.Random()
        self.balances: Dict[str, Decimal] = {}
        if account:
            self.balances[account.lower()] = Decimal(starting_balance)
        self.submitted = []

    async def get_account(self) -> Optional[str]:
        return self.account

    async def get_network(self) -> str:
        return self.network

    async def get_balance(self, address: Optional[str] = None) -> Decimal:
        target = address or self.account
        if not target:
            raise PaymentFailedError("No wallet connected")
        return self.balances.get(target.lower(), Decimal("0"))

    def _tx_hash(self) -> str:
        return f"0x{self.rng.getrandbits(256):064x}"

    async def submit_payment(self, to_address: str, amount: Decimal) -> str:
        if not self.account:
            raise PaymentFailedError("No wallet connected")

        delay = self.rng.uniform(self.min_delay, self.max_delay)
        if delay > 0:
            await asyncio.sleep(delay)

        amount = Decimal(amount)
        sender = self.account.lower()
        if to_address.lower() in self.fail_addresses or self.rng.random() < self.failure_rate:
            logger.info(f"Simulated chain rejection for {to_address}")
            raise PaymentFailedError("Blockchain transaction failed", details={"to": to_address})
        if self.balances.get(sender, Decimal("0")) < amount:
            raise PaymentFailedError("Insufficient balance", details={"to": to_address, "amount": str(amount)})

        tx_hash = self._tx_hash()
        self.balances[sender] -= amount
        self.balances[to_address.lower()] = self.balances.get(to_address.lower(), Decimal("0")) + amount
        self.submitted.append((to_address, amount, tx_hash))
        return tx_hash
