"""
Chain client interface for recording registry events on a ledger.

Only a simulated client ships: it fabricates transaction hashes and reports
them confirmed immediately. Business logic depends on ``ChainClient`` so a
real ledger integration can be dropped in.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from samudra.core.errors import UpstreamError
from samudra.models.base import CamelModel
from samudra.utils.time import utc_now

logger = logging.getLogger(__name__)

TX_PROJECT_REGISTRATION = "project_registration"
TX_CREDIT_ISSUANCE = "credit_issuance"
TX_CREDIT_RETIREMENT = "credit_retirement"


class ChainTransaction(CamelModel):
    tx_hash: str
    kind: str
    status: str = "pending"  # pending | confirmed | failed
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    timestamp: datetime


class ChainError(UpstreamError):
    """The ledger rejected or failed to record a transaction."""


class ChainClient(ABC):

    @abstractmethod
    async def submit(self, kind: str, payload: Dict[str, Any]) -> ChainTransaction:
        """Record an event; raises ChainError on failure."""

    @abstractmethod
    async def get_transaction(self, tx_hash: str) -> Optional[ChainTransaction]:
        """Look up a previously submitted transaction."""


def generate_tx_hash() -> str:
    return f"0x{secrets.token_hex(32)}"


class SimulatedChainClient(ChainClient):
    """
    In-memory stand-in for a ledger; every submission confirms at once.

    Transactions live only in this process and only as long as the client.
    After a restart, or on another instance, lookups of earlier hashes
    return None while credits keep the hash they were issued with.
    """

    def __init__(self, starting_block: int = 1_000_000):
        self._transactions: Dict[str, ChainTransaction] = {}
        self._next_block = starting_block

    async def submit(self, kind: str, payload: Dict[str, Any]) -> ChainTransaction:
        tx = ChainTransaction(
            tx_hash=generate_tx_hash(),
            kind=kind,
            status="confirmed",
            block_number=self._next_block,
            gas_used=21000 + 68 * len(str(payload)),
            timestamp=utc_now()
        )
        self._next_block += 1
        self._transactions[tx.tx_hash] = tx
        logger.debug("Simulated %s transaction %s", kind, tx.tx_hash)
        return tx

    async def get_transaction(self, tx_hash: str) -> Optional[ChainTransaction]:
        return self._transactions.get(tx_hash)
