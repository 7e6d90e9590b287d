"""
Unauthenticated public endpoints: registry stats and chain lookups.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.database import get_session
from samudra.core.errors import NotFoundError
from samudra.handlers.chain import ChainClient
from samudra.handlers.stats import get_public_stats
from samudra.routes.deps import get_chain_client

router = APIRouter(tags=["public"])


@router.get("/public/stats")
async def public_stats_endpoint(session: AsyncSession = Depends(get_session)):
    """
    Registry-wide totals.

    Returns:
        - totalCreditsIssued
        - totalCreditsRetired
        - totalProjects
        - projects
    """
    return await get_public_stats(session)


@router.get("/chain/transactions/{tx_hash}")
async def chain_transaction_endpoint(
    tx_hash: str,
    chain: ChainClient = Depends(get_chain_client)
):
    """Status of a ledger transaction recorded by the registry."""
    tx = await chain.get_transaction(tx_hash)
    if tx is None:
        raise NotFoundError(f"Transaction {tx_hash} not found")
    return {"transaction": tx}
