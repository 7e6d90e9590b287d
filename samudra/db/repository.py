"""
Typed repository over the key-value store.

Maps registry entities to their prefixed keys and back. Like the store
primitives, none of these functions commit.
"""

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import (
    CREDIT_PREFIX,
    ML_VERIFICATION_PREFIX,
    MRV_PREFIX,
    PAYOUT_PREFIX,
    PROJECT_PREFIX,
    RETIREMENT_PREFIX,
    TOTAL_CREDITS_ISSUED_KEY,
    TOTAL_CREDITS_RETIRED_KEY,
)
from samudra.db import kv_store
from samudra.models.credit import CarbonCredit, Payout, Retirement
from samudra.models.mrv import MRVData, PENDING_MRV_STATUSES
from samudra.models.project import Project
from samudra.models.verification import MLVerification


def credit_key(credit_id: str) -> str:
    # Ids already look like "credit_<ts>_<rand>"; keys are "credit_credit_..."
    return f"{CREDIT_PREFIX}_{credit_id}"


def ml_verification_key(project_id: str) -> str:
    return f"{ML_VERIFICATION_PREFIX}_{project_id}"


# Projects

async def save_project(session: AsyncSession, project: Project) -> None:
    await kv_store.set_value(session, project.id, project.to_store())


async def get_project(session: AsyncSession, project_id: str) -> Optional[Project]:
    found = await get_project_versioned(session, project_id)
    return found[0] if found else None


async def get_project_versioned(session: AsyncSession, project_id: str) -> Optional[Tuple[Project, int]]:
    if not project_id.startswith(f"{PROJECT_PREFIX}_"):
        return None
    entry = await kv_store.get_entry(session, project_id)
    if entry is None or not entry.value:
        return None
    return Project.model_validate(entry.value), entry.version


async def get_all_projects(session: AsyncSession) -> List[Project]:
    entries = await kv_store.get_by_prefix(session, f"{PROJECT_PREFIX}_")
    return [Project.model_validate(e.value) for e in entries if e.value]


async def get_projects_by_manager(session: AsyncSession, manager_id: str) -> List[Project]:
    return [p for p in await get_all_projects(session) if p.manager_id == manager_id]


async def delete_project(session: AsyncSession, project_id: str) -> bool:
    return await kv_store.delete_key(session, project_id)


# MRV data

async def save_mrv(session: AsyncSession, mrv: MRVData) -> None:
    await kv_store.set_value(session, mrv.id, mrv.to_store())


async def get_mrv_versioned(session: AsyncSession, mrv_id: str) -> Optional[Tuple[MRVData, int]]:
    # "mrv_" keys only; guards against reading another entity by id
    if not mrv_id.startswith(f"{MRV_PREFIX}_"):
        return None
    entry = await kv_store.get_entry(session, mrv_id)
    if entry is None or not entry.value:
        return None
    return MRVData.model_validate(entry.value), entry.version


async def get_all_mrv(session: AsyncSession) -> List[MRVData]:
    entries = await kv_store.get_by_prefix(session, f"{MRV_PREFIX}_")
    return [MRVData.model_validate(e.value) for e in entries if e.value]


async def get_pending_mrv(session: AsyncSession) -> List[MRVData]:
    return [m for m in await get_all_mrv(session) if m.status in PENDING_MRV_STATUSES]


# Carbon credits

async def save_credit(session: AsyncSession, credit: CarbonCredit) -> None:
    await kv_store.set_value(session, credit_key(credit.id), credit.to_store())


async def get_credit_versioned(session: AsyncSession, credit_id: str) -> Optional[Tuple[CarbonCredit, int]]:
    entry = await kv_store.get_entry(session, credit_key(credit_id))
    if entry is None or not entry.value:
        return None
    return CarbonCredit.model_validate(entry.value), entry.version


async def get_credit(session: AsyncSession, credit_id: str) -> Optional[CarbonCredit]:
    found = await get_credit_versioned(session, credit_id)
    return found[0] if found else None


async def compare_and_set_credit(session: AsyncSession, credit: CarbonCredit, expected_version: int) -> bool:
    return await kv_store.compare_and_set(session, credit_key(credit.id), expected_version, credit.to_store())


async def get_all_credits(session: AsyncSession) -> List[CarbonCredit]:
    entries = await kv_store.get_by_prefix(session, f"{CREDIT_PREFIX}_")
    return [CarbonCredit.model_validate(e.value) for e in entries if e.value]


async def get_available_credits(session: AsyncSession) -> List[CarbonCredit]:
    return [c for c in await get_all_credits(session) if not c.is_retired and not c.owner_id]


async def get_buyer_credits(session: AsyncSession, buyer_id: str) -> List[CarbonCredit]:
    return [c for c in await get_all_credits(session) if c.owner_id == buyer_id and not c.is_retired]


# Retirements and payouts

async def save_retirement(session: AsyncSession, retirement: Retirement) -> None:
    await kv_store.set_value(session, retirement.id, retirement.to_store())


async def get_retirements_by_buyer(session: AsyncSession, buyer_id: str) -> List[Retirement]:
    entries = await kv_store.get_by_prefix(session, f"{RETIREMENT_PREFIX}_")
    retirements = [Retirement.model_validate(e.value) for e in entries if e.value]
    return sorted(
        (r for r in retirements if r.buyer_id == buyer_id),
        key=lambda r: r.retired_at,
        reverse=True
    )


async def save_payout(session: AsyncSession, payout: Payout) -> None:
    await kv_store.set_value(session, payout.id, payout.to_store())


async def get_payouts_by_manager(session: AsyncSession, manager_id: str) -> List[Payout]:
    entries = await kv_store.get_by_prefix(session, f"{PAYOUT_PREFIX}_")
    payouts = [Payout.model_validate(e.value) for e in entries if e.value]
    return sorted(
        (p for p in payouts if p.manager_id == manager_id),
        key=lambda p: p.created_at,
        reverse=True
    )


# Scoring results

async def save_ml_verification(session: AsyncSession, verification: MLVerification) -> None:
    await kv_store.set_value(session, ml_verification_key(verification.project_id), verification.to_store())


async def get_ml_verification(session: AsyncSession, project_id: str) -> Optional[MLVerification]:
    value = await kv_store.get_value(session, ml_verification_key(project_id))
    return MLVerification.model_validate(value) if value else None


# Counters

async def get_total_credits_issued(session: AsyncSession) -> float:
    return await kv_store.get_value(session, TOTAL_CREDITS_ISSUED_KEY, 0) or 0


async def get_total_credits_retired(session: AsyncSession) -> float:
    return await kv_store.get_value(session, TOTAL_CREDITS_RETIRED_KEY, 0) or 0


async def increment_credits_issued(session: AsyncSession, amount: float) -> float:
    return await kv_store.increment_counter(session, TOTAL_CREDITS_ISSUED_KEY, amount)


async def increment_credits_retired(session: AsyncSession, amount: float) -> float:
    return await kv_store.increment_counter(session, TOTAL_CREDITS_RETIRED_KEY, amount)


async def ensure_counters(session: AsyncSession) -> None:
    """Create the credit counters at zero so increments never race on insert."""
    await kv_store.ensure_keys(session, {
        TOTAL_CREDITS_ISSUED_KEY: 0,
        TOTAL_CREDITS_RETIRED_KEY: 0,
    })
