"""
Public statistics handler.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from samudra.db import repository
from samudra.models.stats import PublicStats


async def get_public_stats(session: AsyncSession) -> PublicStats:
    """
    Registry-wide totals for the public dashboard.

    Credit totals come from the issued/retired counters, not from summing
    credit records.
    """
    projects = await repository.get_all_projects(session)
    return PublicStats(
        total_credits_issued=await repository.get_total_credits_issued(session),
        total_credits_retired=await repository.get_total_credits_retired(session),
        total_projects=len(projects),
        projects=projects
    )
