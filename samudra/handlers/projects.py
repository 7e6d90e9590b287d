"""
Project registration and management handler.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import ECOSYSTEM_TYPES, PROJECT_PREFIX
from samudra.core.errors import (
    AuthorizationError,
    NotFoundError,
    StateConflictError,
    UpstreamError,
    ValidationError,
)
from samudra.db import repository
from samudra.handlers.auth import AuthProvider
from samudra.handlers.chain import TX_PROJECT_REGISTRATION, ChainClient, ChainError
from samudra.models.project import Project, ProjectCreate, ProjectStatus
from samudra.models.user import AuthUser
from samudra.utils.hashing import generate_id
from samudra.utils.time import utc_now

logger = logging.getLogger(__name__)

REQUIRED_PROJECT_FIELDS = ("name", "description", "location", "ecosystem_type", "area")

UNKNOWN_MANAGER_NAME = "Unknown Manager"
UNKNOWN_MANAGER_EMAIL = "N/A"


def _wire_name(field: str) -> str:
    return ProjectCreate.model_fields[field].alias or field


def validate_project_data(project_data: ProjectCreate) -> None:
    """Raise ValidationError unless the project can be registered."""
    for field in REQUIRED_PROJECT_FIELDS:
        if not getattr(project_data, field):
            raise ValidationError(f"Missing required field: {_wire_name(field)}")

    if project_data.area <= 0:
        raise ValidationError("Project area must be greater than 0")

    if project_data.ecosystem_type not in ECOSYSTEM_TYPES:
        raise ValidationError("Invalid ecosystem type")


async def create_project(
    session: AsyncSession,
    project_data: ProjectCreate,
    manager: AuthUser,
    chain: ChainClient
) -> Project:
    """Register a project with status ``registered``."""
    validate_project_data(project_data)

    project = Project(
        id=generate_id(PROJECT_PREFIX),
        **project_data.model_dump(),
        manager_id=manager.id,
        manager_name=manager.name or UNKNOWN_MANAGER_NAME,
        manager_email=manager.email or UNKNOWN_MANAGER_EMAIL,
        status=ProjectStatus.REGISTERED,
        created_at=utc_now()
    )

    try:
        tx = await chain.submit(TX_PROJECT_REGISTRATION, {
            "projectId": project.id,
            "managerId": manager.id,
            "ecosystemType": project.ecosystem_type.value,
            "area": project.area,
            "location": project.location,
        })
        project.on_chain_tx_hash = tx.tx_hash
    except ChainError as e:
        logger.warning("Project %s registered without chain record: %s", project.id, e)

    await repository.save_project(session, project)
    await session.commit()

    logger.info("Project %s created by manager %s", project.id, manager.id)
    return project


async def get_manager_projects(session: AsyncSession, manager_id: str) -> List[Project]:
    projects = await repository.get_projects_by_manager(session, manager_id)
    logger.debug("Found %d projects for manager %s", len(projects), manager_id)
    return projects


async def get_all_projects(session: AsyncSession, auth: AuthProvider) -> List[Project]:
    """All projects, with manager name and email refreshed from the auth provider."""
    projects = await repository.get_all_projects(session)

    enriched = []
    for project in projects:
        try:
            manager = await auth.get_user(session, project.manager_id)
        except UpstreamError as e:
            logger.warning("Could not fetch manager info for %s: %s", project.manager_id, e)
            manager = None

        enriched.append(project.model_copy(update={
            "manager_name": (manager.name if manager else None) or UNKNOWN_MANAGER_NAME,
            "manager_email": (manager.email if manager else None) or UNKNOWN_MANAGER_EMAIL,
        }))
    return enriched


async def delete_project(session: AsyncSession, project_id: str, manager_id: str) -> None:
    """Delete a project; only its manager may, and only while still registered."""
    project = await repository.get_project(session, project_id)
    if project is None:
        raise NotFoundError("Project not found")

    if project.manager_id != manager_id:
        raise AuthorizationError("Access denied: You can only delete your own projects")

    if project.status != ProjectStatus.REGISTERED:
        raise StateConflictError("Cannot delete project: Only unverified projects can be deleted")

    await repository.delete_project(session, project_id)
    await session.commit()

    logger.info("Project %s deleted by manager %s", project_id, manager_id)


def get_project_stats(projects: List[Project]) -> Dict[str, Any]:
    """Portfolio summary: counts by status and ecosystem, total area and expected capture."""
    by_status: Dict[str, int] = {}
    by_ecosystem: Dict[str, int] = {}
    for project in projects:
        by_status[project.status.value] = by_status.get(project.status.value, 0) + 1
        by_ecosystem[project.ecosystem_type.value] = by_ecosystem.get(project.ecosystem_type.value, 0) + 1

    return {
        "total": len(projects),
        "byStatus": by_status,
        "byEcosystem": by_ecosystem,
        "totalArea": sum(p.area for p in projects),
        "totalExpectedCapture": sum(p.expected_carbon_capture or 0 for p in projects),
    }
