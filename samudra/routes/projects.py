"""
Project registration endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import ROLE_NCCR_VERIFIER, ROLE_PROJECT_MANAGER
from samudra.core.database import get_session
from samudra.handlers.auth import AuthProvider
from samudra.handlers.chain import ChainClient
from samudra.handlers.projects import (
    create_project,
    delete_project,
    get_all_projects,
    get_manager_projects,
    get_project_stats,
)
from samudra.models.project import ProjectCreate
from samudra.models.user import AuthUser
from samudra.routes.deps import get_auth_provider, get_chain_client, require_role

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("")
async def create_project_endpoint(
    project_data: ProjectCreate,
    user: AuthUser = Depends(require_role(ROLE_PROJECT_MANAGER)),
    session: AsyncSession = Depends(get_session),
    chain: ChainClient = Depends(get_chain_client)
):
    """Register a new restoration project."""
    project = await create_project(session, project_data, user, chain)
    return {"projectId": project.id, "project": project}


@router.get("/manager")
async def manager_projects_endpoint(
    user: AuthUser = Depends(require_role(ROLE_PROJECT_MANAGER)),
    session: AsyncSession = Depends(get_session)
):
    """Projects registered by the calling manager."""
    projects = await get_manager_projects(session, user.id)
    return {"projects": projects, "stats": get_project_stats(projects)}


@router.get("/all")
async def all_projects_endpoint(
    user: AuthUser = Depends(require_role(ROLE_NCCR_VERIFIER)),
    session: AsyncSession = Depends(get_session),
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Every project, enriched with manager name and email."""
    return {"projects": await get_all_projects(session, auth)}


@router.delete("/{project_id}")
async def delete_project_endpoint(
    project_id: str,
    user: AuthUser = Depends(require_role(ROLE_PROJECT_MANAGER)),
    session: AsyncSession = Depends(get_session)
):
    """Delete a project that has not yet entered verification."""
    await delete_project(session, project_id, user.id)
    return {"success": True, "message": "Project deleted successfully"}
