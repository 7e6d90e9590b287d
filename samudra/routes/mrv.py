"""
MRV submission and verification endpoints.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from samudra.core.constants import ROLE_NCCR_VERIFIER, ROLE_PROJECT_MANAGER
from samudra.core.database import get_session
from samudra.handlers.chain import ChainClient
from samudra.handlers.mrv import (
    approve_mrv,
    calculate_mrv_quality_score,
    get_pending_mrv,
    submit_mrv_data,
    upload_files,
)
from samudra.handlers.storage import FileStore
from samudra.models.mrv import MRVApproval, MRVCreate
from samudra.models.user import AuthUser
from samudra.routes.deps import get_chain_client, get_file_store, require_role

router = APIRouter(prefix="/mrv", tags=["mrv"])


@router.post("/upload")
async def upload_mrv_files_endpoint(
    files: Optional[List[UploadFile]] = File(default=None),
    project_id: Optional[str] = Form(default=None, alias="projectId"),
    user: AuthUser = Depends(require_role(ROLE_PROJECT_MANAGER)),
    session: AsyncSession = Depends(get_session),
    store: FileStore = Depends(get_file_store)
):
    """
    Upload evidence attachments for a project.

    Files are categorised as photo, iot_data or document and their
    descriptors returned for inclusion in a later MRV submission.
    """
    contents = []
    for upload in files or []:
        contents.append((upload.filename or "upload", upload.content_type, await upload.read()))

    uploaded = await upload_files(session, project_id, contents, user.id, store)
    return {
        "success": True,
        "files": uploaded,
        "message": f"Successfully uploaded {len(uploaded)} files"
    }


@router.post("")
async def submit_mrv_endpoint(
    mrv_request: MRVCreate,
    user: AuthUser = Depends(require_role(ROLE_PROJECT_MANAGER)),
    session: AsyncSession = Depends(get_session)
):
    """Submit monitoring data for a project."""
    mrv = await submit_mrv_data(session, mrv_request, user.id)
    return {"mrvId": mrv.id, "mrvData": mrv, "qualityScore": calculate_mrv_quality_score(mrv)}


@router.get("/pending")
async def pending_mrv_endpoint(
    user: AuthUser = Depends(require_role(ROLE_NCCR_VERIFIER)),
    session: AsyncSession = Depends(get_session)
):
    """Submissions awaiting a verifier decision."""
    return {"pendingMrv": await get_pending_mrv(session)}


@router.post("/{mrv_id}/approve")
async def approve_mrv_endpoint(
    mrv_id: str,
    decision: MRVApproval,
    user: AuthUser = Depends(require_role(ROLE_NCCR_VERIFIER)),
    session: AsyncSession = Depends(get_session),
    chain: ChainClient = Depends(get_chain_client)
):
    """
    Approve or reject a submission.

    Approval mints one carbon credit sized by the submission's carbon
    estimate and marks the project approved; rejection marks it rejected.
    """
    mrv = await approve_mrv(session, mrv_id, user.id, decision.approved, decision.notes, chain)
    return {"success": True, "mrvData": mrv}
