"""
MRV (Monitoring, Reporting, Verification) workflow handler.

State machine per project and submission:

    project:  registered -> mrv_submitted -> approved | rejected
    mrv:      pending_ml_processing -> approved | rejected

Approval mints exactly one carbon credit sized by the submission's simulated
carbon estimate.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import (
    BIOMASS_HEALTH_MIN,
    BIOMASS_HEALTH_SPAN,
    CARBON_ESTIMATE_MAX,
    CARBON_ESTIMATE_MIN,
    CREDIT_PREFIX,
    MIN_MRV_FIELD_LENGTH,
    MRV_PREFIX,
)
from samudra.core.errors import (
    AuthorizationError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from samudra.db import kv_store, repository
from samudra.handlers.chain import TX_CREDIT_ISSUANCE, ChainClient, ChainError
from samudra.handlers.storage import FileStore, categorize_file
from samudra.models.credit import CarbonCredit
from samudra.models.mrv import (
    PENDING_MRV_STATUSES,
    FileCategory,
    MLResults,
    MRVCreate,
    MRVData,
    MRVStatus,
    UploadedFile,
)
from samudra.models.project import ProjectStatus
from samudra.utils.hashing import evidence_cid, generate_id
from samudra.utils.time import epoch_millis, utc_now

logger = logging.getLogger(__name__)

SUBMITTABLE_PROJECT_STATUSES = (ProjectStatus.REGISTERED, ProjectStatus.MRV_SUBMITTED)


def validate_mrv_data(mrv_request: MRVCreate) -> None:
    """Raise ValidationError unless the submission carries enough evidence."""
    if not mrv_request.project_id:
        raise ValidationError("Project ID is required")

    raw = mrv_request.raw_data
    if not raw.satellite_data or not raw.community_reports:
        raise ValidationError("Satellite data and community reports are required")

    if len(raw.satellite_data) < MIN_MRV_FIELD_LENGTH or len(raw.community_reports) < MIN_MRV_FIELD_LENGTH:
        raise ValidationError(
            f"MRV data must contain sufficient detail (minimum {MIN_MRV_FIELD_LENGTH} characters each)"
        )


def simulate_mrv_measurement(payload: Dict[str, Any], rng: Optional[random.Random] = None) -> MLResults:
    """
    Simulated sequestration measurement for a submission.

    carbon_estimate is a uniform integer in [50, 150) tCO2e and
    biomass_health_score a uniform float in [0.7, 1.0). This number, not the
    project score, sizes the credit minted on approval.
    """
    rng = rng or random.Random()
    return MLResults(
        carbon_estimate=rng.randrange(CARBON_ESTIMATE_MIN, CARBON_ESTIMATE_MAX),
        biomass_health_score=rng.random() * BIOMASS_HEALTH_SPAN + BIOMASS_HEALTH_MIN,
        evidence_cid=evidence_cid(payload)
    )


def calculate_mrv_quality_score(mrv: MRVData) -> int:
    """
    Completeness score of a submission, 0-100.

    40 points for text fields longer than 20 characters, 40 for coverage
    of the three attachment categories, 20 for attachment count.
    """
    raw = mrv.raw_data
    text_fields = [raw.satellite_data, raw.community_reports, raw.sensor_readings, raw.iot_data, raw.notes]
    completed = sum(1 for field in text_fields if field and len(field) > 20)
    score = completed / len(text_fields) * 40

    categories = {f.category for f in mrv.files}
    score += len(categories) / len(FileCategory) * 40

    file_count = len(mrv.files)
    if file_count >= 10:
        score += 20
    elif file_count >= 5:
        score += 15
    elif file_count >= 3:
        score += 10
    elif file_count >= 1:
        score += 5

    return int(score + 0.5)


async def upload_files(
    session: AsyncSession,
    project_id: Optional[str],
    files: List[Tuple[str, Optional[str], bytes]],
    manager_id: str,
    store: FileStore
) -> List[UploadedFile]:
    """
    Store evidence attachments for a project.

    Args:
        files: (filename, content type, content) triples

    Every file is written before anything references it; a failure part-way
    leaves earlier files in the store.
    """
    if not project_id:
        raise ValidationError("Project ID is required")

    project = await repository.get_project(session, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    if project.manager_id != manager_id:
        raise AuthorizationError("Access denied: You can only upload files for your own projects")

    uploaded = []
    for filename, content_type, content in files:
        path = f"{project_id}/{epoch_millis()}_{filename}"
        url = await store.save(path, content, content_type)
        uploaded.append(UploadedFile(
            name=filename,
            original_name=filename,
            size=len(content),
            content_type=content_type or "application/octet-stream",
            category=categorize_file(filename, content_type),
            path=path,
            url=url,
            uploaded_at=utc_now()
        ))

    logger.info("Uploaded %d files for project %s", len(uploaded), project_id)
    return uploaded


async def submit_mrv_data(
    session: AsyncSession,
    mrv_request: MRVCreate,
    manager_id: str,
    rng: Optional[random.Random] = None
) -> MRVData:
    """Record a submission and move its project to ``mrv_submitted``."""
    validate_mrv_data(mrv_request)

    found = await repository.get_project_versioned(session, mrv_request.project_id)
    if found is None:
        raise NotFoundError("Project not found")
    project, project_version = found

    if project.manager_id != manager_id:
        raise AuthorizationError("Access denied: You can only submit MRV data for your own projects")
    if project.status not in SUBMITTABLE_PROJECT_STATUSES:
        raise StateConflictError(f"Cannot submit MRV data for a project with status {project.status.value}")

    mrv_id = generate_id(MRV_PREFIX)
    mrv = MRVData(
        id=mrv_id,
        project_id=project.id,
        manager_id=manager_id,
        raw_data=mrv_request.raw_data,
        files=mrv_request.files,
        status=MRVStatus.PENDING_ML_PROCESSING,
        submitted_at=utc_now(),
        ml_results=simulate_mrv_measurement(
            {"mrvId": mrv_id, "rawData": mrv_request.raw_data.to_store()},
            rng
        )
    )

    await repository.save_mrv(session, mrv)
    project.status = ProjectStatus.MRV_SUBMITTED
    if not await kv_store.compare_and_set(session, project.id, project_version, project.to_store()):
        await session.rollback()
        raise StateConflictError("Project was modified concurrently, please retry")
    await session.commit()

    logger.info(
        "MRV %s submitted for project %s (estimate %s tCO2e)",
        mrv_id, project.id, mrv.ml_results.carbon_estimate
    )
    return mrv


async def get_pending_mrv(session: AsyncSession) -> List[MRVData]:
    return await repository.get_pending_mrv(session)


async def _issue_credit(
    session: AsyncSession,
    mrv: MRVData,
    chain: ChainClient
) -> CarbonCredit:
    """Mint the single credit for an approved submission."""
    results = mrv.ml_results
    await repository.increment_credits_issued(session, results.carbon_estimate)

    credit_id = generate_id(CREDIT_PREFIX)
    tx_hash = None
    try:
        tx = await chain.submit(TX_CREDIT_ISSUANCE, {
            "creditId": credit_id,
            "projectId": mrv.project_id,
            "amount": results.carbon_estimate,
            "evidenceCid": results.evidence_cid,
        })
        tx_hash = tx.tx_hash
    except ChainError as e:
        # Credit is still issued, without a tx hash
        logger.warning("Issuing credits for MRV %s without chain transaction: %s", mrv.id, e)

    credit = CarbonCredit(
        id=credit_id,
        project_id=mrv.project_id,
        amount=results.carbon_estimate,
        owner_id=None,
        is_retired=False,
        health_score=results.biomass_health_score,
        evidence_cid=results.evidence_cid,
        verified_at=utc_now(),
        mrv_id=mrv.id,
        on_chain_tx_hash=tx_hash
    )
    await repository.save_credit(session, credit)
    mrv.on_chain_tx_hash = tx_hash

    logger.info("Carbon credits issued for MRV %s: %s tCO2e", mrv.id, results.carbon_estimate)
    return credit


async def approve_mrv(
    session: AsyncSession,
    mrv_id: str,
    verifier_id: str,
    approved: bool,
    notes: Optional[str],
    chain: ChainClient
) -> MRVData:
    """
    Apply a verifier's decision to a pending submission.

    The MRV status change, counter increment, credit and project status are
    committed together; the MRV row's version guards against a second
    decision racing this one.
    """
    found = await repository.get_mrv_versioned(session, mrv_id)
    if found is None:
        raise NotFoundError("MRV report not found")
    mrv, mrv_version = found

    if mrv.status not in PENDING_MRV_STATUSES:
        raise StateConflictError("MRV report has already been processed")

    if approved and mrv.ml_results is None:
        raise StateConflictError("MRV report has no measurement results to issue credits from")

    mrv.status = MRVStatus.APPROVED if approved else MRVStatus.REJECTED
    mrv.verification_notes = notes
    mrv.verified_by = verifier_id
    mrv.verified_at = utc_now()

    if approved:
        await _issue_credit(session, mrv, chain)

    if not await kv_store.compare_and_set(session, mrv.id, mrv_version, mrv.to_store()):
        await session.rollback()
        raise StateConflictError("MRV report has already been processed")

    project = await repository.get_project(session, mrv.project_id)
    if project is not None:
        project.status = ProjectStatus.APPROVED if approved else ProjectStatus.REJECTED
        await repository.save_project(session, project)
    else:
        logger.warning("Project %s for MRV %s no longer exists", mrv.project_id, mrv.id)

    await session.commit()

    logger.info("MRV %s %s by verifier %s", mrv.id, mrv.status.value, verifier_id)
    return mrv
