"""
Project verification scoring handler.

A deterministic weighted heuristic over a project's declared attributes.
It informs the verifier's approve/reject decision; it does not determine
the amount of credit minted (see ``simulate_mrv_measurement`` in
``samudra.handlers.mrv``).
"""

import logging
import math
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import (
    BASE_CONFIDENCE,
    BASE_SCORE,
    COASTAL_STATES,
    DESCRIPTION_KEY_TERMS,
    ECOSYSTEM_SCORES,
    NAME_KEYWORDS,
    PRIORITY_REGIONS,
)
from samudra.core.errors import NotFoundError, ValidationError
from samudra.db import repository
from samudra.models.project import ProjectCreate
from samudra.models.verification import MLVerification, ScoreResult
from samudra.utils.time import utc_now

logger = logging.getLogger(__name__)

RISK_SMALL_AREA = "Small project area may limit carbon sequestration impact"
RISK_VERY_SMALL_AREA = "Very small project area - insufficient for meaningful carbon impact"
RISK_NON_COASTAL = "Location not identified as suitable coastal area for blue carbon projects"

RECOMMEND_APPROVE = (
    "APPROVE - High confidence for verification. "
    "Project demonstrates strong potential for blue carbon impact."
)
RECOMMEND_CONDITIONAL_MINOR = (
    "CONDITIONAL_APPROVAL - Good project fundamentals with minor concerns. "
    "Recommend additional verification steps."
)
RECOMMEND_CONDITIONAL_RISKY = (
    "CONDITIONAL_APPROVAL - Requires additional documentation and verification "
    "to address identified risk factors."
)
RECOMMEND_REVIEW = (
    "REVIEW_REQUIRED - Significant concerns about project viability. "
    "Detailed review and additional information needed before approval."
)
RECOMMEND_REJECT = (
    "REJECT - High risk factors present. "
    "Project does not meet minimum criteria for blue carbon verification."
)


def round_half_up(value: float, places: int = 2) -> float:
    """Round like ``Math.round(value * 100) / 100`` (halves go up)."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def score_ecosystem_type(ecosystem_type: Optional[str]) -> float:
    return ECOSYSTEM_SCORES.get(ecosystem_type or "", 0.0)


def score_area(area: Optional[float], risk_factors: List[str]) -> float:
    """
    Area adjustment in hectares.

    The two small-area penalties stack: an area under 50 ha takes both
    and records both risk factors.
    """
    if area is None:
        return 0.0
    if area > 1000:
        return 0.1

    adjustment = 0.0
    if area < 100:
        risk_factors.append(RISK_SMALL_AREA)
        adjustment -= 0.05
    if area < 50:
        risk_factors.append(RISK_VERY_SMALL_AREA)
        adjustment -= 0.1
    return adjustment


def score_location(location: Optional[str], risk_factors: List[str]) -> float:
    location_lower = (location or "").lower()

    if not any(state in location_lower for state in COASTAL_STATES):
        risk_factors.append(RISK_NON_COASTAL)
        return -0.15

    if any(region in location_lower for region in PRIORITY_REGIONS):
        return 0.15
    return 0.1


def score_description(description: Optional[str]) -> float:
    if not description or len(description) < 50:
        return -0.05

    description_lower = description.lower()
    matches = sum(1 for term in DESCRIPTION_KEY_TERMS if term in description_lower)
    return (matches / len(DESCRIPTION_KEY_TERMS)) * 0.1


def score_name(name: Optional[str]) -> float:
    if not name or len(name) < 10:
        return -0.02

    name_lower = name.lower()
    return 0.02 if any(keyword in name_lower for keyword in NAME_KEYWORDS) else 0.0


def generate_recommendation(score: float, risk_factors: List[str]) -> str:
    if score >= 0.8:
        return RECOMMEND_APPROVE
    if score >= 0.6:
        if len(risk_factors) <= 2:
            return RECOMMEND_CONDITIONAL_MINOR
        return RECOMMEND_CONDITIONAL_RISKY
    if score >= 0.4:
        return RECOMMEND_REVIEW
    return RECOMMEND_REJECT


def calculate_verification_score(project: ProjectCreate) -> ScoreResult:
    """
    Score a project's declared attributes.

    Starts from a base of 0.5 and adds ecosystem, area, location,
    description and name adjustments, then clamps to [0, 1].

    Args:
        project: Project-shaped record; any field may be missing

    Returns:
        ScoreResult with score and confidence rounded to 2 decimals
    """
    risk_factors: List[str] = []

    score = BASE_SCORE
    score += score_ecosystem_type(project.ecosystem_type)
    score += score_area(project.area, risk_factors)
    score += score_location(project.location, risk_factors)
    score += score_description(project.description)
    score += score_name(project.name)
    score = max(0.0, min(1.0, score))

    confidence = BASE_CONFIDENCE
    if len(risk_factors) > 3:
        confidence -= 0.1
    confidence = max(0.3, min(1.0, confidence))

    rounded_score = round_half_up(score)
    return ScoreResult(
        score=rounded_score,
        confidence=round_half_up(confidence),
        risk_factors=risk_factors,
        recommendation=generate_recommendation(rounded_score, risk_factors)
    )


async def verify_project(
    session: AsyncSession,
    project_id: Optional[str],
    project_data: ProjectCreate,
    verifier_id: str
) -> MLVerification:
    """Score a project and store the result, replacing any earlier run."""
    if not project_id:
        raise ValidationError("Project ID is required")

    logger.info("Starting verification scoring for project %s", project_id)
    result = calculate_verification_score(project_data)

    verification = MLVerification(
        project_id=project_id,
        ml_score=result.score,
        confidence=result.confidence,
        risk_factors=result.risk_factors,
        recommendation=result.recommendation,
        timestamp=utc_now(),
        verifier_id=verifier_id
    )
    await repository.save_ml_verification(session, verification)
    await session.commit()

    logger.info("Verification scoring completed for project %s: score %s", project_id, result.score)
    return verification


async def get_verification(session: AsyncSession, project_id: str) -> MLVerification:
    verification = await repository.get_ml_verification(session, project_id)
    if verification is None:
        raise NotFoundError("No ML verification found for this project")
    return verification
