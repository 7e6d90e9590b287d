"""
Verification scoring models.
"""

from pydantic import Field
from typing import List, Optional
from datetime import datetime

from samudra.models.base import CamelModel
from samudra.models.project import ProjectCreate


class ScoreResult(CamelModel):
    """Output of the project scoring heuristic."""
    score: float = Field(..., ge=0, le=1)
    confidence: float = Field(..., ge=0.3, le=1)
    risk_factors: List[str] = Field(default_factory=list)
    recommendation: str


class MLVerification(CamelModel):
    """Stored scoring result, one per project."""
    project_id: str
    ml_score: float
    confidence: float
    risk_factors: List[str] = Field(default_factory=list)
    recommendation: str
    timestamp: datetime
    verifier_id: str


class VerifyProjectRequest(CamelModel):
    project_id: Optional[str] = None
    project_data: ProjectCreate = Field(default_factory=ProjectCreate)
