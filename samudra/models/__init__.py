# Registry entity schemas

from samudra.models.kv import KVEntry
from samudra.models.project import Project, ProjectCreate, ProjectStatus, EcosystemType
from samudra.models.mrv import MRVData, MRVCreate, MRVStatus, MLResults, UploadedFile
from samudra.models.credit import CarbonCredit, Retirement, Payout
from samudra.models.verification import MLVerification, ScoreResult
from samudra.models.user import AuthUser, UserRole

__all__ = [
    "KVEntry",
    "Project",
    "ProjectCreate",
    "ProjectStatus",
    "EcosystemType",
    "MRVData",
    "MRVCreate",
    "MRVStatus",
    "MLResults",
    "UploadedFile",
    "CarbonCredit",
    "Retirement",
    "Payout",
    "MLVerification",
    "ScoreResult",
    "AuthUser",
    "UserRole",
]
