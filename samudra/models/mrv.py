"""
MRV data model - one monitoring/reporting submission for a project.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

from samudra.models.base import CamelModel


class MRVStatus(str, Enum):
    """MRV submission status lifecycle."""
    PENDING_ML_PROCESSING = "pending_ml_processing"
    PENDING_VERIFICATION = "pending_verification"
    APPROVED = "approved"
    REJECTED = "rejected"


PENDING_MRV_STATUSES = (MRVStatus.PENDING_ML_PROCESSING, MRVStatus.PENDING_VERIFICATION)


class FileCategory(str, Enum):
    PHOTO = "photo"
    IOT_DATA = "iot_data"
    DOCUMENT = "document"


class UploadedFile(CamelModel):
    """An attachment already written to the file store."""
    name: str
    original_name: str
    size: int = Field(..., ge=0)
    content_type: str = Field(default="application/octet-stream", alias="type")
    category: FileCategory
    path: str
    url: Optional[str] = None
    uploaded_at: datetime


class MRVRawData(CamelModel):
    satellite_data: Optional[str] = None
    community_reports: Optional[str] = None
    sensor_readings: Optional[str] = None
    iot_data: Optional[str] = None
    notes: Optional[str] = None


class MLResults(BaseModel):
    """Simulated measurement attached at submission time."""

    model_config = ConfigDict(populate_by_name=True)

    carbon_estimate: int = Field(..., description="Estimated sequestration in tCO2e")
    biomass_health_score: float = Field(..., ge=0, le=1)
    evidence_cid: str = Field(..., alias="evidenceCid")


class MRVCreate(CamelModel):
    """Schema for submitting MRV data."""
    project_id: Optional[str] = None
    raw_data: MRVRawData = Field(default_factory=MRVRawData)
    files: List[UploadedFile] = Field(default_factory=list)


class MRVData(CamelModel):
    """Stored MRV submission."""
    id: str
    project_id: str
    manager_id: str
    raw_data: MRVRawData
    files: List[UploadedFile] = Field(default_factory=list)
    status: MRVStatus = MRVStatus.PENDING_ML_PROCESSING
    submitted_at: datetime
    verification_notes: Optional[str] = None
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    ml_results: Optional[MLResults] = None
    on_chain_tx_hash: Optional[str] = None


class MRVApproval(CamelModel):
    approved: bool
    notes: Optional[str] = None
