"""
Project model - a registered blue-carbon restoration site.
"""

from pydantic import Field
from typing import Optional
from datetime import datetime
from enum import Enum

from samudra.models.base import CamelModel


class EcosystemType(str, Enum):
    MANGROVE = "mangrove"
    SALTMARSH = "saltmarsh"
    SEAGRASS = "seagrass"
    COASTAL_WETLAND = "coastal_wetland"


class ProjectStatus(str, Enum):
    """Project status lifecycle."""
    REGISTERED = "registered"
    MRV_SUBMITTED = "mrv_submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProjectCreate(CamelModel):
    """
    Schema for registering a project.

    Fields are optional here so missing values surface as registry
    validation errors rather than framework ones. The same shape is the
    input of the scoring heuristic.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    ecosystem_type: Optional[str] = None
    area: Optional[float] = None
    coordinates: Optional[str] = None
    community_partners: Optional[str] = None
    expected_carbon_capture: Optional[float] = None


class Project(CamelModel):
    """Stored project record."""
    id: str
    name: str
    description: str
    location: str
    ecosystem_type: EcosystemType
    area: float = Field(..., gt=0, description="Area in hectares")
    coordinates: Optional[str] = None
    community_partners: Optional[str] = None
    expected_carbon_capture: Optional[float] = None
    manager_id: str
    manager_name: Optional[str] = None
    manager_email: Optional[str] = None
    status: ProjectStatus = ProjectStatus.REGISTERED
    created_at: datetime
    on_chain_tx_hash: Optional[str] = None
