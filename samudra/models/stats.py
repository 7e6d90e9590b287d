"""
Public statistics schema.
"""

from pydantic import Field
from typing import List

from samudra.models.base import CamelModel
from samudra.models.project import Project


class PublicStats(CamelModel):
    total_credits_issued: float = 0
    total_credits_retired: float = 0
    total_projects: int = 0
    projects: List[Project] = Field(default_factory=list)
