"""
Key-value entry model - the single table every registry entity lives in.
"""

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Any
from datetime import datetime

from samudra.utils.time import utc_now


class KVEntry(SQLModel, table=True):
    """Key-value store table."""
    __tablename__ = "kv_store"

    key: str = Field(primary_key=True, description="Prefixed entity key, e.g. 'project_...'")
    value: Any = Field(default=None, sa_column=Column(JSON, nullable=True))
    version: int = Field(default=1, description="Incremented on every write; used for compare-and-set")
    updated_at: datetime = Field(default_factory=utc_now)
