"""
Shared base for registry entity schemas.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire and in the store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_store(self) -> dict:
        """JSON-safe dict in the stored (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)
