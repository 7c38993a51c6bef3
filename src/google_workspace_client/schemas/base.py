"""Shared base model for Google API request bodies."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake-case fields serialized with Google's camelCase names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        """Dump to the JSON shape the API expects, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
