"""Sheets request body schemas."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import Field

from .base import ApiModel

CellValue = Union[str, int, float, bool, None]

ValueInputOption = Literal["RAW", "USER_ENTERED"]


class ValueRange(ApiModel):
    """A range of cell values in A1 notation."""

    range: str
    major_dimension: Literal["ROWS", "COLUMNS"] = "ROWS"
    values: list[list[CellValue]] = Field(default_factory=list)


class BatchUpdateValuesRequest(ApiModel):
    """Body of ``values:batchUpdate``."""

    value_input_option: ValueInputOption = "USER_ENTERED"
    data: list[ValueRange]
    include_values_in_response: bool | None = None
