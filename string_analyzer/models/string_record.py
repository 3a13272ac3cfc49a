from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StringProperties(BaseModel):
    """Structural snapshot of a string, computed once when it is stored."""

    model_config = ConfigDict(frozen=True)

    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # SHA-256 hash of value
    value: str
    properties: StringProperties
    created_at: datetime


class FilterSet(BaseModel):
    """
    Optional predicates used to narrow a listing.

    A field left as None is unconstrained. There are no defaults: an empty
    FilterSet matches every record.
    """

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = Field(None, min_length=1, max_length=1)

    def is_empty(self) -> bool:
        return not self.as_dict()

    def as_dict(self) -> Dict[str, Any]:
        """Only the predicates that are actually set"""
        return self.model_dump(exclude_none=True)


class FilterResult(BaseModel):
    data: List[StringRecord]
    count: int
    filters_applied: Dict[str, Any]


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResult(BaseModel):
    data: List[StringRecord]
    count: int
    interpreted_query: InterpretedQuery
