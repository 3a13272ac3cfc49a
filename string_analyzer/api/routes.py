from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import logging

from string_analyzer.dependencies import get_service
from string_analyzer.models.string_record import (
    FilterResult,
    FilterSet,
    NaturalLanguageResult,
    StringRecord,
)
from string_analyzer.schemas import StringCreate
from string_analyzer.services.string_service import StringService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/strings", response_model=StringRecord, status_code=status.HTTP_201_CREATED)
def create_string(
    string_data: StringCreate,
    service: StringService = Depends(get_service)
):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    record = service.create_string(string_data.value)
    logger.info(f"Stored string {record.id[:12]} (length={record.properties.length})")
    return record


@router.get("/strings", response_model=FilterResult)
def get_all_strings(
    is_palindrome: Optional[bool] = Query(None, description="Filter by palindrome (true/false)"),
    min_length: Optional[int] = Query(None, ge=0, description="Minimum string length"),
    max_length: Optional[int] = Query(None, ge=0, description="Maximum string length"),
    word_count: Optional[int] = Query(None, ge=0, description="Exact word count"),
    contains_character: Optional[str] = Query(
        None, min_length=1, max_length=1, description="Filter strings that contain this character"
    ),
    service: StringService = Depends(get_service)
):
    """
    Get all strings with optional filtering.
    Returns 422 if min_length is greater than max_length.
    """
    filters = FilterSet(
        is_palindrome=is_palindrome,
        min_length=min_length,
        max_length=max_length,
        word_count=word_count,
        contains_character=contains_character,
    )
    return service.list_strings(filters)


# Registered before /strings/{string_value} so the path is not taken as a value
@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResult)
def filter_by_natural_language(
    query: str = Query(..., min_length=1, description="Natural language query"),
    service: StringService = Depends(get_service)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    result = service.filter_by_natural_language(query)
    logger.info(f"Interpreted query {query!r} as {result.interpreted_query.parsed_filters}")
    return result


@router.get("/strings/{string_value}", response_model=StringRecord)
def get_string(
    string_value: str,
    service: StringService = Depends(get_service)
):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    return service.get_string(string_value)


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(
    string_value: str,
    service: StringService = Depends(get_service)
):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    service.delete_string(string_value)
    logger.info(f"Deleted string of length {len(string_value)}")
    return None
