from datetime import datetime, timezone
from typing import Callable, Optional

from string_analyzer.crud.string_repository import StringRepository
from string_analyzer.exceptions import (
    ConflictError,
    ConflictingFiltersError,
    InvalidInputError,
    NotFoundError,
    UninterpretableQueryError,
)
from string_analyzer.models.string_record import (
    FilterResult,
    FilterSet,
    InterpretedQuery,
    NaturalLanguageResult,
    StringRecord,
)
from string_analyzer.services.analyzer import analyze_string, is_utf8_encodable
from string_analyzer.services.query_parser import QueryParser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StringService:
    """
    Create, read, filter and delete analyzed strings.

    The repository and parser are handed in by whoever owns them (the app
    factory in production, fixtures in tests).
    """

    def __init__(
        self,
        repository: StringRepository,
        parser: Optional[QueryParser] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.parser = parser or QueryParser()
        self.clock = clock

    def create_string(self, value: str) -> StringRecord:
        """
        Analyze and store a string.
        Raises ConflictError if the string is already stored.
        """
        if not isinstance(value, str):
            raise InvalidInputError()
        if not is_utf8_encodable(value):
            raise InvalidInputError('The "value" field must be valid Unicode text')

        if self.repository.exists(value):
            raise ConflictError(value)

        properties = analyze_string(value)
        record = StringRecord(
            id=properties.sha256_hash,
            value=value,
            properties=properties,
            created_at=self.clock(),
        )
        if not self.repository.save_if_absent(record):
            raise ConflictError(value)
        return record

    def get_string(self, value: str) -> StringRecord:
        record = self.repository.find_by_value(value)
        if record is None:
            raise NotFoundError(value)
        return record

    def list_strings(self, filters: Optional[FilterSet] = None) -> FilterResult:
        """Get all strings matching the given filters"""
        filters = filters or FilterSet()
        self.parser.validate_filters(filters)

        records = self.repository.filter(filters)
        return FilterResult(
            data=records,
            count=len(records),
            filters_applied=filters.as_dict(),
        )

    def filter_by_natural_language(self, query: str) -> NaturalLanguageResult:
        """
        Filter strings using a natural language query.

        An unrecognised query raises UninterpretableQueryError instead of
        falling back to listing everything; min_length > max_length raises
        ConflictingFiltersError.
        """
        filters = self.parser.parse(query)
        if filters.is_empty():
            raise UninterpretableQueryError(query)

        try:
            self.parser.validate_filters(filters)
        except ConflictingFiltersError as exc:
            raise ConflictingFiltersError(filters, str(exc), query=query) from exc

        records = self.repository.filter(filters)
        return NaturalLanguageResult(
            data=records,
            count=len(records),
            interpreted_query=InterpretedQuery(
                original=query,
                parsed_filters=filters.as_dict(),
            ),
        )

    def delete_string(self, value: str) -> None:
        if not self.repository.delete_by_value(value):
            raise NotFoundError(value)
