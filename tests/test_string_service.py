"""Unit tests for StringService orchestration."""

import threading

import pytest

from string_analyzer.exceptions import (
    ConflictError,
    ConflictingFiltersError,
    InvalidInputError,
    NotFoundError,
    UninterpretableQueryError,
)
from string_analyzer.models.string_record import FilterSet
from string_analyzer.services.analyzer import sha256_hex
from string_analyzer.services.string_service import StringService
from tests.conftest import FIXED_NOW


@pytest.fixture
def populated(service):
    for value in ["racecar", "hello world", "level", "a quick brown fox", "noon"]:
        service.create_string(value)
    return service


class TestCreate:
    def test_create_returns_record(self, service):
        record = service.create_string("race car")

        assert record.id == sha256_hex("race car")
        assert record.value == "race car"
        assert record.properties.is_palindrome is True
        assert record.properties.sha256_hash == record.id
        assert record.created_at == FIXED_NOW

    def test_duplicate_value_is_rejected(self, service, repository):
        service.create_string("hello")

        with pytest.raises(ConflictError):
            service.create_string("hello")
        assert repository.count() == 1

    def test_values_differing_in_case_are_distinct(self, service):
        first = service.create_string("Hello")
        second = service.create_string("hello")
        assert first.id != second.id

    @pytest.mark.parametrize("value", [123, None, ["a"], {"value": "a"}])
    def test_non_string_value(self, service, value):
        with pytest.raises(InvalidInputError):
            service.create_string(value)

    def test_empty_string_is_allowed(self, service):
        record = service.create_string("")
        assert record.properties.length == 0

    def test_lone_surrogate_is_rejected_before_storing(self, service, repository):
        with pytest.raises(InvalidInputError):
            service.create_string("abc\ud800")
        assert repository.count() == 0


class TestConcurrentCreate:
    def test_same_value_is_created_once(self, repository, parser):
        # Both threads pass the early exists() check, then meet here before saving
        barrier = threading.Barrier(2, timeout=5)

        def clock():
            barrier.wait()
            return FIXED_NOW

        service = StringService(repository, parser, clock=clock)
        outcomes = []

        def create():
            try:
                service.create_string("same")
                outcomes.append("created")
            except ConflictError:
                outcomes.append("conflict")

        threads = [threading.Thread(target=create) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["conflict", "created"]
        assert repository.count() == 1


class TestRetrieveAndDelete:
    def test_get_string(self, service):
        created = service.create_string("hello")
        assert service.get_string("hello") == created

    def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get_string("missing")

    def test_delete_then_get(self, service, repository):
        service.create_string("hello")
        service.delete_string("hello")

        with pytest.raises(NotFoundError):
            service.get_string("hello")
        assert repository.exists("hello") is False

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_string("missing")


class TestListStrings:
    def test_no_filters(self, populated):
        result = populated.list_strings()
        assert result.count == 5
        assert result.filters_applied == {}

    def test_filters_applied_reflects_set_fields_only(self, populated):
        result = populated.list_strings(FilterSet(is_palindrome=True, max_length=5))

        assert {r.value for r in result.data} == {"level", "noon"}
        assert result.count == 2
        assert result.filters_applied == {"is_palindrome": True, "max_length": 5}

    def test_conflicting_bounds(self, populated):
        with pytest.raises(ConflictingFiltersError):
            populated.list_strings(FilterSet(min_length=8, max_length=2))


class TestNaturalLanguage:
    def test_palindrome_query(self, populated):
        result = populated.filter_by_natural_language("all single word palindromic strings")

        assert {r.value for r in result.data} == {"racecar", "level", "noon"}
        assert result.count == 3
        assert result.interpreted_query.original == "all single word palindromic strings"
        assert result.interpreted_query.parsed_filters == {"is_palindrome": True, "word_count": 1}

    def test_uninterpretable_query_does_not_list_everything(self, populated):
        with pytest.raises(UninterpretableQueryError) as exc_info:
            populated.filter_by_natural_language("xyzzy nonsense")
        assert exc_info.value.query == "xyzzy nonsense"

    def test_conflicting_query(self, populated):
        with pytest.raises(ConflictingFiltersError) as exc_info:
            populated.filter_by_natural_language("longer than 10 and shorter than 5")

        assert exc_info.value.query == "longer than 10 and shorter than 5"
        assert exc_info.value.filters.as_dict() == {"min_length": 11, "max_length": 4}

    def test_query_with_no_matches(self, populated):
        result = populated.filter_by_natural_language("strings containing the letter z")
        assert result.count == 0
        assert result.data == []
