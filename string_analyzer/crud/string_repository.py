import threading
from typing import Dict, List, Optional

from string_analyzer.models.string_record import FilterSet, StringRecord


class StringRepository:
    """
    In-memory storage for analyzed strings.

    Records are keyed by their SHA-256 id, with a secondary value -> id index.
    Both dicts are only ever changed together while holding the lock.
    """

    def __init__(self):
        self._records: Dict[str, StringRecord] = {}
        self._value_index: Dict[str, str] = {}
        self._lock = threading.RLock()

    def save(self, record: StringRecord) -> StringRecord:
        """Store a record; the caller has already checked the value is new"""
        with self._lock:
            self._records[record.id] = record
            self._value_index[record.value] = record.id
        return record

    def save_if_absent(self, record: StringRecord) -> bool:
        """
        Store a record unless its value is already stored.

        The existence check and both index writes happen under one lock, so two
        concurrent creates of the same value cannot both succeed.
        """
        with self._lock:
            if record.value in self._value_index:
                return False
            self.save(record)
        return True

    def find_by_value(self, value: str) -> Optional[StringRecord]:
        """Get string record by its original value"""
        with self._lock:
            record_id = self._value_index.get(value)
            if record_id is None:
                return None
            return self._records.get(record_id)

    def exists(self, value: str) -> bool:
        with self._lock:
            return value in self._value_index

    def find_all(self) -> List[StringRecord]:
        """All records in insertion order"""
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def filter(self, filters: FilterSet) -> List[StringRecord]:
        """Records matching every predicate set on filters"""
        results = self.find_all()

        if filters.is_palindrome is not None:
            results = [r for r in results if r.properties.is_palindrome == filters.is_palindrome]

        if filters.min_length is not None:
            results = [r for r in results if r.properties.length >= filters.min_length]

        if filters.max_length is not None:
            results = [r for r in results if r.properties.length <= filters.max_length]

        if filters.word_count is not None:
            results = [r for r in results if r.properties.word_count == filters.word_count]

        if filters.contains_character is not None:
            # Case-sensitive check against the original value
            results = [r for r in results if filters.contains_character in r.value]

        return results

    def delete_by_value(self, value: str) -> bool:
        """Delete string record by value"""
        with self._lock:
            record_id = self._value_index.pop(value, None)
            if record_id is None:
                return False
            self._records.pop(record_id, None)
            return True
