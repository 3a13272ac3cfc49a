from typing import Optional


class StringAnalyzerError(Exception):
    """Base class for every domain error raised by the string analyzer engine."""

    message = "String analyzer error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class InvalidInputError(StringAnalyzerError):
    """Value is missing or is not a string"""

    message = 'The "value" field must be a string'


class ConflictError(StringAnalyzerError):
    """String is already stored"""

    message = "String already exists in the system"

    def __init__(self, value: str, message: Optional[str] = None):
        super().__init__(message)
        self.value = value


class NotFoundError(StringAnalyzerError):
    """String is not stored"""

    message = "String does not exist in the system"

    def __init__(self, value: str, message: Optional[str] = None):
        super().__init__(message)
        self.value = value


class ConflictingFiltersError(StringAnalyzerError):
    """Filters cannot all hold at once (min_length > max_length)"""

    message = "Query parsed but resulted in conflicting filters"

    def __init__(self, filters, message: Optional[str] = None, query: Optional[str] = None):
        super().__init__(message)
        self.filters = filters
        self.query = query


class UninterpretableQueryError(StringAnalyzerError):
    """Natural language query matched none of the known phrase patterns"""

    message = "Unable to parse natural language query"

    def __init__(self, query: str, message: Optional[str] = None):
        super().__init__(message)
        self.query = query
