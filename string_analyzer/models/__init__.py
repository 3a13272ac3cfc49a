from string_analyzer.models.string_record import (
    FilterResult,
    FilterSet,
    InterpretedQuery,
    NaturalLanguageResult,
    StringProperties,
    StringRecord,
)

__all__ = [
    "FilterResult",
    "FilterSet",
    "InterpretedQuery",
    "NaturalLanguageResult",
    "StringProperties",
    "StringRecord",
]
