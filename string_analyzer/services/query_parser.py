import re
from typing import Callable, Dict, List, Optional, Tuple

from string_analyzer.exceptions import ConflictingFiltersError
from string_analyzer.models.string_record import FilterSet

PALINDROME_KEYWORDS = ("palindrome", "palindromic")

# No stored string comes anywhere near this many characters or words
MAX_NUMBER_DIGITS = 18


def parse_number(digits: str) -> int:
    if len(digits) > MAX_NUMBER_DIGITS:
        raise ValueError(f"number has {len(digits)} digits, limit is {MAX_NUMBER_DIGITS}")
    return int(digits)


# Word count rules, applied in order. Every matching rule overwrites the
# previous value, so the generic "<N> words" pattern (last) wins.
WORD_COUNT_RULES: List[Tuple[re.Pattern, Callable[[re.Match], int]]] = [
    (re.compile(r"(?:single|one) word"), lambda m: 1),
    (re.compile(r"(?:two|double) word"), lambda m: 2),
    (re.compile(r"three word"), lambda m: 3),
    (re.compile(r"(\d+)\s+words?"), lambda m: parse_number(m.group(1))),
]

# Length rules, applied in order. A later match overwrites min_length /
# max_length set by an earlier one.
LENGTH_RULES: List[Tuple[re.Pattern, Callable[[re.Match], Dict[str, int]]]] = [
    (re.compile(r"longer than (\d+)"), lambda m: {"min_length": parse_number(m.group(1)) + 1}),
    (re.compile(r"shorter than (\d+)"), lambda m: {"max_length": parse_number(m.group(1)) - 1}),
    (re.compile(r"at least (\d+) characters?"), lambda m: {"min_length": parse_number(m.group(1))}),
    (re.compile(r"at most (\d+) characters?"), lambda m: {"max_length": parse_number(m.group(1))}),
    (
        re.compile(r"between (\d+) and (\d+)"),
        lambda m: {"min_length": parse_number(m.group(1)), "max_length": parse_number(m.group(2))},
    ),
]

# Containment rules, tried in order. Unlike the length rules, the first rule
# that yields a character wins and later rules are not consulted.
CONTAINS_RULES: List[Tuple[re.Pattern, Callable[[re.Match], str]]] = [
    (re.compile(r"containing (?:the )?letter ([a-z])"), lambda m: m.group(1)),
    (re.compile(r"contains? ([a-z])\b"), lambda m: m.group(1)),
    (re.compile(r"with (?:the )?letter ([a-z])"), lambda m: m.group(1)),
    (re.compile(r"first vowel"), lambda m: "a"),
    (re.compile(r"second vowel"), lambda m: "e"),
]


def normalize_query(query: str) -> str:
    return query.lower().strip()


def apply_rule(pattern: re.Pattern, extract: Callable, query: str):
    """Value produced by a rule, or None when it does not match"""
    match = pattern.search(query)
    if not match:
        return None
    try:
        return extract(match)
    except ValueError:
        # Oversized number; the rule is skipped rather than failing the query
        return None


class QueryParser:
    """
    Translates natural language queries into a FilterSet.

    Examples:
    - "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
    - "strings longer than 10 characters" -> {min_length: 11}
    - "strings containing the letter z" -> {contains_character: "z"}

    Every rule group is evaluated; a query matching nothing gives an empty
    FilterSet.
    """

    def parse(self, raw_query: str) -> FilterSet:
        query = normalize_query(raw_query)
        filters = {}

        if any(keyword in query for keyword in PALINDROME_KEYWORDS):
            filters["is_palindrome"] = True

        word_count = self._parse_word_count(query)
        if word_count is not None:
            filters["word_count"] = word_count

        filters.update(self._parse_length(query))

        character = self._parse_contains_character(query)
        if character is not None:
            filters["contains_character"] = character

        return FilterSet(**filters)

    def _parse_word_count(self, query: str) -> Optional[int]:
        word_count = None
        for pattern, extract in WORD_COUNT_RULES:
            value = apply_rule(pattern, extract, query)
            if value is not None:
                word_count = value
        return word_count

    def _parse_length(self, query: str) -> Dict[str, int]:
        bounds: Dict[str, int] = {}
        for pattern, extract in LENGTH_RULES:
            value = apply_rule(pattern, extract, query)
            if value is not None:
                bounds.update(value)
        return bounds

    def _parse_contains_character(self, query: str) -> Optional[str]:
        for pattern, extract in CONTAINS_RULES:
            character = apply_rule(pattern, extract, query)
            if character is not None:
                return character
        return None

    def validate_filters(self, filters: FilterSet) -> None:
        """Raise ConflictingFiltersError if the length bounds cannot both hold"""
        if (
            filters.min_length is not None
            and filters.max_length is not None
            and filters.min_length > filters.max_length
        ):
            raise ConflictingFiltersError(
                filters,
                "Conflicting filters: min_length cannot be greater than max_length",
            )
