import hashlib
from collections import Counter
from typing import Dict

from string_analyzer.models.string_record import StringProperties

# Every property works on Python str granularity (Unicode code points), and
# unique_characters is read off the same frequency map so the two always agree.


def sha256_hex(text: str) -> str:
    """Identity digest of a string: SHA-256 over its UTF-8 bytes"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def is_utf8_encodable(text: str) -> bool:
    """False for strings carrying lone surrogates, which have no UTF-8 form"""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def is_palindrome(text: str) -> bool:
    """Same forwards and backwards once lower-cased and stripped of whitespace"""
    letters = "".join(text.lower().split())
    return letters == letters[::-1]


def count_words(text: str) -> int:
    return len(text.split())


def character_frequency(text: str) -> Dict[str, int]:
    return dict(Counter(text))


def analyze_string(value: str) -> StringProperties:
    """Compute the structural snapshot stored alongside a string"""
    frequency = character_frequency(value)
    return StringProperties(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=len(frequency),
        word_count=count_words(value),
        sha256_hash=sha256_hex(value),
        character_frequency_map=frequency,
    )
