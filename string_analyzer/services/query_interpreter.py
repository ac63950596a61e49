import re
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

LONGER_THAN_PATTERN = re.compile(r"longer than ([0-9]+)")
LETTER_PATTERN = re.compile(r"containing the letter ([a-z])")
LOOSE_LETTER_PATTERN = re.compile(r"containing ([a-z])")

Detector = Callable[[str, Dict[str, Any]], Optional[Any]]


def _detect_palindrome(query: str, filters: Dict[str, Any]) -> Optional[bool]:
    if "palindromic" in query or "palindrome" in query:
        return True
    return None


def _detect_single_word(query: str, filters: Dict[str, Any]) -> Optional[int]:
    if "single word" in query:
        return 1
    return None


def _detect_longer_than(query: str, filters: Dict[str, Any]) -> Optional[int]:
    # "longer than N" is strict, so the inclusive bound is N + 1
    match = LONGER_THAN_PATTERN.search(query)
    if match:
        return int(match.group(1)) + 1
    return None


def _detect_first_vowel(query: str, filters: Dict[str, Any]) -> Optional[str]:
    if "first vowel" in query:
        return "a"
    return None


def _detect_letter(query: str, filters: Dict[str, Any]) -> Optional[str]:
    match = LETTER_PATTERN.search(query)
    if match:
        return match.group(1)
    return None


def _detect_loose_letter(query: str, filters: Dict[str, Any]) -> Optional[str]:
    if "contains_character" in filters:
        return None
    match = LOOSE_LETTER_PATTERN.search(query)
    if match:
        return match.group(1)
    return None


# Order matters: a later hit on the same field overwrites an earlier one.
RULES: List[Tuple[str, Detector]] = [
    ("is_palindrome", _detect_palindrome),
    ("word_count", _detect_single_word),
    ("min_length", _detect_longer_than),
    ("contains_character", _detect_first_vowel),
    ("contains_character", _detect_letter),
    ("contains_character", _detect_loose_letter),
]


def interpret_query(query: str) -> Dict[str, Any]:
    """
    Translate a natural language query into structural filters.

    Examples:
    - "all single word palindromic strings" -> {is_palindrome: True, word_count: 1}
    - "strings longer than 10 characters" -> {min_length: 11}
    - "strings containing the letter z" -> {contains_character: "z"}

    An empty result means nothing in the query was recognized; callers must
    report it as unparseable instead of matching everything.
    """
    normalized = query.lower()
    filters: Dict[str, Any] = {}

    for field, detect in RULES:
        value = detect(normalized, filters)
        if value is not None:
            filters[field] = value

    logger.debug(f"Interpreted query {query!r} as {filters}")
    return filters
