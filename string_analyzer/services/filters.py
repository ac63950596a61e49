import re
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence

from string_analyzer.schemas.analysis import StringProperties, StringResponse

logger = logging.getLogger(__name__)

# Leading integer, the way a lenient integer parse reads "12abc" as 12
LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")

Predicate = Callable[[StringProperties], bool]


def _external_form(value: Any) -> str:
    """Render a filter value the way it arrives as a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_external_form(item) for item in value)
    return str(value)


def _parse_int(value: Any) -> Optional[int]:
    """Parse an integer bound, returning None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = LEADING_INTEGER.match(_external_form(value))
    if not match:
        return None
    return int(match.group(1))


def _palindrome_predicate(value: Any) -> Predicate:
    wanted = _external_form(value) == "true"
    return lambda props: props.is_palindrome == wanted


def _bounded_predicate(name: str, value: Any, test: Callable[[StringProperties, int], bool]) -> Optional[Predicate]:
    number = _parse_int(value)
    if number is None:
        logger.warning(f"Ignoring {name} filter: {value!r} is not an integer")
        return None
    return lambda props: test(props, number)


def _character_predicate(value: Any) -> Optional[Predicate]:
    if not isinstance(value, str):
        logger.warning(f"Ignoring contains_character filter: {value!r} is not a string")
        return None
    # Exact key lookup, the frequency map is case-sensitive
    return lambda props: props.character_frequency_map.get(value, 0) > 0


def build_predicates(filters: Mapping[str, Any]) -> List[Predicate]:
    """Turn the recognized, well-formed entries of ``filters`` into predicates.

    Unknown keys and ``None`` values impose no constraint. Bounds that do not
    parse as integers and non-string characters are skipped instead of
    rejecting the request.
    """
    predicates: List[Optional[Predicate]] = []

    if filters.get("is_palindrome") is not None:
        predicates.append(_palindrome_predicate(filters["is_palindrome"]))

    if filters.get("min_length") is not None:
        predicates.append(_bounded_predicate(
            "min_length", filters["min_length"], lambda props, n: props.length >= n
        ))

    if filters.get("max_length") is not None:
        predicates.append(_bounded_predicate(
            "max_length", filters["max_length"], lambda props, n: props.length <= n
        ))

    if filters.get("word_count") is not None:
        predicates.append(_bounded_predicate(
            "word_count", filters["word_count"], lambda props, n: props.word_count == n
        ))

    if filters.get("contains_character") is not None:
        predicates.append(_character_predicate(filters["contains_character"]))

    return [predicate for predicate in predicates if predicate is not None]


def apply_filters(records: Sequence[StringResponse], filters: Mapping[str, Any]) -> List[StringResponse]:
    """Return the records that satisfy every filter, in their original order."""
    predicates = build_predicates(filters)
    if not predicates:
        return list(records)

    return [
        record for record in records
        if all(predicate(record.properties) for predicate in predicates)
    ]
