from __future__ import annotations

import logging
import secrets
from enum import Enum
from typing import Callable, Iterable, Sequence

from ..constants import DEFAULT_PREFIXES, YEAR_PLACEHOLDER
from .errors import DuplicateNumberError

logger = logging.getLogger("certitrust.numbering")

MAX_SUFFIX_ATTEMPTS = 25
SEQUENCE_DIGITS = 4
SUFFIX_DIGITS = 3


class Category(str, Enum):
    PARTICIPANT = "participant"
    SPEAKER = "speaker"
    INSTRUCTOR = "instructor"


# Checked in order; the first rule with a matching token wins.
ROLE_RULES: tuple[tuple[Category, frozenset[str]], ...] = (
    (Category.SPEAKER, frozenset({"nara", "speak", "pemateri"})),
    (Category.INSTRUCTOR, frozenset({"instru", "panitia", "committee", "tutor"})),
)


def classify(
    role_text: str | None,
    rules: Sequence[tuple[Category, Iterable[str]]] = ROLE_RULES,
) -> Category:
    """Map a free-text role label onto a numbering category.

    Matching is a case-insensitive substring test. Anything unmatched is a
    participant.
    """
    lowered = (role_text or "").strip().lower()
    if not lowered:
        return Category.PARTICIPANT
    for category, tokens in rules:
        if any(token in lowered for token in tokens):
            return category
    return Category.PARTICIPANT


def prefix_for(category: Category, config) -> str:
    configured = getattr(config, f"prefix_{category.value}", None) if config else None
    cleaned = (configured or "").strip()
    return cleaned or DEFAULT_PREFIXES[category.value]


def generate_number(
    category: Category,
    sequence_index: int,
    prefix_template: str,
    year: int | str,
    suffix: int | None = None,
) -> str:
    """Format ``prefix + seq + "-" + suffix``.

    ``sequence_index`` is the 1-based position inside the issuance batch. The
    suffix is drawn from :mod:`secrets` unless given.
    """
    if not isinstance(category, Category):
        category = Category(category)
    if int(sequence_index) < 1:
        raise ValueError("sequence_index is 1-based")
    year_text = f"{int(year):04d}"
    prefix = (prefix_template or "").replace(YEAR_PLACEHOLDER, year_text)
    if suffix is None:
        suffix = secrets.randbelow(10**SUFFIX_DIGITS)
    seq = f"{int(sequence_index):0{SEQUENCE_DIGITS}d}"
    return f"{prefix}{seq}-{int(suffix):0{SUFFIX_DIGITS}d}"


def allocate_number(
    category: Category,
    sequence_index: int,
    prefix_template: str,
    year: int | str,
    exists: Callable[[str], bool],
    reserved: set[str] | None = None,
    suffix_source: Callable[[], int] | None = None,
) -> str:
    """Generate a number that is neither in the store nor already reserved."""
    reserved = reserved if reserved is not None else set()
    candidate = ""
    for attempt in range(1, MAX_SUFFIX_ATTEMPTS + 1):
        suffix = suffix_source() if suffix_source else None
        candidate = generate_number(
            category, sequence_index, prefix_template, year, suffix=suffix
        )
        if candidate not in reserved and not exists(candidate):
            reserved.add(candidate)
            return candidate
        logger.info(
            "[numbering] collision number=%s attempt=%s", candidate, attempt
        )
    raise DuplicateNumberError(candidate)
