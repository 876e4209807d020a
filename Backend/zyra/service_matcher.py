"""
Fuzzy service-name matching against a business catalog.

The model often paraphrases or misspells service names ("haircut",
"hair colr"). Before a booking is stored, the raw text is snapped to the
closest catalog entry by case-insensitive Levenshtein distance, but only when
the match is confident enough:

    accept iff distance <= max(3, len(best_candidate) // 2)

Short names get a fixed allowance of three edits; long names may differ by at
most half their length. A rejected match is not an error: the raw text is
kept as-is and the booking still goes through.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from rapidfuzz.distance import Levenshtein

logger = logging.getLogger(__name__)

MIN_EDIT_ALLOWANCE = 3


@dataclass(frozen=True)
class ServiceMatch:
    """Best catalog candidate for a raw service name."""

    name: str
    distance: int
    threshold: int

    @property
    def accepted(self) -> bool:
        return self.distance <= self.threshold


def service_match_threshold(candidate: str) -> int:
    """Maximum edit distance tolerated when matching against ``candidate``."""
    return max(MIN_EDIT_ALLOWANCE, len(candidate) // 2)


def edit_distance(a: str, b: str) -> int:
    """Case-insensitive Levenshtein distance (unit cost for every edit)."""
    return Levenshtein.distance(a.lower(), b.lower())


def find_best_match(raw: str, candidates: Sequence[str]) -> Optional[ServiceMatch]:
    """
    Score ``raw`` against every candidate and return the closest one.

    Ties resolve to the earliest candidate in catalog order. Returns None when
    there is nothing to score (empty raw text or empty catalog).
    """
    if not raw or not candidates:
        return None

    best_name: Optional[str] = None
    best_distance = 0
    for candidate in candidates:
        distance = edit_distance(raw, candidate)
        if best_name is None or distance < best_distance:
            best_name = candidate
            best_distance = distance

    return ServiceMatch(
        name=best_name,
        distance=best_distance,
        threshold=service_match_threshold(best_name),
    )


def match_service(raw: str, candidates: Sequence[str]) -> str:
    """
    Return the canonical catalog name for ``raw``, or ``raw`` unchanged when
    the catalog is empty or no candidate is close enough.
    """
    match = find_best_match(raw, candidates)
    if match is None:
        return raw

    if not match.accepted:
        logger.info(
            f"Service '{raw}' not matched: closest '{match.name}' "
            f"at distance {match.distance} (max {match.threshold})"
        )
        return raw

    return match.name
