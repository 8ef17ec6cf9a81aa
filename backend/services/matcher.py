"""Two-phase student lookup over a snapshot frame.

Phase 1 matches the student ID (exact or substring). Phase 2, name substring
match, only runs when phase 1 found nothing. Matching is plain case-insensitive
containment, no regex, no ranking; results keep source-file order.
"""

import logging

import pandas as pd

from services.student_data import StudentRecord, records_from_frame

logger = logging.getLogger(__name__)

NAME_FIELDS = ("full_name", "middle_name", "first_name")


def normalize_query(query: str) -> str:
    return query.strip().lower()


def _contains(column: pd.Series, term: str) -> pd.Series:
    """Mask of non-empty values containing ``term`` (case-insensitive)."""
    return (column != "") & column.str.lower().str.contains(term, regex=False)


def search(frame: pd.DataFrame, query: str) -> list[StudentRecord]:
    term = normalize_query(query)
    if not term or frame.empty:
        return []

    # Equality is a special case of containment, so one mask covers both
    by_id = frame[_contains(frame["student_id"], term)]
    if not by_id.empty:
        logger.debug("Query %r: %d student ID matches", term, len(by_id))
        return records_from_frame(by_id)

    name_mask = _contains(frame[NAME_FIELDS[0]], term)
    for field in NAME_FIELDS[1:]:
        name_mask |= _contains(frame[field], term)
    by_name = frame[name_mask]

    logger.debug("Query %r: %d name matches", term, len(by_name))
    return records_from_frame(by_name)
