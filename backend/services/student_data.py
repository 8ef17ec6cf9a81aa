"""Student graduation records: CSV source, parsing, and the cached store.

The source is a headerless delimited file on local disk (comma, tab, pipe or
semicolon), 14 columns per row in a fixed order (see COLUMNS).
Values are kept as text exactly as stored; the only derived field is
``full_name``.

The parsed snapshot is a DataFrame held by a StudentStore for a TTL window.
Route handlers receive the store through the ``get_student_store`` dependency.
"""

import csv
import io
import itertools
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

import pandas as pd

from config import settings
from errors import DataUnavailableError
from services.cache import SnapshotCache

logger = logging.getLogger(__name__)

# Source column order. Rows shorter than this are dropped, longer rows are cut.
COLUMNS = (
    "record_id",
    "term",
    "student_id",
    "middle_name",
    "first_name",
    "birth_date",
    "hometown",
    "gender",
    "honors_rank",
    "major",
    "class_name",
    "gpa",
    "school",
    "level",
)
SOURCE_COLUMN_COUNT = len(COLUMNS)

# Exports come comma, tab, pipe or semicolon separated. Comma wins ties.
DELIMITERS = (",", "\t", "|", ";")
DELIMITER_SAMPLE_ROWS = 50


@dataclass(frozen=True)
class StudentRecord:
    record_id: str
    term: str
    student_id: str
    middle_name: str
    first_name: str
    birth_date: str
    hometown: str
    gender: str
    honors_rank: str
    major: str
    class_name: str
    gpa: str
    school: str
    level: str

    @property
    def full_name(self) -> str:
        return f"{self.middle_name} {self.first_name}"


class TextSource(Protocol):
    def read(self) -> str: ...


class FileSource:
    """Reads the whole CSV file as text on every call."""

    def __init__(self, path: Path | str, encoding: str = "utf-8-sig"):
        self.path = Path(path)
        self.encoding = encoding

    def read(self) -> str:
        with open(self.path, encoding=self.encoding, newline="") as f:
            return f.read()

    def __str__(self) -> str:
        return str(self.path)


def detect_delimiter(text: str) -> str:
    """Pick the delimiter that splits the most leading rows into full records."""
    best, best_hits = DELIMITERS[0], 0
    for delimiter in DELIMITERS:
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
        hits = sum(
            1 for row in itertools.islice(reader, DELIMITER_SAMPLE_ROWS) if len(row) >= SOURCE_COLUMN_COUNT
        )
        if hits > best_hits:
            best, best_hits = delimiter, hits
    return best


def parse_student_csv(text: str) -> pd.DataFrame:
    """Parse headerless delimited text into a snapshot frame (COLUMNS + full_name)."""
    delimiter = detect_delimiter(text)
    if delimiter != ",":
        logger.info("Student data uses %r as delimiter", delimiter)

    rows = []
    dropped = 0
    for row in csv.reader(io.StringIO(text, newline=""), delimiter=delimiter):
        if len(row) < SOURCE_COLUMN_COUNT:
            # csv.reader yields [] for blank lines; those are not worth reporting
            if row:
                dropped += 1
            continue
        rows.append(row[:SOURCE_COLUMN_COUNT])

    if dropped:
        logger.info("Dropped %d rows with fewer than %d columns", dropped, SOURCE_COLUMN_COUNT)

    frame = pd.DataFrame(rows, columns=list(COLUMNS), dtype=str)
    frame["full_name"] = frame["middle_name"] + " " + frame["first_name"]
    return frame


def records_from_frame(frame: pd.DataFrame) -> list[StudentRecord]:
    return [StudentRecord(**row) for row in frame[list(COLUMNS)].to_dict(orient="records")]


class StudentStore:
    """Owns the current snapshot, its load time and TTL.

    A failed reload raises DataUnavailableError. With ``serve_stale_on_error``
    the previous snapshot (if any) is returned instead and the reload is tried
    again on the next call.
    """

    def __init__(
        self,
        source: TextSource,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
        serve_stale_on_error: bool = False,
    ):
        self._source = source
        self._serve_stale = serve_stale_on_error
        self._cache: SnapshotCache[pd.DataFrame] = SnapshotCache(
            self._load, ttl_seconds=ttl_seconds, clock=clock
        )

    @property
    def loaded_at(self) -> float | None:
        return self._cache.loaded_at

    def _load(self) -> pd.DataFrame:
        try:
            frame = parse_student_csv(self._source.read())
        except (OSError, ValueError, csv.Error) as e:
            logger.exception("Failed to load student data from %s", self._source)
            raise DataUnavailableError() from e

        logger.info("Loaded %d student records from %s", len(frame), self._source)
        return frame

    def get_records(self) -> pd.DataFrame:
        try:
            return self._cache.get()
        except DataUnavailableError:
            stale = self._cache.stale_value
            if self._serve_stale and stale is not None:
                logger.warning("Serving stale student snapshot (%d records) after failed reload", len(stale))
                return stale
            raise

    def invalidate(self) -> None:
        self._cache.invalidate()


_store: StudentStore | None = None


def get_student_store() -> StudentStore:
    """Return the process-wide store, creating it from settings on first call."""
    global _store
    if _store is None:
        _store = StudentStore(
            FileSource(settings.student_data_path, settings.student_data_encoding),
            ttl_seconds=settings.cache_ttl_seconds,
            serve_stale_on_error=settings.serve_stale_on_error,
        )
    return _store
