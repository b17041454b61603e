"""Build the chronological frame sequence from raw tabular rows."""

import csv
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Iterable, Mapping

from ..constants import (
    AGGREGATE_NAME_MARKERS,
    CATEGORY_COLUMN,
    DECORATION_COLUMN,
    ENTITY_COLUMN,
    NAME_ANNOTATIONS,
    PERIOD_COLUMN,
    RESERVED_AGGREGATE_LABELS,
    VALUE_COLUMNS,
)
from .records import CategoryFallback, Entity, Frame, resolve_category

logger = logging.getLogger(__name__)

RawRow = Mapping[str, str | None]

_LEADING_INT = re.compile(r"[+-]?\d+")
_ANNOTATION = re.compile(
    r"\s*\((?:" + "|".join(re.escape(note) for note in NAME_ANNOTATIONS) + r")\)\s*"
)


class DatasetError(Exception):
    """Raised when the input dataset cannot be read."""
    pass


class EmptyDatasetError(DatasetError):
    """Raised when no row survives filtering, so there is nothing to render."""
    pass


def parse_value(raw: str) -> int | None:
    """Parse a metric cell like ``"6,000,000"``; None when it is not a count."""
    cleaned = raw.strip().replace(",", "").replace(" ", "")
    match = _LEADING_INT.match(cleaned)
    if match is None:
        return None
    value = int(match.group())
    if value < 0:
        return None
    return value


def clean_entity_name(raw: str) -> str:
    """Strip known annotation suffixes such as ``(UN)`` and surrounding spaces."""
    return _ANNOTATION.sub("", raw, count=1).strip()


def is_aggregate_name(name: str) -> bool:
    """Check whether a name denotes a pre-aggregated total, not an entity."""
    if name in RESERVED_AGGREGATE_LABELS:
        return True
    return any(marker in name for marker in AGGREGATE_NAME_MARKERS)


def _first_present(row: RawRow, columns: Iterable[str]) -> str | None:
    for column in columns:
        value = row.get(column)
        if value is not None:
            return value
    return None


def _parse_period(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _classify_row(
    row: RawRow, fallback: CategoryFallback
) -> tuple[Entity | None, str | None]:
    """Return the parsed entity, or None plus the reason the row was dropped."""
    value = parse_value(_first_present(row, VALUE_COLUMNS) or "")
    if value is None:
        return None, "unparseable value"

    name = clean_entity_name(row.get(ENTITY_COLUMN) or "")
    if not name:
        return None, "missing entity"
    if is_aggregate_name(name):
        return None, "aggregate"

    period = _parse_period(row.get(PERIOD_COLUMN))
    if period is None:
        return None, "unparseable period"

    entity = Entity(
        name=name,
        value=value,
        category=resolve_category(row.get(CATEGORY_COLUMN), name, fallback),
        period=period,
        decoration=(row.get(DECORATION_COLUMN) or "").strip(),
    )
    return entity, None


def parse_row(
    row: RawRow, fallback: CategoryFallback = CategoryFallback.ENTITY
) -> Entity | None:
    """
    Parse one raw row into an Entity.

    Args:
        row: Mapping of column name to cell text
        fallback: Category policy for rows without a known region

    Returns:
        The entity, or None when the row must be dropped
    """
    entity, _reason = _classify_row(row, fallback)
    return entity


def build_frames(
    rows: Iterable[RawRow],
    fallback: CategoryFallback = CategoryFallback.ENTITY,
) -> tuple[Frame, ...]:
    """
    Group parsed rows into frames sorted ascending by period.

    Args:
        rows: Raw rows in file order
        fallback: Category policy for rows without a known region

    Returns:
        Immutable frame sequence, strictly increasing by period

    Raises:
        EmptyDatasetError: If no row survives parsing and filtering
    """
    by_period: dict[int, list[Entity]] = {}
    dropped: Counter[str] = Counter()
    for row in rows:
        entity, reason = _classify_row(row, fallback)
        if entity is None:
            dropped[reason or "unknown"] += 1
            continue
        by_period.setdefault(entity.period, []).append(entity)

    for reason, count in sorted(dropped.items()):
        logger.debug("Dropped %d row(s): %s", count, reason)

    if not by_period:
        raise EmptyDatasetError("No usable frames: every row was dropped")

    frames = tuple(
        Frame(period=period, entities=tuple(entities))
        for period, entities in sorted(by_period.items())
    )
    logger.debug(
        "Built %d frame(s) spanning %d..%d", len(frames), frames[0].period, frames[-1].period
    )
    return frames


def load_rows(path: str | Path) -> list[dict[str, str | None]]:
    """Read a delimited text file with a header row into dict rows."""
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8-sig", newline="") as f:
            header = f.readline()
            f.seek(0)
            try:
                dialect = csv.Sniffer().sniff(header, delimiters=",;\t")
            except csv.Error:
                dialect = csv.excel
            return list(csv.DictReader(f, dialect=dialect))
    except FileNotFoundError:
        raise DatasetError(f"File '{file_path}' not found")
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DatasetError(f"Cannot read '{file_path}': {e}")


def load_frames(
    path: str | Path, fallback: CategoryFallback = CategoryFallback.ENTITY
) -> tuple[Frame, ...]:
    """Load a dataset file and build its frame sequence."""
    return build_frames(load_rows(path), fallback)
