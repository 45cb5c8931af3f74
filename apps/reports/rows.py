"""
Report rows and the row aggregator.

Every grouped figure in the reports API is a list of
``{label, amount_pence, count}`` rows. The same label can come back from
several sources (online donations, water and sponsorship donations), so
rows are merged per label before they are returned.

Example::

    >>> merge_rows([
    ...     {'label': 'CASH', 'amount_pence': 100, 'count': 2},
    ...     {'label': 'CASH', 'amount_pence': 50, 'count': 1},
    ...     {'label': None, 'amount_pence': 10, 'count': 1},
    ... ])
    [ReportRow(label='CASH', amount_pence=150, count=3), ReportRow(label='Unknown', amount_pence=10, count=1)]
"""

from dataclasses import dataclass, asdict
from typing import Iterable, List, Mapping, Union


DEFAULT_LABEL = 'Unknown'


@dataclass
class ReportRow:
    label: str
    amount_pence: int = 0
    count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def coerce_int(value) -> int:
    """Integer value of ``value``; ``None``, booleans and junk become 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _read(row: Union[ReportRow, Mapping], field: str):
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


def merge_rows(rows: Iterable[Union[ReportRow, Mapping]], default_label: str = DEFAULT_LABEL) -> List[ReportRow]:
    """
    Merge rows that share a label and sort them by amount, largest first.

    Args:
        rows: ReportRow instances or mappings with ``label``,
            ``amount_pence`` and ``count`` keys (missing keys allowed).
        default_label: Label used for rows whose label is ``None`` or empty.

    Returns:
        list[ReportRow]: One row per label. Ties keep first-seen order.

    Note:
        Never raises for bad numbers: a missing or non-numeric amount or
        count counts as 0. Merging an already merged list returns an equal
        list.
    """
    merged = {}

    for row in rows:
        label = _read(row, 'label') or default_label
        label = str(label)
        amount = coerce_int(_read(row, 'amount_pence'))
        count = coerce_int(_read(row, 'count'))

        current = merged.get(label)
        if current is None:
            merged[label] = ReportRow(label=label, amount_pence=amount, count=count)
        else:
            current.amount_pence += amount
            current.count += count

    # sorted() is stable, so ties stay in insertion order
    return sorted(merged.values(), key=lambda row: row.amount_pence, reverse=True)


def rows_to_dicts(rows: Iterable[ReportRow]) -> List[dict]:
    return [row.to_dict() for row in rows]


def total_amount(rows: Iterable[ReportRow]) -> int:
    return sum(row.amount_pence for row in rows)


def total_count(rows: Iterable[ReportRow]) -> int:
    return sum(row.count for row in rows)
