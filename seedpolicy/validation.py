"""
validation.py — Range checks and comparisons for parsed policies

The parser only checks the shape of a policy string; it deliberately
accepts values such as SEED=3 that the alignment engine cannot use.
This module provides the higher-level checks a caller applies before
handing a record to the engine, and a small diff helper used for
logging overrides and in tests.
"""

from typing import List, Tuple

from .records import PolicyRecord

MAX_SEED_MISMATCHES = 2
SEED_PERIOD_FROM_INTERVAL = -1


def changed_fields(record: PolicyRecord, baseline: PolicyRecord) -> List[str]:
    """
    Names of the top-level fields of ``record`` that differ from ``baseline``.

    Returns
    -------
    list of str
        Field names in PolicyRecord declaration order.
    """
    return [
        name for name in PolicyRecord.field_names()
        if getattr(record, name) != getattr(baseline, name)
    ]


def _range_problems(record: PolicyRecord) -> List[Tuple[str, str]]:
    seed = record.seed
    problems = []
    if not (0 <= seed.mismatches <= MAX_SEED_MISMATCHES):
        problems.append(
            ("seed.mismatches", f"must be in 0..{MAX_SEED_MISMATCHES}, got {seed.mismatches}")
        )
    if seed.length < 1:
        problems.append(("seed.length", f"must be >= 1, got {seed.length}"))
    if seed.period < 1 and seed.period != SEED_PERIOD_FROM_INTERVAL:
        problems.append(
            ("seed.period", f"must be >= 1 or {SEED_PERIOD_FROM_INTERVAL}, got {seed.period}")
        )
    for name in ("read_gap", "ref_gap"):
        gap = getattr(record, name)
        if gap.open < 0 or gap.extend < 0:
            problems.append((name, f"penalties must be >= 0, got {gap.open},{gap.extend}"))
    search = record.search
    for name in ("pos_min", "pos_frac", "row_min", "row_mult"):
        value = getattr(search, name)
        if value < 0:
            problems.append((f"search.{name}", f"must be >= 0, got {value}"))
    return problems


def check_policy(record: PolicyRecord) -> None:
    """
    Check that ``record`` holds values the alignment engine can use.

    Checks seed mismatches in 0..2, seed length >= 1, a seed period
    >= 1 (or -1 to derive it from the interval function), non-negative
    gap penalties and non-negative search breadth values.

    Raises
    ------
    ValueError
        Naming the first offending field.
    """
    problems = _range_problems(record)
    if problems:
        field, reason = problems[0]
        raise ValueError(f"Invalid alignment policy: {field} {reason}")
