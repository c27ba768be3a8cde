"""
records.py — Policy record containers for seedpolicy

This module defines the immutable value types produced by the policy
parser: the penalty/bonus cost models, gap penalty pairs, the
read-length functions (const + linear * L) and the seeding parameters.

Every container is a frozen dataclass.  The parser never mutates a
record in place; it builds a new one per setting with
dataclasses.replace and hands the last one to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Enumerated variants selected by a leading policy character
# ---------------------------------------------------------------------------

class CostModel(Enum):
    """
    How a bonus or penalty is computed for one alignment position.

    CONSTANT
        A fixed number (e.g. ``MMP=C6``).
    QUALITY
        The base quality value of the read position (``MMP=Q``).
    ROUNDED_QUALITY
        The quality rounded to the nearest multiple of 10, capped at 30
        (``MMP=R``).

    The enum value is the policy character that selects the variant.
    """
    CONSTANT = "C"
    QUALITY = "Q"
    ROUNDED_QUALITY = "R"

    @classmethod
    def from_prefix(cls, ch: str) -> Optional["CostModel"]:
        """Return the model selected by ``ch``, or None if unrecognized."""
        return _COST_MODEL_BY_PREFIX.get(ch)


class IntervalKind(Enum):
    """
    Function f used for the seed interval a * f(L) + b.

    LINEAR      : f(L) = L
    SQUARE_ROOT : f(L) = sqrt(L)
    CUBE_ROOT   : f(L) = L ** (1/3)
    """
    LINEAR = "L"
    SQUARE_ROOT = "S"
    CUBE_ROOT = "C"

    @classmethod
    def from_prefix(cls, ch: str) -> Optional["IntervalKind"]:
        """Return the kind selected by ``ch``, or None if unrecognized."""
        return _INTERVAL_KIND_BY_PREFIX.get(ch)


_COST_MODEL_BY_PREFIX = {m.value: m for m in CostModel}
_INTERVAL_KIND_BY_PREFIX = {k.value: k for k in IntervalKind}


# ---------------------------------------------------------------------------
# Field groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Penalty:
    """
    A bonus or penalty with its cost model.

    ``value`` is only meaningful for CostModel.CONSTANT; for the quality
    based models it is carried along unchanged.
    """
    model: CostModel
    value: int


@dataclass(frozen=True)
class GapPenalty:
    """
    Affine gap cost: open + extend * gap_length.

    Attributes
    ----------
    open : int
        Constant paid once per gap.
    extend : int
        Linear coefficient paid per gap position.
    """
    open: int
    extend: int


@dataclass(frozen=True)
class LinearFunc:
    """A read-length function ``const + linear * L``."""
    const: float
    linear: float


@dataclass(frozen=True)
class SeedParams:
    """
    Multiseed parameters.

    Attributes
    ----------
    mismatches : int
        Mismatches allowed within a seed.  Callers are expected to keep
        this within 0..2 (see validation.check_policy).
    length : int
        Seed length.
    period : int
        Fixed interval between seeds, or -1 to derive it from the
        seed-interval function.
    """
    mismatches: int
    length: int
    period: int


@dataclass(frozen=True)
class SeedInterval:
    """Seed interval function a * f(L) + b, with f chosen by ``kind``."""
    kind: IntervalKind
    a: float
    b: float


@dataclass(frozen=True)
class SearchBreadth:
    """
    Seed search effort controls.

    If N seed positions fit on a read, hits are examined for
    pos_min + pos_frac * N of them; at most row_min or row_mult * N
    extensions are tried from any one seed position.
    """
    pos_min: float
    pos_frac: float
    row_min: float
    row_mult: float


# ---------------------------------------------------------------------------
# Output record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PolicyRecord:
    """
    Fully populated scoring and seeding policy.

    Attributes
    ----------
    match_bonus : Penalty
        Bonus for a matching position (tag MA).
    mismatch : Penalty
        Mismatch penalty (tag MMP).
    snp : int
        Penalty for a nucleotide difference in a decoded colorspace
        alignment (tag SNP).
    n_penalty : Penalty
        Penalty for a position with an N in read or reference (tag NP).
    read_gap, ref_gap : GapPenalty
        Read and reference gap penalties (tags RDG, RFG).
    min_score : LinearFunc
        Minimum valid alignment score as a function of read length (MIN).
    score_floor : LinearFunc
        Local-mode DP cell floor as a function of read length (FL).
    n_ceil : LinearFunc
        Maximum number of N positions as a function of read length (NCEIL).
    n_cat_pair : bool
        Whether the N ceiling applies to concatenated mates.  Not
        settable from a policy string.
    seed : SeedParams
        Seed mismatches, length and period (SEED).
    interval : SeedInterval
        Seed interval function (IVAL).
    search : SearchBreadth
        Seed search breadth (POSF, ROWM).
    """
    match_bonus: Penalty
    mismatch: Penalty
    snp: int
    n_penalty: Penalty
    read_gap: GapPenalty
    ref_gap: GapPenalty
    min_score: LinearFunc
    score_floor: LinearFunc
    n_ceil: LinearFunc
    n_cat_pair: bool
    seed: SeedParams
    interval: SeedInterval
    search: SearchBreadth

    @classmethod
    def field_names(cls) -> tuple:
        """Top-level field names, in declaration order."""
        return tuple(f.name for f in fields(cls))
