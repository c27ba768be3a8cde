"""
default.py — Default scoring and seeding parameters for seedpolicy

Provides the standard constants applied before any policy-string
overrides, bundled into a DefaultProfile.  Mode-dependent fields keep
both alternatives; DefaultProfile.select picks one set per
(local, noisy_homopolymer) pair.

Use dataclasses.replace(DEFAULT_PROFILE, ...) to supply a different
profile to parse_policy.
"""

from dataclasses import dataclass

from .records import (
    CostModel,
    GapPenalty,
    IntervalKind,
    LinearFunc,
    Penalty,
    PolicyRecord,
    SearchBreadth,
    SeedInterval,
    SeedParams,
)

## Match bonus (end-to-end vs. local)
MATCH_BONUS_TYPE = CostModel.CONSTANT
MATCH_BONUS = 0
MATCH_BONUS_TYPE_LOCAL = CostModel.CONSTANT
MATCH_BONUS_LOCAL = 2

## Mismatch, SNP and N penalties
MM_PENALTY_TYPE = CostModel.CONSTANT
MM_PENALTY = 6
SNP_PENALTY = 6
N_PENALTY_TYPE = CostModel.CONSTANT
N_PENALTY = 1

## Affine gap penalties (normal vs. noisy homopolymer technologies)
READ_GAP_CONST = 5
READ_GAP_LINEAR = 3
REF_GAP_CONST = 5
REF_GAP_LINEAR = 3
READ_GAP_CONST_BADHPOLY = 3
READ_GAP_LINEAR_BADHPOLY = 1
REF_GAP_CONST_BADHPOLY = 3
REF_GAP_LINEAR_BADHPOLY = 1

## Minimum score and local score floor: const + linear * read length
MIN_CONST = -0.6
MIN_LINEAR = -0.6
MIN_CONST_LOCAL = 0.0
MIN_LINEAR_LOCAL = 0.66
FLOOR_CONST = float("-inf")
FLOOR_LINEAR = 0.0
FLOOR_CONST_LOCAL = 0.0
FLOOR_LINEAR_LOCAL = 0.0

## N ceiling
N_CEIL_CONST = 0.0
N_CEIL_LINEAR = 0.15
N_CAT_PAIR = False

## Seeds; a period of -1 means "derive from the interval function"
SEED_MMS = 0
SEED_LEN = 22
SEED_PERIOD = -1
IVAL = IntervalKind.SQUARE_ROOT
IVAL_A = 1.0
IVAL_B = 0.0

## Seed search breadth
POSMIN = 2.0
POSFRAC = 0.1
ROWMIN = 2.0
ROWMULT = 0.1


@dataclass(frozen=True)
class DefaultProfile:
    """
    Baseline values for every policy field.

    Fields with a ``_local`` twin are selected by the local-alignment
    flag; fields with a ``_noisy`` twin by the noisy-homopolymer flag.
    Everything else has a single fixed default.
    """
    match_bonus: Penalty
    match_bonus_local: Penalty
    mismatch: Penalty
    snp: int
    n_penalty: Penalty
    read_gap: GapPenalty
    read_gap_noisy: GapPenalty
    ref_gap: GapPenalty
    ref_gap_noisy: GapPenalty
    min_score: LinearFunc
    min_score_local: LinearFunc
    score_floor: LinearFunc
    score_floor_local: LinearFunc
    n_ceil: LinearFunc
    n_cat_pair: bool
    seed: SeedParams
    interval: SeedInterval
    search: SearchBreadth

    def read_gap_for(self, noisy_homopolymer: bool) -> GapPenalty:
        return self.read_gap_noisy if noisy_homopolymer else self.read_gap

    def ref_gap_for(self, noisy_homopolymer: bool) -> GapPenalty:
        return self.ref_gap_noisy if noisy_homopolymer else self.ref_gap

    def select(self, local: bool, noisy_homopolymer: bool) -> PolicyRecord:
        """
        Build the baseline PolicyRecord for one pair of mode flags.

        Parameters
        ----------
        local : bool
            Local alignment mode: picks the ``_local`` match bonus,
            minimum score and score floor.
        noisy_homopolymer : bool
            Noisy homopolymer mode: picks the ``_noisy`` gap penalties.

        Returns
        -------
        PolicyRecord
            A record with every field populated.
        """
        return PolicyRecord(
            match_bonus=self.match_bonus_local if local else self.match_bonus,
            mismatch=self.mismatch,
            snp=self.snp,
            n_penalty=self.n_penalty,
            read_gap=self.read_gap_for(noisy_homopolymer),
            ref_gap=self.ref_gap_for(noisy_homopolymer),
            min_score=self.min_score_local if local else self.min_score,
            score_floor=self.score_floor_local if local else self.score_floor,
            n_ceil=self.n_ceil,
            n_cat_pair=self.n_cat_pair,
            seed=self.seed,
            interval=self.interval,
            search=self.search,
        )


DEFAULT_PROFILE = DefaultProfile(
    match_bonus=Penalty(MATCH_BONUS_TYPE, MATCH_BONUS),
    match_bonus_local=Penalty(MATCH_BONUS_TYPE_LOCAL, MATCH_BONUS_LOCAL),
    mismatch=Penalty(MM_PENALTY_TYPE, MM_PENALTY),
    snp=SNP_PENALTY,
    n_penalty=Penalty(N_PENALTY_TYPE, N_PENALTY),
    read_gap=GapPenalty(READ_GAP_CONST, READ_GAP_LINEAR),
    read_gap_noisy=GapPenalty(READ_GAP_CONST_BADHPOLY, READ_GAP_LINEAR_BADHPOLY),
    ref_gap=GapPenalty(REF_GAP_CONST, REF_GAP_LINEAR),
    ref_gap_noisy=GapPenalty(REF_GAP_CONST_BADHPOLY, REF_GAP_LINEAR_BADHPOLY),
    min_score=LinearFunc(MIN_CONST, MIN_LINEAR),
    min_score_local=LinearFunc(MIN_CONST_LOCAL, MIN_LINEAR_LOCAL),
    score_floor=LinearFunc(FLOOR_CONST, FLOOR_LINEAR),
    score_floor_local=LinearFunc(FLOOR_CONST_LOCAL, FLOOR_LINEAR_LOCAL),
    n_ceil=LinearFunc(N_CEIL_CONST, N_CEIL_LINEAR),
    n_cat_pair=N_CAT_PAIR,
    seed=SeedParams(SEED_MMS, SEED_LEN, SEED_PERIOD),
    interval=SeedInterval(IVAL, IVAL_A, IVAL_B),
    search=SearchBreadth(
        pos_min=POSMIN, pos_frac=POSFRAC, row_min=ROWMIN, row_mult=ROWMULT
    ),
)


def policy_defaults(*, local: bool = False, noisy_homopolymer: bool = False) -> PolicyRecord:
    """
    Baseline record from the built-in profile.

    Usage:
        record = policy_defaults(local=True)"""
    return DEFAULT_PROFILE.select(local, noisy_homopolymer)
