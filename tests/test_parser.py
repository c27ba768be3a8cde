"""
test_parser.py — Tests for policy string parsing

Tests seedpolicy.parser.parse_policy:
- per-tag semantics, including each tag's rule for omitted tokens
- last-write-wins and idempotence under repeats
- override independence: a tag only touches the field it owns
- strict numeric coercion and error reporting
"""

import math

import pytest

from seedpolicy import (
    TAG_RULES,
    CostModel,
    GapPenalty,
    IntervalKind,
    InvalidPrefixError,
    LinearFunc,
    MalformedSettingError,
    MalformedValueError,
    Penalty,
    PolicyError,
    SeedInterval,
    SeedParams,
    UnknownTagError,
    changed_fields,
    parse_policy,
)
from seedpolicy import default


class TestMixedPolicy:
    """Several tags at once, in local end-to-end-gap mode."""

    def test_local_normal_gaps(self, mixed_policy, profile):
        rec = parse_policy(mixed_policy, local=True, noisy_homopolymer=False)
        assert rec.match_bonus == Penalty(CostModel.CONSTANT, 4)
        assert rec.mismatch == Penalty(CostModel.CONSTANT, 44)
        assert rec.snp == 10
        assert rec.n_penalty == Penalty(CostModel.CONSTANT, 4)
        assert rec.ref_gap == GapPenalty(24, 12)
        assert rec.read_gap == GapPenalty(2, default.READ_GAP_LINEAR)
        assert rec.min_score == LinearFunc(7.0, default.MIN_LINEAR_LOCAL)
        assert rec.score_floor == LinearFunc(8.0, default.FLOOR_LINEAR_LOCAL)
        assert rec.n_ceil == profile.n_ceil
        assert rec.n_cat_pair == default.N_CAT_PAIR
        assert rec.seed == profile.seed
        assert rec.interval == profile.interval
        assert rec.search == profile.search

    def test_only_owned_fields_change(self, mixed_policy, profile):
        rec = parse_policy(mixed_policy, local=True)
        assert changed_fields(rec, profile.select(True, False)) == [
            "match_bonus", "mismatch", "snp", "n_penalty",
            "read_gap", "ref_gap", "min_score", "score_floor",
        ]


class TestOverrideIndependence:
    """A single setting changes only the field its tag owns."""

    CASES = [
        ("MA=7", "match_bonus"),
        ("SNP=12", "snp"),
        ("MMP=C9", "mismatch"),
        ("NP=Q", "n_penalty"),
        ("RDG=8,4", "read_gap"),
        ("RFG=8,4", "ref_gap"),
        ("MIN=-1.5,-0.25", "min_score"),
        ("FL=5,0.5", "score_floor"),
        ("NCEIL=2,0.3", "n_ceil"),
        ("SEED=1,18,6", "seed"),
        ("IVAL=L,0.5,3", "interval"),
        ("POSF=4,0.5", "search"),
        ("ROWM=3,8", "search"),
    ]

    @pytest.mark.parametrize("policy,field", CASES)
    def test_single_tag(self, parse, baseline, policy, field):
        rec = parse(policy)
        assert changed_fields(rec, baseline) == [field]
        assert TAG_RULES[policy.split("=")[0]].field == field

    def test_every_tag_covered(self):
        assert {p.split("=")[0] for p, _ in self.CASES} == set(TAG_RULES)


class TestRepeats:
    """Later settings win; identical repeats are idempotent."""

    def test_idempotent_repeat(self, parse):
        assert parse("RDG=2,1;RDG=2,1") == parse("RDG=2,1")

    def test_last_write_wins(self, parse):
        assert parse("MIN=1;MIN=2").min_score.const == 2.0

    def test_no_merging_for_reset_tags(self, parse, profile):
        rec = parse("SEED=1,18,6;SEED=2")
        assert rec.seed == SeedParams(2, profile.seed.length, profile.seed.period)


class TestCostModelTags:
    """MMP and NP: leading C, Q or R selects the cost model."""

    @pytest.mark.parametrize("tag,field", [("MMP", "mismatch"), ("NP", "n_penalty")])
    def test_constant(self, tag, field):
        rec = parse_policy(f"{tag}=C44")
        assert getattr(rec, field) == Penalty(CostModel.CONSTANT, 44)

    @pytest.mark.parametrize("tag,field", [("MMP", "mismatch"), ("NP", "n_penalty")])
    @pytest.mark.parametrize("token,model", [
        ("Q", CostModel.QUALITY),
        ("R", CostModel.ROUNDED_QUALITY),
        ("RQ", CostModel.ROUNDED_QUALITY),
    ])
    def test_quality_models_keep_value(self, tag, field, token, model):
        rec = parse_policy(f"{tag}=C9;{tag}={token}")
        assert getattr(rec, field) == Penalty(model, 9)

    @pytest.mark.parametrize("policy", ["MMP=X", "NP=c4", "MMP=44"])
    def test_invalid_prefix(self, policy):
        with pytest.raises(InvalidPrefixError, match="must start with C, Q or R") as excinfo:
            parse_policy(policy)
        assert excinfo.value.text == policy.split("=")[0]
        assert excinfo.value.kind == "InvalidEnumeratedPrefix"

    @pytest.mark.parametrize("policy", ["MMP=C", "MMP=Cx", "NP=C4.5"])
    def test_constant_needs_integer(self, policy):
        with pytest.raises(MalformedValueError):
            parse_policy(policy)

    def test_match_bonus_sets_constant_model(self):
        assert parse_policy("MA=3").match_bonus == Penalty(CostModel.CONSTANT, 3)


class TestGapTags:
    """RDG/RFG fall back to the mode default, not the current value."""

    @pytest.mark.parametrize("tag,field", [("RDG", "read_gap"), ("RFG", "ref_gap")])
    def test_both_tokens(self, tag, field, parse):
        assert getattr(parse(f"{tag}=11,4"), field) == GapPenalty(11, 4)

    def test_omitted_extend_normal(self):
        rec = parse_policy("RDG=11,9;RDG=2")
        assert rec.read_gap == GapPenalty(2, default.READ_GAP_LINEAR)

    def test_omitted_extend_noisy(self):
        rec = parse_policy("RFG=11,9;RFG=2", noisy_homopolymer=True)
        assert rec.ref_gap == GapPenalty(2, default.REF_GAP_LINEAR_BADHPOLY)

    def test_too_many_tokens(self):
        with pytest.raises(MalformedValueError, match="1 to 2"):
            parse_policy("RDG=1,2,3")


class TestLinearFuncTags:
    """MIN/FL keep omitted values; NCEIL resets an omitted linear term."""

    @pytest.mark.parametrize("tag,field", [("MIN", "min_score"), ("FL", "score_floor")])
    def test_omitted_linear_unchanged(self, tag, field):
        rec = parse_policy(f"{tag}=1,0.25;{tag}=3")
        assert getattr(rec, field) == LinearFunc(3.0, 0.25)

    def test_n_ceil_resets_linear(self, profile):
        rec = parse_policy("NCEIL=1,0.5;NCEIL=3")
        assert rec.n_ceil == LinearFunc(3.0, profile.n_ceil.linear)

    def test_floats_and_exponents(self):
        rec = parse_policy("MIN=-1.5e1,.5")
        assert rec.min_score == LinearFunc(-15.0, 0.5)

    def test_infinite_floor(self):
        rec = parse_policy("FL=-inf,0", local=True)
        assert math.isinf(rec.score_floor.const) and rec.score_floor.const < 0

    @pytest.mark.parametrize("token", ["nan", "1.2.3", "abc", "1e", "1,5e99999"])
    def test_bad_floats(self, token):
        with pytest.raises(MalformedValueError):
            parse_policy(f"MIN={token}")


class TestSeedTags:
    """SEED resets omitted length/period; IVAL resets omitted coefficients."""

    def test_seed_full(self):
        assert parse_policy("SEED=1,20,5").seed == SeedParams(1, 20, 5)

    def test_seed_resets(self, profile):
        rec = parse_policy("SEED=1,20,5;SEED=0,16")
        assert rec.seed == SeedParams(0, 16, profile.seed.period)

    def test_seed_mismatch_range_not_enforced(self):
        assert parse_policy("SEED=3").seed.mismatches == 3

    @pytest.mark.parametrize("token,kind", [
        ("L", IntervalKind.LINEAR),
        ("S", IntervalKind.SQUARE_ROOT),
        ("C", IntervalKind.CUBE_ROOT),
        ("Linear", IntervalKind.LINEAR),
    ])
    def test_ival_kind(self, token, kind):
        assert parse_policy(f"IVAL={token},2,1").interval == SeedInterval(kind, 2.0, 1.0)

    def test_ival_unknown_kind_kept(self):
        rec = parse_policy("IVAL=C,2,1;IVAL=X,3")
        assert rec.interval == SeedInterval(IntervalKind.CUBE_ROOT, 3.0, 0.0)

    def test_ival_resets_coefficients(self):
        rec = parse_policy("IVAL=L,2,1;IVAL=L")
        assert rec.interval == SeedInterval(IntervalKind.LINEAR, 1.0, 0.0)


class TestSearchBreadthTags:
    """POSF and ROWM share the search field; their token order differs."""

    def test_posf(self, profile):
        rec = parse_policy("POSF=4,0.5")
        assert (rec.search.pos_min, rec.search.pos_frac) == (4.0, 0.5)
        assert rec.search.row_min == profile.search.row_min

    def test_rowm_order(self):
        rec = parse_policy("ROWM=3,8")
        assert (rec.search.row_mult, rec.search.row_min) == (3.0, 8.0)

    def test_rowm_omitted_unchanged(self):
        rec = parse_policy("ROWM=3,8;ROWM=5")
        assert (rec.search.row_mult, rec.search.row_min) == (5.0, 8.0)

    def test_posf_omitted_unchanged(self):
        rec = parse_policy("POSF=4,0.5;POSF=6")
        assert (rec.search.pos_min, rec.search.pos_frac) == (6.0, 0.5)

    def test_posf_and_rowm_combine(self):
        rec = parse_policy("POSF=4,0.5;ROWM=3,8")
        assert rec.search.pos_min == 4.0
        assert rec.search.row_mult == 3.0


class TestErrors:
    """Fail-fast error reporting."""

    def test_missing_equals(self):
        with pytest.raises(MalformedSettingError) as excinfo:
            parse_policy("MA")
        assert excinfo.value.setting_index == 1

    @pytest.mark.parametrize("policy", ["SEED=1,2,3,4", "SEED="])
    def test_token_count(self, policy):
        with pytest.raises(MalformedValueError):
            parse_policy(policy)

    @pytest.mark.parametrize("policy,index", [
        ("MA=1,2", 1),
        ("SNP=4;MMP=C1,C2", 2),
        ("MIN=1;NCEIL=1,2,3", 2),
    ])
    def test_tag_token_bounds(self, policy, index):
        with pytest.raises(MalformedValueError) as excinfo:
            parse_policy(policy)
        assert excinfo.value.setting_index == index

    @pytest.mark.parametrize("policy", ["MA=4.5", "SNP=ten", "SEED=1,2x", "RDG=1e2"])
    def test_bad_integers(self, policy):
        with pytest.raises(MalformedValueError, match="must be an integer"):
            parse_policy(policy)

    def test_integer_overflow(self):
        with pytest.raises(MalformedValueError, match="out of range"):
            parse_policy("MA=99999999999")

    @pytest.mark.parametrize("policy,index", [
        ("MA=" + "9" * 5000, 1),
        ("SNP=1;SEED=0," + "1" * 4400, 2),
        ("MMP=C-" + "7" * 4400, 1),
    ])
    def test_huge_integers(self, policy, index):
        with pytest.raises(MalformedValueError, match="out of range") as excinfo:
            parse_policy(policy)
        assert excinfo.value.setting_index == index
        assert excinfo.value.policy == policy

    def test_leading_zeros_allowed(self):
        assert parse_policy("MA=" + "0" * 40 + "7").match_bonus.value == 7

    def test_unknown_tag(self):
        with pytest.raises(UnknownTagError) as excinfo:
            parse_policy("MA=1;ma=2")
        err = excinfo.value
        assert (err.setting_index, err.text, err.kind) == (2, "ma", "UnknownTag")
        assert err.policy == "MA=1;ma=2"

    def test_first_error_wins(self):
        """An earlier bad value is reported before a later malformed setting."""
        with pytest.raises(MalformedValueError) as excinfo:
            parse_policy("MA=x;SNP")
        assert excinfo.value.setting_index == 1

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse_policy("BOGUS=1")
        assert issubclass(UnknownTagError, PolicyError)
