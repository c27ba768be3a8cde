"""
parser.py — Compile a policy string into a PolicyRecord

A policy string looks like

    MMP=C44;MA=4;RFG=24,12;FL=8;RDG=2;SNP=10;NP=C4;MIN=7

Parsing starts from the default profile selected by the two mode
flags (local alignment, noisy homopolymers) and folds each setting
over it from left to right, so a later setting for the same tag wins.

Recognized tags and the record field each one owns:

    MA=xx           match_bonus   (model set to Constant)
    MMP={Cxx|Q|R}   mismatch
    SNP=xx          snp
    NP={Cxx|Q|R}    n_penalty
    RDG=xx[,yy]     read_gap      open, extend
    RFG=xx[,yy]     ref_gap       open, extend
    MIN=xx[,yy]     min_score     const, linear
    FL=xx[,yy]      score_floor   const, linear
    NCEIL=xx[,yy]   n_ceil        const, linear
    SEED=mm[,len[,period]]        seed
    IVAL={L|S|C}[,a[,b]]          interval
    POSF=xx[,yy]    search        pos_min, pos_frac
    ROWM=xx[,yy]    search        row_mult, row_min

Tokens a setting omits are handled per tag:

  * RDG/RFG fall back to the gap default for the current
    noisy-homopolymer mode,
  * MIN/FL/POSF/ROWM leave the current value alone,
  * NCEIL/SEED/IVAL reset the omitted trailing values to their fixed
    defaults (NCEIL only resets the linear term).

Numbers are parsed strictly: a token that is not a valid integer or
float for its field raises MalformedValueError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

import numpy as np

from .default import DEFAULT_PROFILE, DefaultProfile
from .errors import InvalidPrefixError, MalformedValueError, UnknownTagError
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
from .tokenizer import Setting, iter_settings
from .validation import changed_fields

logger = logging.getLogger(__name__)

# Fixed-width limits of the fields consumed by the alignment engine
_INT32 = np.iinfo(np.int32)
_INT32_DIGITS = len(str(_INT32.max))
_FLOAT32_MAX = float(np.finfo(np.float32).max)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?P<finite>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
    r"|[+-]?(?:[iI][nN][fF](?:[iI][nN][iI][tT][yY])?)"
)

# IVAL coefficients revert to these when omitted
IVAL_A_OMITTED = 1.0
IVAL_B_OMITTED = 0.0


# ---------------------------------------------------------------------------
# Parse context and numeric coercion
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _ParseContext:
    """Everything a tag handler may read besides the record itself."""
    policy: str
    noisy_homopolymer: bool
    defaults: DefaultProfile


def _bad_value(setting: Setting, ctx: _ParseContext, reason: str) -> MalformedValueError:
    return MalformedValueError(
        reason, setting_index=setting.index, text=setting.text, policy=ctx.policy
    )


def _to_int(tok: str, setting: Setting, ctx: _ParseContext, what: str) -> int:
    if _INT_RE.fullmatch(tok) is None:
        raise _bad_value(setting, ctx, f"{what} must be an integer, got '{tok}'")
    # Anything wider than int32 is rejected before conversion
    if len(tok.lstrip("+-").lstrip("0")) > _INT32_DIGITS:
        raise _bad_value(setting, ctx, f"{what} out of range: {len(tok)}-character integer")
    value = int(tok)
    if not (_INT32.min <= value <= _INT32.max):
        raise _bad_value(setting, ctx, f"{what} out of range: {tok}")
    return value


def _to_float(tok: str, setting: Setting, ctx: _ParseContext, what: str) -> float:
    m = _FLOAT_RE.fullmatch(tok)
    if m is None:
        raise _bad_value(setting, ctx, f"{what} must be a number, got '{tok}'")
    value = float(tok)
    if m.group("finite") is not None and abs(value) > _FLOAT32_MAX:
        raise _bad_value(setting, ctx, f"{what} out of range: {tok}")
    return value


def _token_or(
    setting: Setting,
    i: int,
    ctx: _ParseContext,
    convert: Callable[[str, Setting, _ParseContext, str], object],
    fallback,
    what: str,
):
    """Convert token ``i`` if the setting has one, else return ``fallback``."""
    if len(setting.tokens) > i:
        return convert(setting.tokens[i], setting, ctx, what)
    return fallback


# ---------------------------------------------------------------------------
# Per-tag handlers: (current field value, setting, ctx) -> new field value
# ---------------------------------------------------------------------------

def _parse_match_bonus(current: Penalty, setting: Setting, ctx: _ParseContext) -> Penalty:
    value = _to_int(setting.tokens[0], setting, ctx, "match bonus")
    return Penalty(CostModel.CONSTANT, value)


def _parse_snp(current: int, setting: Setting, ctx: _ParseContext) -> int:
    return _to_int(setting.tokens[0], setting, ctx, "SNP penalty")


def _parse_cost_model(current: Penalty, setting: Setting, ctx: _ParseContext) -> Penalty:
    """
    MMP / NP: ``Cxx`` is a constant xx, ``Q`` the base quality and ``R``
    the rounded quality.  Q and R keep the current value.
    """
    tok = setting.tokens[0]
    model = CostModel.from_prefix(tok[0])
    if model is None:
        raise InvalidPrefixError(
            "RHS must start with C, Q or R",
            setting_index=setting.index, text=setting.tag, policy=ctx.policy,
        )
    if model is CostModel.CONSTANT:
        return Penalty(model, _to_int(tok[1:], setting, ctx, f"{setting.tag} constant"))
    return Penalty(model, current.value)


def _parse_gap(fallback_for: Callable[[DefaultProfile, bool], GapPenalty]):
    def handler(current: GapPenalty, setting: Setting, ctx: _ParseContext) -> GapPenalty:
        # Omitted values come from the mode default, not the current record
        fallback = fallback_for(ctx.defaults, ctx.noisy_homopolymer)
        return GapPenalty(
            open=_token_or(setting, 0, ctx, _to_int, fallback.open, "gap open"),
            extend=_token_or(setting, 1, ctx, _to_int, fallback.extend, "gap extend"),
        )
    return handler


def _parse_linear_keep(current: LinearFunc, setting: Setting, ctx: _ParseContext) -> LinearFunc:
    """MIN / FL: omitted coefficients are left unchanged."""
    return LinearFunc(
        const=_token_or(setting, 0, ctx, _to_float, current.const, "constant coefficient"),
        linear=_token_or(setting, 1, ctx, _to_float, current.linear, "linear coefficient"),
    )


def _parse_n_ceil(current: LinearFunc, setting: Setting, ctx: _ParseContext) -> LinearFunc:
    # Unlike MIN/FL, an omitted linear term reverts to the default
    return LinearFunc(
        const=_token_or(setting, 0, ctx, _to_float, current.const, "N ceiling constant"),
        linear=_token_or(setting, 1, ctx, _to_float, ctx.defaults.n_ceil.linear,
                         "N ceiling linear coefficient"),
    )


def _parse_seed(current: SeedParams, setting: Setting, ctx: _ParseContext) -> SeedParams:
    fixed = ctx.defaults.seed
    return SeedParams(
        mismatches=_token_or(setting, 0, ctx, _to_int, current.mismatches, "seed mismatches"),
        length=_token_or(setting, 1, ctx, _to_int, fixed.length, "seed length"),
        period=_token_or(setting, 2, ctx, _to_int, fixed.period, "seed period"),
    )


def _parse_interval(current: SeedInterval, setting: Setting, ctx: _ParseContext) -> SeedInterval:
    # An unrecognized function letter keeps the current kind
    kind = IntervalKind.from_prefix(setting.tokens[0][0]) or current.kind
    return SeedInterval(
        kind=kind,
        a=_token_or(setting, 1, ctx, _to_float, IVAL_A_OMITTED, "interval coefficient"),
        b=_token_or(setting, 2, ctx, _to_float, IVAL_B_OMITTED, "interval constant"),
    )


def _parse_posf(current: SearchBreadth, setting: Setting, ctx: _ParseContext) -> SearchBreadth:
    return replace(
        current,
        pos_min=_token_or(setting, 0, ctx, _to_float, current.pos_min, "position minimum"),
        pos_frac=_token_or(setting, 1, ctx, _to_float, current.pos_frac, "position fraction"),
    )


def _parse_rowm(current: SearchBreadth, setting: Setting, ctx: _ParseContext) -> SearchBreadth:
    return replace(
        current,
        row_mult=_token_or(setting, 0, ctx, _to_float, current.row_mult, "row multiplier"),
        row_min=_token_or(setting, 1, ctx, _to_float, current.row_min, "row minimum"),
    )


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TagRule:
    """
    How one tag is parsed.

    Attributes
    ----------
    field : str
        PolicyRecord field owned by the tag.
    min_tokens, max_tokens : int
        Accepted number of value tokens.
    handler : callable
        (current field value, setting, context) -> new field value.
    """
    field: str
    min_tokens: int
    max_tokens: int
    handler: Callable


TAG_RULES: Dict[str, TagRule] = {
    "MA":    TagRule("match_bonus", 1, 1, _parse_match_bonus),
    "SNP":   TagRule("snp",         1, 1, _parse_snp),
    "MMP":   TagRule("mismatch",    1, 1, _parse_cost_model),
    "NP":    TagRule("n_penalty",   1, 1, _parse_cost_model),
    "RDG":   TagRule("read_gap",    1, 2, _parse_gap(DefaultProfile.read_gap_for)),
    "RFG":   TagRule("ref_gap",     1, 2, _parse_gap(DefaultProfile.ref_gap_for)),
    "MIN":   TagRule("min_score",   1, 2, _parse_linear_keep),
    "FL":    TagRule("score_floor", 1, 2, _parse_linear_keep),
    "NCEIL": TagRule("n_ceil",      1, 2, _parse_n_ceil),
    "SEED":  TagRule("seed",        1, 3, _parse_seed),
    "IVAL":  TagRule("interval",    1, 3, _parse_interval),
    "POSF":  TagRule("search",      1, 2, _parse_posf),
    "ROWM":  TagRule("search",      1, 2, _parse_rowm),
}

POLICY_TAGS = tuple(TAG_RULES)


def _apply_setting(record: PolicyRecord, setting: Setting, ctx: _ParseContext) -> PolicyRecord:
    rule = TAG_RULES.get(setting.tag)
    if rule is None:
        raise UnknownTagError(
            "unexpected alignment policy setting",
            setting_index=setting.index, text=setting.tag, policy=ctx.policy,
        )
    n = len(setting.tokens)
    if not (rule.min_tokens <= n <= rule.max_tokens):
        if rule.min_tokens == rule.max_tokens:
            expected = f"{rule.min_tokens}"
        else:
            expected = f"{rule.min_tokens} to {rule.max_tokens}"
        raise _bad_value(setting, ctx, f"RHS must have {expected} token(s), got {n}")
    current = getattr(record, rule.field)
    new_value = rule.handler(current, setting, ctx)
    logger.debug("policy setting %d: %s -> %s=%r", setting.index, setting.text, rule.field, new_value)
    return replace(record, **{rule.field: new_value})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_policy(
    policy: str,
    *,
    local: bool = False,
    noisy_homopolymer: bool = False,
    defaults: Optional[DefaultProfile] = None,
) -> PolicyRecord:
    """
    Parse an alignment policy string.

    Parameters
    ----------
    policy : str
        ``;``-separated ``tag=value`` settings.  May be empty.
    local : bool, default False
        Local alignment mode; selects the local match bonus, minimum
        score and score floor defaults.
    noisy_homopolymer : bool, default False
        Selects the lower gap penalty defaults used for technologies
        with noisy homopolymer calls.
    defaults : DefaultProfile, optional
        Default constants.  Uses DEFAULT_PROFILE when omitted.

    Returns
    -------
    PolicyRecord
        The default record for the mode flags with every setting applied
        in order.

    Raises
    ------
    PolicyError
        On the first malformed setting, malformed value, invalid
        enumerated prefix or unknown tag.  No partial record is returned.

    Examples
    --------
    >>> rec = parse_policy("MMP=C44;RDG=2", local=True)
    >>> rec.mismatch.value, rec.read_gap.open
    (44, 2)
    """
    if defaults is None:
        defaults = DEFAULT_PROFILE
    ctx = _ParseContext(
        policy=policy,
        noisy_homopolymer=noisy_homopolymer,
        defaults=defaults,
    )
    baseline = defaults.select(local, noisy_homopolymer)
    record = baseline
    for setting in iter_settings(policy):
        record = _apply_setting(record, setting, ctx)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "parsed policy %r (local=%s, noisy_homopolymer=%s); overridden: %s",
            policy, local, noisy_homopolymer,
            ", ".join(changed_fields(record, baseline)) or "none",
        )
    return record


# ---------------------------------------------------------------------------
# Writing a record back as a policy string
# ---------------------------------------------------------------------------

def _write_cost(p: Penalty) -> str:
    if p.model is CostModel.CONSTANT:
        return f"C{p.value}"
    return p.model.value


def _write_float(x: float) -> str:
    return repr(float(x))


def format_policy(record: PolicyRecord) -> str:
    """
    Render ``record`` as a policy string naming every settable tag.

    Parsing the result with the same mode flags gives back ``record``,
    except for what the grammar cannot express: the match-bonus model
    (MA always means Constant), ``n_cat_pair``, and the value carried
    by a Q or R penalty (reparsed from the profile).

    Examples
    --------
    >>> format_policy(DEFAULT_PROFILE.select(False, False))[:24]
    'MA=0;MMP=C6;SNP=6;NP=C1;'
    """
    seed, ival, search = record.seed, record.interval, record.search
    settings = [
        f"MA={record.match_bonus.value}",
        f"MMP={_write_cost(record.mismatch)}",
        f"SNP={record.snp}",
        f"NP={_write_cost(record.n_penalty)}",
        f"RDG={record.read_gap.open},{record.read_gap.extend}",
        f"RFG={record.ref_gap.open},{record.ref_gap.extend}",
        f"MIN={_write_float(record.min_score.const)},{_write_float(record.min_score.linear)}",
        f"FL={_write_float(record.score_floor.const)},{_write_float(record.score_floor.linear)}",
        f"NCEIL={_write_float(record.n_ceil.const)},{_write_float(record.n_ceil.linear)}",
        f"SEED={seed.mismatches},{seed.length},{seed.period}",
        f"IVAL={ival.kind.value},{_write_float(ival.a)},{_write_float(ival.b)}",
        f"POSF={_write_float(search.pos_min)},{_write_float(search.pos_frac)}",
        f"ROWM={_write_float(search.row_mult)},{_write_float(search.row_min)}",
    ]
    return ";".join(settings)
