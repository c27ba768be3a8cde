"""
seedpolicy: alignment scoring and seeding policy strings.
"""

# =============================================================================
# PARSING
# =============================================================================

from .parser import (
    POLICY_TAGS,
    TAG_RULES,
    TagRule,
    parse_policy,
    format_policy,
)

from .tokenizer import (
    Setting,
    iter_settings,
    split_settings,
)

# =============================================================================
# RECORDS AND DEFAULTS
# =============================================================================

from .records import (
    CostModel,
    IntervalKind,
    Penalty,
    GapPenalty,
    LinearFunc,
    SeedParams,
    SeedInterval,
    SearchBreadth,
    PolicyRecord,
)

from .default import (
    DEFAULT_PROFILE,
    DefaultProfile,
    policy_defaults,
)

# =============================================================================
# ERRORS AND VALIDATION
# =============================================================================

from .errors import (
    PolicyError,
    MalformedSettingError,
    MalformedValueError,
    InvalidPrefixError,
    UnknownTagError,
)

from .validation import (
    check_policy,
    changed_fields,
)


__all__ = [
    # Parsing
    "POLICY_TAGS",
    "TAG_RULES",
    "TagRule",
    "parse_policy",
    "format_policy",
    "Setting",
    "iter_settings",
    "split_settings",
    # Records
    "CostModel",
    "IntervalKind",
    "Penalty",
    "GapPenalty",
    "LinearFunc",
    "SeedParams",
    "SeedInterval",
    "SearchBreadth",
    "PolicyRecord",
    # Defaults
    "DEFAULT_PROFILE",
    "DefaultProfile",
    "policy_defaults",
    # Errors
    "PolicyError",
    "MalformedSettingError",
    "MalformedValueError",
    "InvalidPrefixError",
    "UnknownTagError",
    # Validation
    "check_policy",
    "changed_fields",
]
