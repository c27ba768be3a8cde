"""
errors.py — Exceptions raised while parsing a policy string

All errors derive from PolicyError (a ValueError) and carry the 1-based
index of the offending setting, the offending text and the full policy
string.  The first error aborts the parse.
"""


class PolicyError(ValueError):
    """
    Base class for policy parsing failures.

    Attributes
    ----------
    setting_index : int
        1-based position of the offending ``;``-separated setting.
    text : str
        The offending tag or setting text.
    policy : str
        The full policy string being parsed.
    reason : str
        Short description of what was wrong.
    """
    kind = "PolicyError"

    def __init__(self, reason: str, *, setting_index: int, text: str, policy: str):
        self.reason = reason
        self.setting_index = setting_index
        self.text = text
        self.policy = policy
        super().__init__(
            f"Error parsing alignment policy setting {setting_index} "
            f"'{text}'; {reason}\nPolicy: '{policy}'"
        )


class MalformedSettingError(PolicyError):
    """A setting is not bisected by exactly one ``=``."""
    kind = "MalformedSetting"


class MalformedValueError(PolicyError):
    """A value list has the wrong shape, or a token is not a valid number."""
    kind = "MalformedValue"


class InvalidPrefixError(PolicyError):
    """An enumerated value (MMP, NP) starts with an unrecognized character."""
    kind = "InvalidEnumeratedPrefix"


class UnknownTagError(PolicyError):
    """The setting's tag is not a recognized policy tag."""
    kind = "UnknownTag"
