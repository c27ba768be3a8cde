"""
tokenizer.py — Split a policy string into settings

A policy string is a ``;``-separated list of settings:

    <tag>=<val>[,<val>[,<val>]];<tag>=<val>...

Each setting must contain exactly one ``=`` and its right-hand side must
hold 1 to 3 non-empty comma-separated tokens.  Whitespace is kept as is
and tags are matched case-sensitively by the parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .errors import MalformedSettingError, MalformedValueError

SETTING_SEP = ";"
TAG_SEP = "="
TOKEN_SEP = ","
MAX_TOKENS = 3


@dataclass(frozen=True)
class Setting:
    """
    One ``tag=value`` clause of a policy string.

    Attributes
    ----------
    index : int
        1-based position of the clause among the ``;``-separated chunks.
    text : str
        The raw clause.
    tag : str
        Left-hand side of the ``=``.
    tokens : tuple of str
        Comma-separated right-hand side tokens (1 to 3, none empty).
    """
    index: int
    text: str
    tag: str
    tokens: Tuple[str, ...]


def _split_tokens(index: int, text: str, value: str, policy: str) -> Tuple[str, ...]:
    # An empty right-hand side has no tokens at all, not one empty token
    tokens = tuple(value.split(TOKEN_SEP)) if value else ()
    if len(tokens) == 0:
        raise MalformedValueError(
            "RHS must have at least 1 token",
            setting_index=index, text=text, policy=policy,
        )
    if len(tokens) > MAX_TOKENS:
        raise MalformedValueError(
            f"RHS must have at most {MAX_TOKENS} tokens",
            setting_index=index, text=text, policy=policy,
        )
    for i, tok in enumerate(tokens):
        if len(tok) == 0:
            raise MalformedValueError(
                f"token {i + 1} on RHS had length=0",
                setting_index=index, text=text, policy=policy,
            )
    return tokens


def iter_settings(policy: str) -> Iterator[Setting]:
    """
    Lazily yield the settings of ``policy`` from left to right.

    Empty chunks (an empty policy, a trailing ``;``) are skipped but
    still count toward the setting index.  A malformed chunk raises
    only when it is reached, so callers see errors in input order.

    Raises
    ------
    MalformedSettingError
        If a chunk does not contain exactly one ``=``.
    MalformedValueError
        If the right-hand side has 0 or more than 3 tokens, or an
        empty token.
    """
    for index, text in enumerate(policy.split(SETTING_SEP), start=1):
        if not text:
            continue
        parts = text.split(TAG_SEP)
        if len(parts) != 2:
            raise MalformedSettingError(
                "must be bisected by = sign",
                setting_index=index, text=text, policy=policy,
            )
        tag, value = parts
        yield Setting(
            index=index,
            text=text,
            tag=tag,
            tokens=_split_tokens(index, text, value, policy),
        )


def split_settings(policy: str) -> List[Setting]:
    """Tokenize the whole of ``policy`` eagerly; see iter_settings."""
    return list(iter_settings(policy))
