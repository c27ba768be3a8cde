"""
conftest.py — Shared pytest fixtures for the seedpolicy test suite

Provides the default profile, the four mode-flag combinations and a
parse helper bound to a given pair of flags.
"""

import pytest

from seedpolicy import DEFAULT_PROFILE, parse_policy


# ---------------------------------------------------------------------------
# Profile and mode fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def profile():
    """Built-in default profile."""
    return DEFAULT_PROFILE


@pytest.fixture(params=[(False, False), (False, True), (True, False), (True, True)],
                ids=["e2e", "e2e-noisy", "local", "local-noisy"])
def modes(request):
    """Every (local, noisy_homopolymer) combination."""
    return request.param


@pytest.fixture
def baseline(profile, modes):
    """Default record for the current mode combination."""
    local, noisy = modes
    return profile.select(local, noisy)


@pytest.fixture
def parse(modes):
    """Parser bound to the current mode combination."""
    local, noisy = modes
    def _parse(policy: str):
        return parse_policy(policy, local=local, noisy_homopolymer=noisy)
    return _parse


# ---------------------------------------------------------------------------
# Example policies
# ---------------------------------------------------------------------------

@pytest.fixture
def mixed_policy() -> str:
    """Policy touching most scoring tags, in no particular order."""
    return "MMP=C44;MA=4;RFG=24,12;FL=8;RDG=2;SNP=10;NP=C4;MIN=7"
