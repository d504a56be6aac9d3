"""
Shared fixtures: reproducible randomness and the example curve key pair.
"""

import random

import pytest

from dstu4145 import CurveName, get_curve


def seeded_rng(seed: int):
    """``rng(k) -> k bytes`` backed by a seeded ``random.Random``."""
    return random.Random(seed).randbytes


def fixed_rng(*chunks: bytes):
    """rng that hands out *chunks* in order, each for one call."""
    queue = list(chunks)

    def rng(n: int) -> bytes:
        chunk = queue.pop(0)
        assert len(chunk) == n, f"rng asked for {n} bytes, chunk has {len(chunk)}"
        return chunk

    return rng


@pytest.fixture
def rng():
    return seeded_rng(4145)


@pytest.fixture
def rand():
    return random.Random(2002)


@pytest.fixture(scope="session")
def example_curve():
    return get_curve(CurveName.EXAMPLE_PB_163)


@pytest.fixture(scope="session")
def curve_163():
    return get_curve(CurveName.DSTU_PB_163)
