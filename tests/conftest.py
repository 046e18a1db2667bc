"""
Global pytest fixtures for the lloydkit test suite.

- Provides deterministic seeding across Python, NumPy, and PyTorch.
- Forces single-threaded torch kernels to stabilize timings.
- Forces the non-interactive matplotlib backend.
"""

from __future__ import annotations

import os
import random
import sys
from typing import Generator
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest
import torch

# Add the project's src directory to the Python path so tests can import the code
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))


def _get_seed() -> int:
    """Resolve the test seed from env or default."""
    env = os.getenv("TEST_RANDOM_SEED", "1337")
    try:
        return int(env)
    except ValueError:
        return 1337


@pytest.fixture(scope="session", autouse=True)
def seed_all() -> None:
    """
    Seed Python, NumPy, and PyTorch RNGs once per session.

    Seed value comes from TEST_RANDOM_SEED (default 1337).
    """
    seed = _get_seed()
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


@pytest.fixture(scope="session", autouse=True)
def set_torch_threads() -> None:
    """
    Reduce PyTorch to a single intra-op thread; parallelism in the engine
    comes from its own worker pool.
    """
    torch.set_num_threads(1)


@pytest.fixture(scope="function")
def rng(seed_all: None) -> Generator[np.random.Generator, None, None]:
    """
    Per-test NumPy Generator seeded from the session seed.
    """
    yield np.random.default_rng(_get_seed())


@pytest.fixture(scope="function")
def generator(seed_all: None) -> torch.Generator:
    """Per-test torch Generator seeded from the session seed."""
    gen = torch.Generator()
    gen.manual_seed(_get_seed())
    return gen


@pytest.fixture(autouse=True)
def close_figures():
    """Close any figure a test opened."""
    yield
    import matplotlib.pyplot as plt
    plt.close("all")

