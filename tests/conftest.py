# Ensure `import barkgen` works from a fresh clone by putting repo/python on
# sys.path, and register the markers used by the suite.
import sys
from pathlib import Path

import numpy as np
import pytest


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _ensure_python_path():
    pkg_dir = _repo_root() / "python"
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))


_ensure_python_path()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: slow tests (full-size renders)")
    config.addinivalue_line("markers", "cli: tests that drive the command-line tools")


@pytest.fixture
def pine_params():
    from barkgen import presets

    return presets.get("pine", seed=42)


@pytest.fixture
def pine_texture(pine_params):
    from barkgen.render import render_rgba

    return render_rgba(64, 64, pine_params)


@pytest.fixture
def random_rgba():
    rng = np.random.default_rng(1234)
    rgba = rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)
    rgba[..., 3] = 255
    return rgba
