from __future__ import annotations

import sys
from pathlib import Path

import matplotlib


def pytest_configure() -> None:
    """Ensure the repository root is on sys.path and plots stay headless.

    Tests live inside the package (`olsboot/tests`), so pytest may choose
    `.../olsboot` as its rootdir. In that case, importing the top-level
    package `olsboot` fails unless the parent directory is on `sys.path`.
    """

    matplotlib.use("Agg")
    repo_root = Path(__file__).resolve().parents[2]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)
