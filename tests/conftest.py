import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'schemakit' and tests/ importable as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_schemakit_caches


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Run every test against the bundled defaults only.

    SCHEMAKIT_* variables from a developer shell would change messages and
    bridge behaviour, so they are removed for the duration of each test.
    """
    for key in list(os.environ):
        if key.startswith("SCHEMAKIT_"):
            monkeypatch.delenv(key, raising=False)
    reset_schemakit_caches()
    yield
    reset_schemakit_caches()
