"""Test helper modules for the schemakit test suite.

- cache_utils: settings/data cache reset for test isolation
- assertions: issue-list assertion helpers
"""
from __future__ import annotations

from .assertions import assert_fails, issue_codes, issue_paths
from .cache_utils import reset_schemakit_caches

__all__ = ["assert_fails", "issue_codes", "issue_paths", "reset_schemakit_caches"]
