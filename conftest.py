"""Pytest configuration.

Ensures the `src/` package can be imported during test collection without an
editable install.
"""

import sys
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    resolved = str(path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


REPO_ROOT = Path(__file__).resolve().parent

_prepend_sys_path(REPO_ROOT / "src")


@pytest.fixture
def qbo_env_vars():
    """Environment variables for `QBOClient.from_env`."""
    return {
        "QBO_CLIENT_ID": "test_client_id",
        "QBO_CLIENT_SECRET": "test_client_secret",
        "QBO_ENVIRONMENT": "sandbox",
        "QBO_REDIRECT_URI": "http://localhost",
        "QBO_HTTP_TIMEOUT_SECONDS": "5",
        "QBO_MINORVERSION": "65",
    }
