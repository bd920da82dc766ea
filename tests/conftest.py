"""
Shared fixtures for the JWT signer tests.
"""

import os
from datetime import datetime, timezone

from dotenv import load_dotenv

# Load the test environment before any app module reads its settings
dotenv_path = os.path.join(os.path.dirname(__file__), "..", ".env.test")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path, override=True)

import pytest

from jwt_signer.replacer import Replacer

TEST_SECRET = "test_secret_key"


@pytest.fixture
def replacer():
    """Replacer with a few request-like values."""
    return Replacer(
        {
            "user": "alice",
            "name": "Alice Liddell",
            "empty": "",
            "http.request.header.X-User": "alice",
        }
    )


@pytest.fixture
def fixed_now():
    return datetime.fromtimestamp(1000, tz=timezone.utc)
