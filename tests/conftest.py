# ===============================================
# tests/conftest.py
# ===============================================

import os

# the app builds its model client at import time; never reach a real provider in tests
os.environ["MODEL_PROVIDER"] = "echo"

import pytest

from tests.fakes import REFERENCE_RESPONSE


@pytest.fixture
def reference_response() -> str:
    return REFERENCE_RESPONSE
