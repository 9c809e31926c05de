# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from dealdesk.api.http import app  # ensures imports resolve; run tests from repo root


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


def pytest_make_parametrize_id(config, val, argname):
    # Huge ints exceed Python's int->str digit limit when pytest builds test ids.
    if isinstance(val, int) and not isinstance(val, bool) and val.bit_length() > 4000:
        return f"{argname}-bigint{val.bit_length()}bits"
    return None
