# tests/conftest.py
import pytest

from ttlsort.config import Settings

from packets import DEST


@pytest.fixture
def settings():
    return Settings(target=DEST, max_rounds=3, chill_s=0, read_timeout_s=1)
