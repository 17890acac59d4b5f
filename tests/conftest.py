import hashlib

import pytest
import structlog

from pkg_csrf.config.settings import CsrfSettings

NOW = 1_700_000_000
SECRET = "secret"
MAX_INT = 9223372036854775807


def _ripemd160_available() -> bool:
    try:
        hashlib.new("ripemd160")
    except ValueError:
        return False
    return True


requires_ripemd160 = pytest.mark.skipif(
    not _ripemd160_available(),
    reason="OpenSSL build without ripemd160",
)


def fixed_clock() -> int:
    return NOW


@pytest.fixture
def settings() -> CsrfSettings:
    return CsrfSettings(secret=SECRET, algorithm="sha256")


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
