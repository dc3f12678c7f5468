import pytest

from tests.packets import make_scan_stream


@pytest.fixture
def scan_stream():
    return make_scan_stream()
