"""
Shared fixtures: a config pointed at a fake API root + a respx router for it.
"""

import pytest
import respx

from genie_heartbeat.config import GenieConfig

BASE_URL = "https://genie.test/v2"


@pytest.fixture
def config() -> GenieConfig:
    return GenieConfig(api_key="k1", app_name="svc-a", base_url=BASE_URL)


@pytest.fixture
def router():
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
        yield mock
