"""Test configuration hooks."""

from __future__ import annotations

import logging

import pytest

from lark_client.core import logger as lark_logger
from lark_client.client import LarkClient, StaticTokenProvider
from lark_client.core.config import ClientConfig, RetryPolicyConfig
from lark_client.core.request import LarkRequest
from lark_client.core.retry import RetryPolicy

BASE_URL = "https://open.example.com/open-apis/"


@pytest.fixture(autouse=True)
def _no_debug_proxy(monkeypatch):
    """Keep the developer's CHARLES_PROXY from leaking into configs."""
    monkeypatch.delenv("CHARLES_PROXY", raising=False)


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers after tests that call setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    package_logger = logging.getLogger(lark_logger.ROOT_LOGGER_NAME)
    package_level = package_logger.level
    module_level = lark_logger._level
    registry_levels = {name: lg.level for name, lg in lark_logger._registry.items()}
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    package_logger.setLevel(package_level)
    lark_logger._level = module_level
    for name, lg in lark_logger._registry.items():
        lg.setLevel(registry_levels.get(name, module_level))


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def sleeps() -> list[float]:
    """Collects the delays the retry policy would have slept."""
    return []


@pytest.fixture
def retry_policy(sleeps) -> RetryPolicy:
    return RetryPolicy(RetryPolicyConfig(), sleep=sleeps.append)


@pytest.fixture
def lark_request(config, retry_policy):
    with LarkRequest(config, retry_policy=retry_policy) as request:
        yield request


@pytest.fixture
def client(lark_request):
    with LarkClient(token_provider=StaticTokenProvider("t-test"), request=lark_request) as client:
        yield client
