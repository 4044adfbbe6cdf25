from loguru import logger
import pytest

from enrollme.config import Config


def pytest_addoption(parser):
    parser.addoption("--run-manual", action="store_true", default=False, help="run manual tests")
    parser.addoption("--run-webhook", action="store_true", default=False, help="run webhook tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "manual: mark test as manual to run")
    config.addinivalue_line("markers", "webhook: mark test as webhook test to run")


def pytest_collection_modifyitems(config, items):
    skip_manual = pytest.mark.skip(reason="need --run-manual option to run")
    skip_webhook = pytest.mark.skip(reason="need --run-webhook option to run")

    run_manual = config.getoption("--run-manual")
    run_webhook = config.getoption("--run-webhook")

    for item in items:
        if "manual" in item.keywords and not run_manual:
            item.add_marker(skip_manual)
        if "webhook" in item.keywords and not run_webhook:
            item.add_marker(skip_webhook)


@pytest.fixture
def log_messages():
    """Collects loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def fresh_config(monkeypatch):
    """Drops the Config singleton so the next Config() reloads from the environment."""
    monkeypatch.setattr(Config, "_instance", None)
    monkeypatch.setattr("enrollme.config.load_dotenv", lambda: None)
