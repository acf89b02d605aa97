import pytest
from loguru import logger

from rallypoint.core.config import ConfigManager
from rallypoint.registry import RegistryNode
from rallypoint.scheduling import CooperativeScheduler


@pytest.fixture
def caplog(caplog):
    """Forward loguru records into pytest's caplog."""
    handler_id = logger.add(caplog.handler, format="{message}", level=0)
    yield caplog
    logger.remove(handler_id)


@pytest.fixture
def config():
    return ConfigManager()


@pytest.fixture
def scheduler(config):
    return CooperativeScheduler(config)


@pytest.fixture
def registry():
    return RegistryNode("test")
