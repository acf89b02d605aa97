import sys
import pytest
from loguru import logger
from rallypoint.core.config import ConfigManager
from rallypoint.core.logging import setup_logging


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_logging_console_only(tmp_path, restore_logger):
    config = ConfigManager()
    config.update("logging", "log_dir", str(tmp_path / "logs"))

    setup_logging(config.data)

    assert not (tmp_path / "logs").exists()


def test_setup_logging_writes_file(tmp_path, restore_logger):
    config = ConfigManager()
    config.update("logging", "log_dir", str(tmp_path / "logs"))
    config.update("logging", "file_logging", True)

    setup_logging(config.data)
    logger.info("hello from test")
    logger.remove()

    files = list((tmp_path / "logs").glob("rallypoint_*.log"))
    assert len(files) == 1
    assert "hello from test" in files[0].read_text(encoding="utf-8")
