"""
Rallypoint Core - shared infrastructure.

Provides:
- BaseSystem: Abstract base for long-lived systems
- ConfigManager: Configuration with optional persistence
- Signal / Connection: Synchronous notification sources
- setup_logging: Loguru sink configuration

Usage:
    from rallypoint.core import ConfigManager, setup_logging

    config = ConfigManager("rallypoint.json")
    setup_logging(config.data)
"""
from .events import Connection, Signal
from .config import (
    ConfigManager,
    ConfigError,
    AppConfig,
    GeneralSettings,
    LoggingSettings,
    SchedulerSettings,
    RegistrySettings,
)
from .base_system import BaseSystem
from .logging import setup_logging

__all__ = [
    # Infrastructure
    "BaseSystem",
    "setup_logging",

    # Configuration
    "ConfigManager",
    "ConfigError",
    "AppConfig",
    "GeneralSettings",
    "LoggingSettings",
    "SchedulerSettings",
    "RegistrySettings",

    # Events
    "Signal",
    "Connection",
]
