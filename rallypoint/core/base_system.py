from abc import ABC, abstractmethod
from typing import Optional

from .config import ConfigManager


class BaseSystem(ABC):
    """
    Abstract Base Class for long-lived systems (schedulers, services).
    Ensures consistent initialization and access to configuration.

    Every system owns its own ConfigManager reference; when none is
    given an in-memory one with defaults is created.

    Usage:
        async with CooperativeScheduler() as scheduler:
            scheduler.spawn(work)
    """
    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config or ConfigManager()
        self._is_ready = False

    @abstractmethod
    async def initialize(self):
        """
        Async initialization logic.
        """
        self._is_ready = True

    @abstractmethod
    async def shutdown(self):
        """
        Cleanup logic (e.g. cancelling outstanding work).
        """
        self._is_ready = False

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    async def __aenter__(self):
        """Async context manager entry: Initialize system."""
        if not self._is_ready:
            await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit: Shutdown system."""
        if self._is_ready:
            await self.shutdown()
