"""
Resource Registry - a tree of cancelable handles.

A RegistryNode maps keys to cancelable values (anything cancel() accepts)
or to nested RegistryNodes. Cleanup walks a snapshot of each node, cancels
leaves, and removes a leaf only after its cancel returned. A failing cancel
aborts the operation with the key still in place; siblings processed before
it stay cancelled.

Usage:
    registry = RegistryNode("player")
    registry["touch"] = part.touched.connect(on_touch)
    registry.child("effects").add(Timer(3.0))

    registry.clean_keys("touch")   # only the touch subscription
    registry.clean()               # every leaf, nested nodes stay (empty)
    registry.empty()               # nothing left at all
"""
from itertools import count
from typing import Any, Dict, Hashable, Iterator, Optional
from loguru import logger

from rallypoint.core.config import ConfigManager
from rallypoint.handles import cancel, cancel_async, classify_handle


class RegistryNode:
    """Keyed container of cancelable handles and nested nodes."""

    def __init__(self, name: str = "registry", config: Optional[ConfigManager] = None):
        self.name = name
        self.config = config
        self._entries: Dict[Hashable, Any] = {}
        self._auto_keys = count(1)

    @property
    def _trace(self) -> bool:
        return bool(self.config and self.config.data.registry.trace_cleanup)

    # --- mapping ---

    def __getitem__(self, key: Hashable) -> Any:
        return self._entries[key]

    def __setitem__(self, key: Hashable, value: Any) -> None:
        """Store a value; whatever was under `key` is dropped without being cancelled."""
        self._check(value)
        self._entries[key] = value

    def __delitem__(self, key: Hashable) -> None:
        del self._entries[key]

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._entries))

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def pop(self, key: Hashable, *default) -> Any:
        """Remove and return a value without cancelling it."""
        return self._entries.pop(key, *default)

    def keys(self):
        return self._entries.keys()

    def values(self):
        return self._entries.values()

    def items(self):
        return self._entries.items()

    # --- insertion helpers ---

    def give(self, key: Hashable, value: Any) -> Any:
        """
        Store `value` under `key`, releasing what was there before.

        A replaced leaf is cancelled, a replaced node is emptied. Giving
        None just releases and removes the key.

        Returns:
            value
        """
        if value is not None:
            self._check(value)
        previous = self._entries.get(key)
        if previous is not None and previous is not value:
            if isinstance(previous, RegistryNode):
                previous.empty()
            else:
                cancel(previous)
            if self._entries.get(key) is previous:
                del self._entries[key]
        if value is not None:
            self._entries[key] = value
        return value

    def add(self, value: Any) -> int:
        """Store `value` under a fresh integer key and return the key."""
        self._check(value)
        key = next(self._auto_keys)
        while key in self._entries:
            key = next(self._auto_keys)
        self._entries[key] = value
        return key

    def child(self, key: Hashable) -> 'RegistryNode':
        """Return the nested node under `key`, creating it if missing."""
        existing = self._entries.get(key)
        if existing is None:
            existing = RegistryNode(f"{self.name}.{key}", config=self.config)
            self._entries[key] = existing
        elif not isinstance(existing, RegistryNode):
            raise TypeError(f"Key '{key}' in '{self.name}' holds a handle, not a node")
        return existing

    def _check(self, value: Any) -> None:
        if not isinstance(value, RegistryNode):
            classify_handle(value)

    # --- cleanup ---

    def clean(self) -> int:
        """
        Cancel and remove every leaf, recursing into nested nodes.

        Nested node objects stay in place, emptied of their leaves.

        Returns:
            Number of leaves cancelled
        """
        cancelled = 0
        for key, value in list(self._entries.items()):
            cancelled += self._clean_entry(key, value)
        if cancelled:
            logger.debug(f"Registry '{self.name}': cleaned {cancelled} handles")
        return cancelled

    def empty(self) -> int:
        """clean(), then remove every remaining entry."""
        cancelled = self.clean()
        self._entries.clear()
        return cancelled

    def clean_keys(self, *keys: Hashable) -> int:
        """clean() restricted to `keys`; missing keys are ignored."""
        cancelled = 0
        for key in keys:
            if key in self._entries:
                cancelled += self._clean_entry(key, self._entries[key])
        return cancelled

    def empty_keys(self, *keys: Hashable) -> int:
        """clean_keys(), then remove `keys` whether they held leaves or nodes."""
        cancelled = 0
        for key in keys:
            if key in self._entries:
                cancelled += self._clean_entry(key, self._entries[key])
                self._entries.pop(key, None)
        return cancelled

    def _clean_entry(self, key: Hashable, value: Any) -> int:
        if isinstance(value, RegistryNode):
            return value.clean()
        cancel(value)
        self._discard(key, value)
        return 1

    # --- async cleanup ---

    async def aclean(self) -> int:
        """clean(), awaiting teardowns that suspend."""
        cancelled = 0
        for key, value in list(self._entries.items()):
            cancelled += await self._aclean_entry(key, value)
        if cancelled:
            logger.debug(f"Registry '{self.name}': cleaned {cancelled} handles")
        return cancelled

    async def aempty(self) -> int:
        cancelled = await self.aclean()
        self._entries.clear()
        return cancelled

    async def aclean_keys(self, *keys: Hashable) -> int:
        cancelled = 0
        for key in keys:
            if key in self._entries:
                cancelled += await self._aclean_entry(key, self._entries[key])
        return cancelled

    async def aempty_keys(self, *keys: Hashable) -> int:
        cancelled = 0
        for key in keys:
            if key in self._entries:
                cancelled += await self._aclean_entry(key, self._entries[key])
                self._entries.pop(key, None)
        return cancelled

    async def _aclean_entry(self, key: Hashable, value: Any) -> int:
        if isinstance(value, RegistryNode):
            return await value.aclean()
        await cancel_async(value)
        self._discard(key, value)
        return 1

    def _discard(self, key: Hashable, value: Any) -> None:
        # A teardown may have stored something new under the same key.
        if self._entries.get(key) is value:
            del self._entries[key]
        if self._trace:
            logger.trace(f"Registry '{self.name}': cancelled '{key}' ({value!r})")

    # --- inspection ---

    def leaf_count(self) -> int:
        """Number of leaves at any depth."""
        return sum(
            value.leaf_count() if isinstance(value, RegistryNode) else 1
            for value in self._entries.values()
        )

    def is_drained(self) -> bool:
        """True when no leaf is reachable from this node."""
        return self.leaf_count() == 0

    def to_tree(self) -> Dict[Hashable, Any]:
        """Nested dict snapshot: nodes become dicts, leaves stay as they are."""
        return {
            key: value.to_tree() if isinstance(value, RegistryNode) else value
            for key, value in self._entries.items()
        }

    # --- scoping ---

    def __enter__(self) -> 'RegistryNode':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.empty()

    async def __aenter__(self) -> 'RegistryNode':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aempty()

    def __repr__(self):
        return f"<RegistryNode {self.name} entries={len(self._entries)}>"


def clean(node: RegistryNode) -> int:
    return node.clean()


def empty(node: RegistryNode) -> int:
    return node.empty()


def clean_keys(node: RegistryNode, *keys: Hashable) -> int:
    return node.clean_keys(*keys)


def empty_keys(node: RegistryNode, *keys: Hashable) -> int:
    return node.empty_keys(*keys)


async def aclean(node: RegistryNode) -> int:
    return await node.aclean()


async def aempty(node: RegistryNode) -> int:
    return await node.aempty()


async def aclean_keys(node: RegistryNode, *keys: Hashable) -> int:
    return await node.aclean_keys(*keys)


async def aempty_keys(node: RegistryNode, *keys: Hashable) -> int:
    return await node.aempty_keys(*keys)
