"""
Resource Registry - hierarchical storage and cleanup of cancelable handles.

Every owner creates its own RegistryNode; there is no shared instance.
"""
from .node import (
    RegistryNode,
    aclean,
    aclean_keys,
    aempty,
    aempty_keys,
    clean,
    clean_keys,
    empty,
    empty_keys,
)

__all__ = [
    "RegistryNode",
    "clean",
    "empty",
    "clean_keys",
    "empty_keys",
    "aclean",
    "aempty",
    "aclean_keys",
    "aempty_keys",
]
