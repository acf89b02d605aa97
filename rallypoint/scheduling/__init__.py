"""
Core Scheduling Module

Provides the cooperative scheduler that spawns and defers execution contexts.
"""
from .scheduler import CooperativeScheduler

__all__ = ['CooperativeScheduler']
