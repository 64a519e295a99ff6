"""
Shared Core Module
==================

State store, path resolution, change notification and configuration.
"""

# Paths
from .paths import (
    ROOT_PATH,
    InvalidPathError,
    split_path,
    join_path,
    validate_path,
    is_ancestor,
    is_affected,
    get_value_at,
    has_path,
)

# State
from .notifier import Notifier, Subscription
from .state_store import StateStore, StateValidationError, deep_merge
from . import events

# Scheduling
from .scheduler import AsyncioScheduler, Debouncer

# Service Infrastructure
from .service_registry import register_cleanup_handler, unregister_cleanup_handler, run_cleanup_handlers

# Configuration
from .configuration import ClientConfig, ConfigManager, ValidationLevel, get_config, get_config_manager

__all__ = [
    # Paths
    "ROOT_PATH",
    "InvalidPathError",
    "split_path",
    "join_path",
    "validate_path",
    "is_ancestor",
    "is_affected",
    "get_value_at",
    "has_path",
    # State
    "Notifier",
    "Subscription",
    "StateStore",
    "StateValidationError",
    "deep_merge",
    "events",
    # Scheduling
    "AsyncioScheduler",
    "Debouncer",
    # Service Infrastructure
    "register_cleanup_handler",
    "unregister_cleanup_handler",
    "run_cleanup_handlers",
    # Configuration
    "ClientConfig",
    "ConfigManager",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
]
