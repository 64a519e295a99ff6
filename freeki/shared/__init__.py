"""
FreeKi Shared Kernel
====================

Reactive state synchronization for the FreeKi wiki client.

Architecture:
- core: path resolution, state store, notifier, scheduling, configuration
- infrastructure: technical adapters (settings storage, HTTP)
- domain: state schema, theme application, settings persistence
"""

__all__ = []
