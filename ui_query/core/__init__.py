# ui_query/core/__init__.py
"""
Core package for UI Query.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from ui_query.core.poller import ElementPoller
  from ui_query.core.waiter import ElementWaiter
  from ui_query.core.session import Session
"""

__all__: list[str] = []
