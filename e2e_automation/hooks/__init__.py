"""Run and scenario lifecycle hooks."""

from .lifecycle import AutomationHooks, RunState

__all__ = ["AutomationHooks", "RunState"]
