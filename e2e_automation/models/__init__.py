"""Models package for the automation framework."""

from .browser_models import (
    BrowserType,
    DialogAction,
    DialogInfo,
    SessionConfig,
    Viewport,
    WaitState,
)
from .report_models import (
    LinkTemplates,
    ReportOutcome,
    ReportStatus,
    ScenarioLabel,
    ScenarioLink,
    ScenarioMetadata,
)

__all__ = [
    # Browser
    "BrowserType",
    "DialogAction",
    "DialogInfo",
    "SessionConfig",
    "Viewport",
    "WaitState",
    # Reporting
    "LinkTemplates",
    "ReportOutcome",
    "ReportStatus",
    "ScenarioLabel",
    "ScenarioLink",
    "ScenarioMetadata",
]
