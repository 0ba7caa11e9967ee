"""Allure reporting: run layout, scenario tags and report generation."""

from .allure_cli import AllureCli, ReportGenerator, resolve_executable
from .environment import write_environment_properties
from .run_context import RunContext, find_project_root, safe_filename
from .tags import apply_scenario_metadata, parse_scenario_tags

__all__ = [
    "AllureCli",
    "ReportGenerator",
    "RunContext",
    "apply_scenario_metadata",
    "find_project_root",
    "parse_scenario_tags",
    "resolve_executable",
    "safe_filename",
    "write_environment_properties",
]
