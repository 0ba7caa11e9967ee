"""Test-run settings loaded from JSON files with environment overrides."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from e2e_automation.errors import ConfigurationError
from e2e_automation.models.browser_models import BrowserType, SessionConfig, Viewport
from e2e_automation.models.report_models import LinkTemplates

logger = logging.getLogger(__name__)

BASE_SETTINGS_FILE = "appsettings.json"
ENV_PREFIX = "E2E_"
DEFAULT_ENVIRONMENT = "qa"


class AutomationSettings(BaseModel):
    """Settings for one test run.

    Field aliases match the keys used in ``appsettings*.json``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    environment: str = Field(
        default=DEFAULT_ENVIRONMENT, alias="Environment", description="Environment name"
    )
    base_url: str = Field(default="", alias="BaseUrl", description="Application base URL")
    browser: str = Field(default="chromium", alias="Browser", description="Browser engine")
    headless: bool = Field(default=False, alias="Headless", description="Headless mode")
    slow_mo: int = Field(default=0, ge=0, alias="SlowMo", description="Slow motion delay (ms)")
    timeout: int = Field(
        default=30000, gt=0, alias="Timeout", description="Default wait timeout (ms)"
    )
    viewport_width: int = Field(default=1580, gt=0, alias="ViewportWidth")
    viewport_height: int = Field(default=780, gt=0, alias="ViewportHeight")
    links: LinkTemplates = Field(
        default_factory=LinkTemplates, alias="Links", description="Tag link templates"
    )

    # Reporting
    allure_executable: Optional[str] = Field(
        default=None,
        alias="AllureExecutable",
        description="Allure CLI path or command (None = look up 'allure' on PATH)",
    )
    open_report: bool = Field(
        default=True, alias="OpenReport", description="Open the report after generation"
    )
    report_timeout_seconds: int = Field(
        default=60, gt=0, alias="ReportTimeoutSeconds", description="Report generation wait"
    )

    @property
    def browser_type(self) -> BrowserType:
        return BrowserType.parse(self.browser)

    def session_config(self) -> SessionConfig:
        """Build the immutable browser session configuration."""
        return SessionConfig(
            browser=self.browser_type,
            headless=self.headless,
            slow_mo_ms=self.slow_mo,
            viewport=Viewport(width=self.viewport_width, height=self.viewport_height),
        )


def load_settings(
    config_dir: Optional[Path] = None,
    environment: Optional[str] = None,
) -> AutomationSettings:
    """
    Load settings for a test run.

    Settings are merged in this order (later overrides earlier):
    1. Default values
    2. ``appsettings.json`` (required)
    3. ``appsettings.<environment>.json`` (optional)
    4. Environment variables (E2E_*)

    Args:
        config_dir: Directory holding the settings files (default: ./config)
        environment: Environment name (default: TEST_ENVIRONMENT or "qa")

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the base file is missing, is not valid JSON,
            or a value fails validation
    """
    load_dotenv()

    config_dir = Path(config_dir) if config_dir else Path.cwd() / "config"
    env_name = environment or os.getenv("TEST_ENVIRONMENT") or DEFAULT_ENVIRONMENT

    base_path = config_dir / BASE_SETTINGS_FILE
    if not base_path.exists():
        raise ConfigurationError(f"Settings file not found: {base_path}")

    merged = _read_json(base_path)

    overlay_path = config_dir / f"appsettings.{env_name}.json"
    if overlay_path.exists():
        _deep_merge(merged, _read_json(overlay_path))
        logger.debug(f"Applied settings overlay {overlay_path}")

    merged.update(_get_env_overrides())
    merged["Environment"] = env_name

    try:
        settings = AutomationSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {config_dir}: {e}") from e

    logger.debug(
        f"Loaded settings for '{env_name}' (browser={settings.browser}, "
        f"headless={settings.headless})"
    )
    return settings


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Settings file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")
    return data


def _deep_merge(target: Dict[str, Any], overlay: Dict[str, Any]) -> None:
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value


def _get_env_overrides() -> Dict[str, Any]:
    """
    Get top-level setting overrides from environment variables.

    Variables are prefixed with E2E_ and matched to setting keys ignoring
    case and underscores (E2E_BASE_URL -> BaseUrl, E2E_SLOWMO -> SlowMo).
    Integers are converted first ("0"/"1" stay numeric and validate as
    booleans where needed); "true"/"yes" and "false"/"no" become booleans.

    Returns:
        Dictionary of overrides keyed by setting alias
    """
    aliases = {
        field.alias.lower(): field.alias
        for field in AutomationSettings.model_fields.values()
        if field.alias
    }
    overrides: Dict[str, Any] = {}

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        normalized = key[len(ENV_PREFIX) :].replace("_", "").lower()
        alias = aliases.get(normalized)
        if alias is None:
            continue

        try:
            overrides[alias] = int(value)
        except ValueError:
            if value.lower() in ("true", "yes"):
                overrides[alias] = True
            elif value.lower() in ("false", "no"):
                overrides[alias] = False
            else:
                overrides[alias] = value

    return overrides
