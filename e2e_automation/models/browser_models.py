"""Browser session and page interaction data models.

This module defines the Pydantic models shared by the session provider and
the page action facade: browser selection, viewport, session configuration,
element wait states and captured dialog details.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class BrowserType(str, Enum):
    """Supported browser engines."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BrowserType":
        """Resolve a configured browser name, defaulting to Chromium.

        Args:
            value: Browser name from configuration (case-insensitive)

        Returns:
            Matching browser type, or CHROMIUM when unset or unrecognized
        """
        if not value:
            return cls.CHROMIUM
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.warning(f"Unknown browser '{value}', falling back to chromium")
            return cls.CHROMIUM


class WaitState(str, Enum):
    """Element states a facade action can wait for."""

    ATTACHED = "attached"
    DETACHED = "detached"
    VISIBLE = "visible"
    HIDDEN = "hidden"
    ENABLED = "enabled"


class Viewport(BaseModel):
    """Browser viewport configuration."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=1580, gt=0, description="Viewport width")
    height: int = Field(default=780, gt=0, description="Viewport height")


class SessionConfig(BaseModel):
    """Immutable settings used to launch one browser session."""

    model_config = ConfigDict(frozen=True)

    browser: BrowserType = Field(
        default=BrowserType.CHROMIUM, description="Browser engine to launch"
    )
    headless: bool = Field(default=False, description="Run without a visible window")
    slow_mo_ms: int = Field(default=0, ge=0, description="Delay between operations")
    viewport: Viewport = Field(default_factory=Viewport, description="Viewport size")


class DialogAction(str, Enum):
    """How a captured dialog was resolved."""

    ACCEPTED = "accepted"
    DISMISSED = "dismissed"


class DialogInfo(BaseModel):
    """Details of a dialog consumed by a one-shot handler."""

    type: str = Field(description="alert, confirm, prompt or beforeunload")
    message: str = Field(default="", description="Dialog message text")
    default_value: str = Field(default="", description="Prompt default value")
    action: DialogAction = Field(description="How the dialog was resolved")
