"""Reporting data models: scenario tag metadata and report generation outcomes."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LinkTemplates(BaseModel):
    """Base URLs that scenario tag ids are appended to."""

    model_config = ConfigDict(populate_by_name=True)

    issue: str = Field(
        default="https://github.com/your-org/your-repo/issues/",
        alias="Issue",
        description="Issue tracker base URL",
    )
    tms: str = Field(
        default="https://jira.yourcompany.com/browse/",
        alias="Tms",
        description="Test management base URL",
    )
    generic: str = Field(
        default="https://yourcompany.atlassian.net/browse/",
        alias="Generic",
        description="Generic link base URL",
    )


class ScenarioLink(BaseModel):
    """A report link derived from a scenario tag."""

    type: str = Field(description="issue, tms or link")
    name: str = Field(description="Link display name (the tag id)")
    url: str = Field(description="Resolved URL")


class ScenarioLabel(BaseModel):
    """A report label derived from a scenario tag."""

    name: str = Field(description="Label name (epic, feature, story, owner, severity)")
    value: str = Field(description="Label value")


class ScenarioMetadata(BaseModel):
    """Links and labels to apply to the active report test case."""

    links: List[ScenarioLink] = Field(default_factory=list)
    labels: List[ScenarioLabel] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.links and not self.labels


class ReportStatus(str, Enum):
    """Result of an external report generation attempt."""

    GENERATED = "generated"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    NOT_FOUND = "not_found"
    NO_RESULTS = "no_results"


class ReportOutcome(BaseModel):
    """Outcome of ``generate_report``; never raised, always returned."""

    status: ReportStatus = Field(description="Generation result")
    report_dir: Path = Field(description="Target report directory")
    exit_code: Optional[int] = Field(default=None, description="Generator exit code")
    message: str = Field(default="", description="Diagnostic detail")
    opened: bool = Field(default=False, description="Whether the viewer was launched")

    @property
    def succeeded(self) -> bool:
        return self.status == ReportStatus.GENERATED
