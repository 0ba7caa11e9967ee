"""Scenario tag to Allure link and label mapping.

Supported tag forms (the leading ``@`` is optional):

    @issue:BUG-12    -> issue link  Links.Issue + "BUG-12"
    @tms:TC-7        -> tms link    Links.Tms + "TC-7"
    @link:DOC-3      -> link        Links.Generic + "DOC-3"
    @epic:Auth       -> epic label
    @feature:Login   -> feature label
    @story:Valid     -> story label
    @owner:alice     -> owner label
    @severity:Major  -> severity label "major"

Any other tag is ignored.
"""

import logging
from typing import Iterable, Optional

import allure

from e2e_automation.models.report_models import (
    LinkTemplates,
    ScenarioLabel,
    ScenarioLink,
    ScenarioMetadata,
)

logger = logging.getLogger(__name__)

LINK_TAGS = {"issue": "issue", "tms": "tms", "link": "generic"}
LABEL_TAGS = ("epic", "feature", "story", "owner", "severity")


def parse_scenario_tags(
    tags: Iterable[str],
    templates: Optional[LinkTemplates] = None,
) -> ScenarioMetadata:
    """Derive report links and labels from scenario tags.

    Args:
        tags: Scenario tags, with or without a leading '@'
        templates: Base URLs for link tags (default: LinkTemplates())

    Returns:
        Links and labels in tag order
    """
    templates = templates or LinkTemplates()
    metadata = ScenarioMetadata()

    for raw in tags:
        tag = raw.lstrip("@")
        prefix, sep, value = tag.partition(":")
        if not sep or not value:
            continue
        prefix = prefix.lower()

        if prefix in LINK_TAGS:
            base = getattr(templates, LINK_TAGS[prefix])
            metadata.links.append(ScenarioLink(type=prefix, name=value, url=f"{base}{value}"))
        elif prefix in LABEL_TAGS:
            if prefix == "severity":
                value = value.lower()
            metadata.labels.append(ScenarioLabel(name=prefix, value=value))

    return metadata


def apply_scenario_metadata(metadata: ScenarioMetadata) -> None:
    """Attach links and labels to the running Allure test case."""
    for link in metadata.links:
        allure.dynamic.link(link.url, link_type=link.type, name=link.name)
    for label in metadata.labels:
        allure.dynamic.label(label.name, label.value)
