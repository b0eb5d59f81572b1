"""Reserved tag ids, naming conventions, and .env loading.

WHY: The status classifier and the grouping rules compare marker tags
against a handful of well-known tags (status: confirmed, status:
rejected, source: manual, shot boundary, marker-group parent). Their
ids differ between annotation-store installations, so they are
configuration, not code.

HOW: python-dotenv loads the .env file on import. Each reserved id is a
module-level default read from an environment variable.
load_tag_config() bundles them into the TagConfig value that the
engine functions receive as a parameter.

RULES:
- The engine never imports this module; only the CLI and callers do
- MARKER_STATUS_CONFIRMED and MARKER_STATUS_REJECTED are required
- Other ids may be empty, which disables the rule they drive
- Explicit keyword overrides win over environment values
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

from marker_timeline.core.models import TagConfig

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Reserved tag ids
# ---------------------------------------------------------------------------

MARKER_STATUS_CONFIRMED = os.getenv("MARKER_STATUS_CONFIRMED", "")
MARKER_STATUS_REJECTED = os.getenv("MARKER_STATUS_REJECTED", "")
MARKER_SOURCE_MANUAL = os.getenv("MARKER_SOURCE_MANUAL", "")
MARKER_SHOT_BOUNDARY = os.getenv("MARKER_SHOT_BOUNDARY", "")
MARKER_GROUP_PARENT = os.getenv("MARKER_GROUP_PARENT", "")

# ---------------------------------------------------------------------------
# Naming conventions
# ---------------------------------------------------------------------------

MARKER_AI_SUFFIX = os.getenv("MARKER_AI_SUFFIX", "_AI")
"""Suffix on AI-generated tag names; stripped to fold lanes."""

MARKER_TEMP_PREFIX = os.getenv("MARKER_TEMP_PREFIX", "temp-")
"""Id prefix of draft markers that are not yet persisted."""


def load_tag_config(
    status_confirmed: Optional[str] = None,
    status_rejected: Optional[str] = None,
    source_manual: Optional[str] = None,
    shot_boundary: Optional[str] = None,
    marker_group_parent: Optional[str] = None,
) -> TagConfig:
    """Build the TagConfig from the environment plus explicit overrides.

    WHY: Without the two status tag ids every marker would classify as
    unprocessed, which silently breaks review navigation.

    RULES:
    - Raises ValueError if either status tag id is missing or empty
    - None means "use the environment value"; "" explicitly disables

    Returns:
        A TagConfig ready to pass to the engine.
    """
    confirmed = (MARKER_STATUS_CONFIRMED if status_confirmed is None else status_confirmed).strip()
    rejected = (MARKER_STATUS_REJECTED if status_rejected is None else status_rejected).strip()
    if not confirmed or not rejected:
        raise ValueError(
            "Marker status tags not configured. "
            "Add MARKER_STATUS_CONFIRMED and MARKER_STATUS_REJECTED to the .env file."
        )

    return TagConfig(
        status_confirmed=confirmed,
        status_rejected=rejected,
        source_manual=(MARKER_SOURCE_MANUAL if source_manual is None else source_manual).strip(),
        shot_boundary=(MARKER_SHOT_BOUNDARY if shot_boundary is None else shot_boundary).strip(),
        marker_group_parent=(
            MARKER_GROUP_PARENT if marker_group_parent is None else marker_group_parent
        ).strip(),
        ai_suffix=MARKER_AI_SUFFIX,
        temp_prefix=MARKER_TEMP_PREFIX,
    )
