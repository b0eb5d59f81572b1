"""Abstract base formatter and output container.

WHY: The same TimelineLayout feeds several reports (a readable lane
listing for reviewers, a JSON layout for other tools). A common base
class lets the CLI drive any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list, usually of one item
- ``suffix`` starts with a hyphen, e.g. ``"-lanes.txt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from marker_timeline.core.models import TagConfig, TimelineLayout


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-lanes.txt"`` → ``"scene42-lanes.txt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all layout formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @abstractmethod
    def format(self, layout: TimelineLayout, config: TagConfig) -> list[FormatterOutput]:
        """Render the layout into one or more output files.

        Args:
            layout: Swimlanes and track projection from one grouping pass.
            config: Reserved tag ids, used to report marker status.

        Returns:
            List of FormatterOutput objects.
        """
