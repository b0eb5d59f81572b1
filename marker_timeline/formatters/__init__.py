"""Layout formatter registry.

WHY: The CLI needs a single lookup to find a formatter by name. Adding
a report is one new module plus one line here.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from marker_timeline.formatters.json_layout import JSONLayoutFormatter
from marker_timeline.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from marker_timeline.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "json_layout": JSONLayoutFormatter,
}
