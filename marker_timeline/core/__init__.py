"""Core marker engine modules.

WHY: The core package is the UI-independent heart of the reviewer:
the value types, the status classifier, the swimlane grouping and
track assignment, and the navigation queries.

HOW: models.py defines the data structures, status.py classifies
markers from their tags, grouping.py builds the TimelineLayout,
navigation.py answers cursor queries against it, summary.py counts
statuses, timefmt.py formats and parses timestamps.

RULES:
- No I/O and no module-level mutable state in this package
- Every function takes its configuration as a parameter
- Data problems degrade to empty / no-op results, never exceptions
"""
