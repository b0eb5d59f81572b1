"""Marker Timeline: swimlane layout and keyboard navigation for marker review.

WHY: Reviewers curate machine-generated time-interval markers on a video.
They need the markers laid out in stable, non-overlapping lanes and a
cursor that moves predictably through them (chronologically, within a
lane, across lanes, or straight to the next unreviewed marker).

HOW: Three-stage derivation: classify (status from tags), group
(swimlanes and tracks), navigate (pure cursor queries). Each stage is a
pure function of its inputs and is independently testable.

RULES:
- The engine never mutates a Marker; all views are recomputed on demand
- Reserved tag ids arrive through TagConfig, never from globals
- Identical inputs always produce identical lanes, tracks, and targets
"""

__version__ = "0.1.0"
