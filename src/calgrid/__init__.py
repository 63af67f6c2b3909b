"""CALGRID

A calendar time-layout engine. It expands stored (possibly recurring) events
into concrete occurrences, packs each day's occurrences into non-overlapping
lanes with pixel coordinates, and turns drag/resize gestures back into
event-time patches committed to an external event store.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
