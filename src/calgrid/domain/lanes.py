"""Interval packing of a day's segments into side-by-side lanes."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .segments import Segment


@dataclass(frozen=True, slots=True)
class LaneAssignment:
    """Result of packing one day's segments.

    Attributes:
        sorted_segments: Segments ordered by ``(start_minutes, id)``.
        lane_index_by_id: Lane number (>= 0) of every segment.
        lane_count: Number of lanes, at least 1 even for an empty day.
    """

    sorted_segments: tuple[Segment, ...]
    lane_index_by_id: Mapping[str, int]
    lane_count: int

    def lane_of(self, segment_id: str) -> int:
        """Return the lane of `segment_id`.

        Raises:
            KeyError: If the segment was not part of the assignment.
        """
        return self.lane_index_by_id[segment_id]


def assign_lanes(segments: Iterable[Segment]) -> LaneAssignment:
    """Greedily pack `segments` into the fewest left-most lanes.

    Zero and negative length segments are dropped. Each remaining segment
    takes the first lane whose last end is at or before its start, so
    touching segments share a lane and overlapping ones never do.
    """
    ordered = sorted(
        (segment for segment in segments if segment.length > 0),
        key=lambda segment: (segment.start_minutes, segment.id),
    )
    lane_ends: list[int] = []
    lanes: dict[str, int] = {}
    for segment in ordered:
        for index, lane_end in enumerate(lane_ends):
            if lane_end <= segment.start_minutes:
                lane_ends[index] = segment.end_minutes
                lanes[segment.id] = index
                break
        else:
            lanes[segment.id] = len(lane_ends)
            lane_ends.append(segment.end_minutes)

    return LaneAssignment(
        sorted_segments=tuple(ordered),
        lane_index_by_id=MappingProxyType(lanes),
        lane_count=max(1, len(lane_ends)),
    )
