"""Timeline alignment for duet compositions.

The secondary stream is clipped to [0, primary duration] so both
sequences end together. The range is not clamped to the secondary's own
length: a secondary shorter than the primary produces an end past its
native duration, and the rendering engine decides how to report that.
"""

from dataclasses import dataclass

from .media import NS_PER_S, MediaDescriptor


@dataclass(frozen=True)
class TimeRange:
    """Half-open clip range in nanoseconds."""

    start_ns: int
    end_ns: int

    def __post_init__(self):
        if self.start_ns < 0:
            raise ValueError(f"start must be >= 0, got {self.start_ns}")
        if self.end_ns < self.start_ns:
            raise ValueError(
                f"start ({self.start_ns}) must be <= end ({self.end_ns})"
            )

    @property
    def duration_ns(self) -> int:
        return self.end_ns - self.start_ns

    @property
    def start_s(self) -> float:
        return self.start_ns / NS_PER_S

    @property
    def end_s(self) -> float:
        return self.end_ns / NS_PER_S


def align(primary_duration_ns: int, secondary: MediaDescriptor | None = None) -> TimeRange:
    """Clip range for the secondary stream: always [0, primary duration].

    The secondary descriptor is accepted for symmetry with the other
    planning steps but does not influence the result.
    """
    return TimeRange(0, primary_duration_ns)
