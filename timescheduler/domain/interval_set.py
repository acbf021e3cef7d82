"""
Overlap queries over collections of same-day time ranges.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from .models import TimeRange


def overlaps(candidate: TimeRange, ranges: Iterable[TimeRange]) -> bool:
    """
    Check whether ``candidate`` lies fully inside any of ``ranges``.

    A slot is only considered blocked when it is entirely contained in a
    blocking range; merely touching or straddling the edge of one does not
    count. Both boundaries are inclusive, so ``[12:00, 12:30)`` is contained
    in ``[12:00, 12:30)``.
    """
    return any(blocking.contains(candidate) for blocking in ranges)


class IntervalSet:
    """
    Ordered collection of half-open time ranges within a single day.

    Ranges are kept sorted by ``(start, end)``; duplicates and overlaps are
    preserved unless :meth:`merged` is called.
    """

    def __init__(self, ranges: Iterable[TimeRange] = ()):
        self._ranges: Tuple[TimeRange, ...] = tuple(
            sorted(ranges, key=lambda r: (r.start, r.end))
        )

    def __iter__(self) -> Iterator[TimeRange]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        return self._ranges == other._ranges

    def __repr__(self) -> str:
        return f"IntervalSet([{', '.join(str(r) for r in self._ranges)}])"

    def covers(self, candidate: TimeRange) -> bool:
        """Full-containment test, see :func:`overlaps`."""
        return overlaps(candidate, self._ranges)

    def intersects(self, candidate: TimeRange) -> bool:
        """Check whether ``candidate`` shares at least one minute with any range."""
        return any(r.intersects(candidate) for r in self._ranges)

    def conflicts(self, candidate: TimeRange) -> List[TimeRange]:
        """Return every range that intersects ``candidate``, in order."""
        return [r for r in self._ranges if r.intersects(candidate)]

    def union(self, other: Iterable[TimeRange]) -> "IntervalSet":
        return IntervalSet((*self._ranges, *other))

    def merged(self) -> "IntervalSet":
        """
        Merge overlapping or adjacent ranges.

        Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
        """
        if not self._ranges:
            return IntervalSet()

        merged: List[TimeRange] = [self._ranges[0]]

        for current in self._ranges[1:]:
            last = merged[-1]

            if current.start <= last.end:
                merged[-1] = TimeRange(start=last.start, end=max(last.end, current.end))
            else:
                merged.append(current)

        return IntervalSet(merged)
