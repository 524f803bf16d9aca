from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union
import heapq
import math

from sortedcontainers import SortedSet

from geometry import Point, Rect
from logger import logger
from points_io import format_points, read_points


class OrderedPointSet:
    "Baseline συλλογή σημείων πάνω σε SortedSet, ίδιο interface με το PointSet."

    def __init__(self, points: Optional[Iterable[Point]] = None):
        self._set: SortedSet = SortedSet()
        for p in points or ():
            self.put(p)

    @classmethod
    def from_file(cls, source: Union[str, Path, TextIO, None]) -> "OrderedPointSet":
        point_set = cls(read_points(source))
        logger.debug("ordered set loaded %d points from %r", len(point_set), source)
        return point_set

    def copy(self) -> "OrderedPointSet":
        return type(self)(self._set)

    __copy__ = copy

    def is_empty(self) -> bool:
        return not self._set

    def __len__(self) -> int:
        return len(self._set)

    def put(self, point: Point) -> None:
        if point.has_nan():
            raise ValueError(f"cannot index a point with NaN coordinates: {point}")
        self._set.add(point)

    def contains(self, point: Point) -> bool:
        return point in self._set

    def __contains__(self, point: object) -> bool:
        return isinstance(point, Point) and self.contains(point)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._set)

    def __str__(self) -> str:
        return format_points(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self)})"

    def range(self, rect: Rect) -> "OrderedPointSet":
        "Σημεία μέσα στο rect: στένεμα κατά x με irange και φίλτρο κατά y."
        low = Point(rect.xmin, -math.inf)
        high = Point(rect.xmax, math.inf)
        return type(self)(p for p in self._set.irange(low, high) if rect.contains(p))

    def nearest(self, point: Point) -> Optional[Point]:
        if not self._set:
            return None
        return min(self._set, key=lambda p: (point.distance(p), p))

    def k_nearest(self, point: Point, k: int) -> "OrderedPointSet":
        if k < 0:
            raise ValueError("k must be non-negative")
        return type(self)(heapq.nsmallest(k, self._set, key=lambda p: (point.distance(p), p)))
