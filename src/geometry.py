from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import math


@dataclass(frozen=True, order=True)
class Point:
    "Σημείο στο επίπεδο, διάταξη λεξικογραφικά κατά (x, y)."

    x: float
    y: float

    def distance(self, other: "Point") -> float:
        "Ευκλείδεια απόσταση από άλλο σημείο."
        dx = self.x - other.x
        dy = self.y - other.y
        return (dx * dx + dy * dy) ** 0.5

    def y_before(self, other: "Point") -> bool:
        "Δευτερεύουσα διάταξη: πρώτα κατά y και μετά κατά x."
        return (self.y, self.x) < (other.y, other.x)

    def has_nan(self) -> bool:
        "NaN συντεταγμένη: το σημείο δεν είναι ίσο ούτε με τον εαυτό του."
        return math.isnan(self.x) or math.isnan(self.y)

    def coordinate(self, x_axis: bool) -> float:
        return self.x if x_axis else self.y

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    "Ορθογώνιο [xmin, xmax] x [ymin, ymax] με κλειστά διαστήματα."

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_corners(cls, left_bottom: Point, right_top: Point) -> "Rect":
        return cls(left_bottom.x, left_bottom.y, right_top.x, right_top.y)

    @classmethod
    def plane(cls) -> "Rect":
        "Ολόκληρο το επίπεδο, η αρχική περιοχή της ρίζας."
        return cls(-math.inf, -math.inf, math.inf, math.inf)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            Point(self.xmin, self.ymin),
            Point(self.xmin, self.ymax),
            Point(self.xmax, self.ymin),
            Point(self.xmax, self.ymax),
        )

    def contains(self, p: Point) -> bool:
        "Ελέγχει αν το σημείο είναι μέσα ή πάνω στο σύνορο."
        return self.xmin <= p.x <= self.xmax and self.ymin <= p.y <= self.ymax

    def any_corner_in(self, other: "Rect") -> bool:
        return any(other.contains(c) for c in self.corners())

    def intersects(self, other: "Rect") -> bool:
        "Ελέγχει αν δύο ορθογώνια τέμνονται."
        if self.any_corner_in(other) or other.any_corner_in(self):
            return True

        #to ena diaperna to allo (stavros), kamia gonia den einai mesa
        if (self.xmin <= other.xmin and other.xmax <= self.xmax
                and other.ymin <= self.ymin and self.ymax <= other.ymax):
            return True
        return (self.ymin <= other.ymin and other.ymax <= self.ymax
                and other.xmin <= self.xmin and self.xmax <= other.xmax)

    def distance(self, p: Point) -> float:
        "Απόσταση σημείου από το ορθογώνιο (0 αν είναι μέσα)."
        if self.contains(p):
            return 0.0
        if self.xmin <= p.x <= self.xmax:
            return min(abs(self.ymax - p.y), abs(self.ymin - p.y))
        if self.ymin <= p.y <= self.ymax:
            return min(abs(self.xmax - p.x), abs(self.xmin - p.x))
        return min(p.distance(c) for c in self.corners())

    def clip(self, border_point: Point, x_axis: bool, left: bool) -> "Rect":
        "Κόβει την περιοχή στο ημιεπίπεδο που ορίζει το border_point στον άξονα."
        if x_axis:
            if left:
                return Rect(self.xmin, self.ymin, min(self.xmax, border_point.x), self.ymax)
            return Rect(max(self.xmin, border_point.x), self.ymin, self.xmax, self.ymax)
        if left:
            return Rect(self.xmin, self.ymin, self.xmax, min(self.ymax, border_point.y))
        return Rect(self.xmin, max(self.ymin, border_point.y), self.xmax, self.ymax)
