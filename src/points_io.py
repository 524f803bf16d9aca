from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union
import math
import re

import pandas as pd

from geometry import Point
from logger import logger


Source = Union[str, Path, TextIO, None]

#opos to `in >> x`: prosimo, psifia, dekadika, ekthetis. Oxi nan/inf
NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


class PointSourceError(OSError):
    "Η πηγή σημείων (αρχείο) δεν είναι προσβάσιμη."


def _read_text(source: Source) -> str:
    if source is None:
        return ""

    if isinstance(source, (str, Path)):
        #adeio onoma = adeio set, den einai sfalma
        if str(source) == "":
            return ""
        try:
            with open(source, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as exc:
            raise PointSourceError(f"Unable to access point source {str(source)!r}") from exc

    return source.read()


def parse_points(text: str) -> List[Point]:
    "Διαβάζει greedy ζεύγη αριθμών x y μέχρι το τέλος ή μέχρι την πρώτη αποτυχία."
    points: List[Point] = []
    pos = 0

    while True:
        values = []
        for _ in range(2):
            match = NUMBER_RE.match(text, pos)
            if match is None:
                break
            value = float(match.group(1))
            if not math.isfinite(value):
                #p.x. 1e999, to stream to theorei apotixia
                break
            values.append(value)
            pos = match.end()

        if len(values) < 2:
            #stamatame siopila, to ipoloipo input agnoeitai
            rest = text[pos:].strip()
            if rest:
                logger.debug("stopped reading points at offset %d: %r", pos, rest[:20])
            return points

        points.append(Point(values[0], values[1]))


def read_points(source: Source) -> List[Point]:
    "Επιστρέφει τα σημεία μιας πηγής (path ή ανοιχτό text stream)."
    return parse_points(_read_text(source))


def format_point(p: Point) -> str:
    return f"{float(p.x)} {float(p.y)}"


def format_points(points: Iterable[Point]) -> str:
    "Ένα σημείο ανά γραμμή με τη σειρά της συλλογής."
    return "".join(format_point(p) + "\n" for p in points)


def write_points(points: Iterable[Point], stream: TextIO) -> int:
    "Γράφει τα σημεία στο stream και επιστρέφει πόσα γράφτηκαν."
    count = 0
    for p in points:
        stream.write(format_point(p) + "\n")
        count += 1
    return count


def points_to_frame(points: Iterable[Point], columns: Optional[List[str]] = None) -> pd.DataFrame:
    "Μετατρέπει τα σημεία σε DataFrame με στήλες x, y."
    columns = columns or ["x", "y"]
    return pd.DataFrame([p.as_tuple() for p in points], columns=columns, dtype=float)
