from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from geometry import Point, Rect
from kd_tree import PointSet
from logger import configure
from ordered_set import OrderedPointSet
from points_io import PointSourceError, points_to_frame, read_points


Index = Union[PointSet, OrderedPointSet]


@dataclass
class EvaluationParams:

    "Παράμετροι της αξιολόγησης (δεδομένα και queries)."
    n_points: int = 2000
    seed: int = 42
    n_queries: int = 50
    k: int = 10
    rect_size: float = 0.1
    coord_min: float = 0.0
    coord_max: float = 1.0
    points_file: Optional[str] = None
    dump: bool = False


def load_points(params: EvaluationParams) -> np.ndarray:
    "Φορτώνει σημεία από αρχείο ή φτιάχνει τυχαία με numpy."
    if params.points_file is not None:
        points = read_points(params.points_file)
        data = np.array([p.as_tuple() for p in points], dtype=float).reshape(-1, 2)
        print(f"[DATA] Loaded {len(data)} points from {params.points_file}")
        return data

    rng = np.random.default_rng(params.seed)
    data = rng.uniform(params.coord_min, params.coord_max, size=(params.n_points, 2))
    print(f"[DATA] Generated {len(data)} random points (seed={params.seed})")
    return data


def to_points(data: np.ndarray) -> List[Point]:
    return [Point(float(x), float(y)) for x, y in data]


def make_queries(params: EvaluationParams, data: np.ndarray) -> Tuple[List[Point], List[Rect]]:
    "Τυχαία σημεία ερωτήματος και ορθογώνια μέσα στην έκταση των δεδομένων."
    rng = np.random.default_rng(params.seed + 1)
    if len(data):
        lo = data.min(axis=0)
        hi = data.max(axis=0)
    else:
        lo = np.array([params.coord_min, params.coord_min])
        hi = np.array([params.coord_max, params.coord_max])

    centers = rng.uniform(lo, hi, size=(params.n_queries, 2))
    half = (hi - lo) * params.rect_size / 2.0

    query_points = [Point(float(x), float(y)) for x, y in centers]
    rects = [
        Rect(float(x - half[0]), float(y - half[1]), float(x + half[0]), float(y + half[1]))
        for x, y in centers
    ]
    return query_points, rects


#measure to build time + index
def build_index(factory: Callable[[], Index], points: Sequence[Point]) -> Tuple[Index, float]:
    t0 = time.perf_counter()
    index = factory()
    for p in points:
        index.put(p)
    t1 = time.perf_counter()
    return index, t1 - t0


def timed(fn: Callable, *args) -> Tuple[object, float]:
    t0 = time.perf_counter()
    result = fn(*args)
    t1 = time.perf_counter()
    return result, t1 - t0


def brute_force_range(data: np.ndarray, rect: Rect) -> List[int]:
    "Brute-force range query με numpy για σύγκριση."
    if len(data) == 0:
        return []
    mask = (
        (data[:, 0] >= rect.xmin) & (data[:, 0] <= rect.xmax)
        & (data[:, 1] >= rect.ymin) & (data[:, 1] <= rect.ymax)
    )
    return np.nonzero(mask)[0].tolist()


def brute_force_knn(data: np.ndarray, query_point: Point, k: int = 10) -> List[int]:

    "Απλή brute-force υλοποίηση kNN για σύγκριση με το 2D-tree."
    if len(data) == 0 or k <= 0:
        return []

    q = np.array(query_point.as_tuple(), dtype=float)
    d2 = np.sum((data - q) ** 2, axis=1)

    k = min(k, len(data))
    idx = np.argpartition(d2, k - 1)[:k]
    idx = idx[np.argsort(d2[idx])]
    return idx.tolist()


def brute_force_min_distance(data: np.ndarray, query_point: Point) -> float:
    q = np.array(query_point.as_tuple(), dtype=float)
    return float(np.sqrt(np.min(np.sum((data - q) ** 2, axis=1))))


def evaluate_indexes(
    params: EvaluationParams,
    data: np.ndarray,
) -> Tuple[Dict[str, Dict[str, float]], Dict[str, int]]:
    "Χτίζει και τα δύο indexes, μετρά χρόνους και ελέγχει ότι συμφωνούν."

    points = to_points(data)
    query_points, rects = make_queries(params, data)

    summary: Dict[str, Dict[str, float]] = {}
    results: Dict[str, Dict[str, list]] = {}

    for name, factory in (("2D-Tree", PointSet), ("Ordered-Set", OrderedPointSet)):
        index, build_time = build_index(factory, points)
        print(f"[EVAL] {name}: built {len(index)} points in {build_time:.4f} s")

        range_results, range_time = timed(lambda: [set(index.range(r)) for r in rects])
        nearest_results, nearest_time = timed(lambda: [index.nearest(q) for q in query_points])
        knn_results, knn_time = timed(lambda: [set(index.k_nearest(q, params.k)) for q in query_points])

        summary[name] = {
            "build": build_time,
            "range": range_time,
            "nearest": nearest_time,
            "knn": knn_time,
            "size": len(index),
        }
        results[name] = {"range": range_results, "nearest": nearest_results, "knn": knn_results}

    #brute force baseline (idia queries)
    _, bf_range_time = timed(lambda: [brute_force_range(data, r) for r in rects])
    _, bf_knn_time = timed(lambda: [brute_force_knn(data, q, params.k) for q in query_points])
    summary["Brute-force"] = {
        "build": 0.0,
        "range": bf_range_time,
        "nearest": float("nan"),
        "knn": bf_knn_time,
        "size": len(set(points)),
    }

    checks = cross_check(data, rects, query_points, results["2D-Tree"], results["Ordered-Set"])
    return summary, checks


def cross_check(
    data: np.ndarray,
    rects: List[Rect],
    query_points: List[Point],
    tree_results: Dict[str, list],
    ordered_results: Dict[str, list],
) -> Dict[str, int]:
    "Μετράει πόσες απαντήσεις διαφέρουν μεταξύ 2D-tree, baseline και brute force."

    mismatches = {"range": 0, "nearest": 0, "knn": 0, "brute_force": 0}

    for i, rect in enumerate(rects):
        if tree_results["range"][i] != ordered_results["range"][i]:
            mismatches["range"] += 1
        expected = {Point(float(data[j, 0]), float(data[j, 1])) for j in brute_force_range(data, rect)}
        if tree_results["range"][i] != expected:
            mismatches["brute_force"] += 1

    for i, q in enumerate(query_points):
        if tree_results["nearest"][i] != ordered_results["nearest"][i]:
            mismatches["nearest"] += 1
        if tree_results["knn"][i] != ordered_results["knn"][i]:
            mismatches["knn"] += 1

        found = tree_results["nearest"][i]
        if found is not None and not np.isclose(q.distance(found), brute_force_min_distance(data, q)):
            mismatches["brute_force"] += 1

    return mismatches


def print_summaries(summary: Dict[str, Dict[str, float]], checks: Dict[str, int], params: EvaluationParams) -> None:

    print("\n")
    print(f"INDEX PERFORMANCE (seconds, {params.n_queries} queries, k={params.k})")
    frame = pd.DataFrame(summary).T[["build", "range", "nearest", "knn", "size"]]
    frame["size"] = frame["size"].astype(int)
    print(frame.to_string(float_format=lambda v: f"{v:.4f}"))

    print("\n[CHECK] Mismatches")
    for name, count in checks.items():
        print(f"  {name:<12}: {count}")


def parse_args(argv: Optional[Sequence[str]] = None) -> EvaluationParams:
    parser = argparse.ArgumentParser(description="Evaluate the 2D-tree point index against the ordered-set baseline")

    defaults = EvaluationParams()
    parser.add_argument("--points", type=str, default=None,
                        help="file with whitespace separated x y pairs (random points if omitted)")
    parser.add_argument("--n", type=int, default=defaults.n_points, help="number of random points")
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--queries", type=int, default=defaults.n_queries)
    parser.add_argument("--k", type=int, default=defaults.k)
    parser.add_argument("--rect-size", type=float, default=defaults.rect_size,
                        help="query rectangle side as a fraction of the data extent")
    parser.add_argument("--dump", action="store_true", help="print the indexed points and exit")
    parser.add_argument("--debug", action="store_true")

    opt = parser.parse_args(argv)
    configure(debug=opt.debug)

    params = EvaluationParams(
        n_points=opt.n,
        seed=opt.seed,
        n_queries=opt.queries,
        k=opt.k,
        rect_size=opt.rect_size,
        points_file=opt.points,
        dump=opt.dump,
    )
    return params


#i main
def main(argv: Optional[Sequence[str]] = None) -> int:
    params = parse_args(argv)
    try:
        data = load_points(params)
    except PointSourceError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    if params.dump:
        tree = PointSet(to_points(data))
        sys.stdout.write(str(tree))
        return 0

    summary, checks = evaluate_indexes(params, data)
    print_summaries(summary, checks, params)

    sample = points_to_frame(PointSet(to_points(data[:5])))
    print("\n[DATA] First points in 2D-tree order")
    print(sample)

    return 1 if any(checks.values()) else 0


if __name__ == "__main__":
    sys.exit(main())
