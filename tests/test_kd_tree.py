import copy
import math

import pytest

from geometry import Point, Rect
from kd_tree import PointSet


SCENARIO = [Point(2, 3), Point(4, 2), Point(4, 5), Point(5, 3)]


def check_invariants(tree: PointSet) -> None:
    "Ελέγχει size, parent links και τον εναλλασσόμενο άξονα σε όλους τους κόμβους."
    if tree.root is None:
        assert len(tree) == 0
        return

    assert tree.node(tree.root).parent is None
    assert tree.node(tree.root).x_axis

    stack = [tree.root]
    seen = 0
    while stack:
        index = stack.pop()
        node = tree.node(index)
        seen += 1

        sizes = 0
        for child in (node.left, node.right):
            if child is None:
                continue
            child_node = tree.node(child)
            assert child_node.parent == index, f"broken parent link at {child_node.point}"
            assert child_node.x_axis != node.x_axis
            sizes += child_node.size
            stack.append(child)
        assert node.size == 1 + sizes, f"wrong size at {node.point}"

    assert seen == len(tree)


def subtree_points(tree: PointSet, index):
    if index is None:
        return []
    node = tree.node(index)
    return subtree_points(tree, node.left) + [node.point] + subtree_points(tree, node.right)


def test_scenario():
    tree = PointSet(SCENARIO)
    assert len(tree) == 4
    check_invariants(tree)

    found = tree.nearest(Point(0, 0))
    assert found == Point(2, 3)
    assert math.isclose(found.distance(Point(0, 0)), math.sqrt(13))

    in_rect = tree.range(Rect.from_corners(Point(3, 0), Point(5, 4)))
    assert set(in_rect) == {Point(4, 2), Point(5, 3)}

    knn = tree.k_nearest(Point(4, 3), 2)
    assert set(knn) == {Point(4, 2), Point(5, 3)}


def test_put_and_contains():
    tree = PointSet()
    assert tree.is_empty()
    assert len(tree) == 0

    for i, p in enumerate(SCENARIO, start=1):
        assert not tree.contains(p)
        tree.put(p)
        assert tree.contains(p)
        assert p in tree
        assert len(tree) == i
        check_invariants(tree)

    assert not tree.contains(Point(4, 3))
    assert Point(4, 3) not in tree
    assert (2, 3) not in tree
    assert not tree.is_empty()


def test_put_is_idempotent():
    tree = PointSet(SCENARIO)
    for p in SCENARIO:
        tree.put(p)
        tree.put(Point(float(p.x), float(p.y)))
    assert len(tree) == 4
    check_invariants(tree)


def test_alternating_axis_partition():
    rng_points = [Point((i * 37) % 23, (i * 11) % 17) for i in range(200)]
    tree = PointSet(rng_points)
    check_invariants(tree)
    assert len(tree) == len(set(rng_points))

    stack = [tree.root]
    while stack:
        index = stack.pop()
        node = tree.node(index)
        for p in subtree_points(tree, node.left):
            if node.x_axis:
                assert p < node.point
            else:
                assert p.y_before(node.point)
        for p in subtree_points(tree, node.right):
            if node.x_axis:
                assert not p < node.point
            else:
                assert not p.y_before(node.point)
        stack.extend(c for c in (node.left, node.right) if c is not None)


def test_structural_order_is_not_sorted():
    #to (1, 9) mpainei deksia tou (4, 1) giati o axonas ekei einai y
    points = [Point(5, 5), Point(4, 1), Point(1, 9)]
    tree = PointSet(points)
    assert list(tree) == [Point(4, 1), Point(1, 9), Point(5, 5)]
    assert list(tree) != sorted(points)


def test_iteration_matches_inorder_walk():
    points = [Point((i * 7) % 13, (i * 5) % 11) for i in range(60)]
    tree = PointSet(points)
    assert list(tree) == subtree_points(tree, tree.root)

    walked = []
    index = tree.begin()
    while index is not None:
        walked.append(tree.node(index).point)
        index = tree.successor(index)
    assert walked == list(tree)


def test_degenerate_insertion_order():
    #aukson seira: kathe neo simeio paei deksia, vathos = plithos
    n = 1500
    tree = PointSet(Point(i, i) for i in range(n))
    assert len(tree) == n
    assert tree.contains(Point(n - 1, n - 1))
    assert not tree.contains(Point(n, n))
    assert tree.nearest(Point(n + 10, n + 10)) == Point(n - 1, n - 1)
    assert list(tree) == [Point(i, i) for i in range(n)]
    assert len(tree.range(Rect(10, 10, 19.5, 100))) == 10


def test_empty_queries():
    tree = PointSet()
    assert tree.nearest(Point(0, 0)) is None
    assert len(tree.range(Rect(-1, -1, 1, 1))) == 0
    assert len(tree.k_nearest(Point(0, 0), 3)) == 0
    assert list(tree) == []
    assert tree.begin() is None
    assert str(tree) == ""


def test_range_boundaries():
    tree = PointSet(SCENARIO)
    assert set(tree.range(Rect(2, 2, 5, 5))) == set(SCENARIO)
    assert set(tree.range(Rect(4, 2, 4, 5))) == {Point(4, 2), Point(4, 5)}
    assert set(tree.range(Rect(4, 3, 4, 3))) == set()
    assert set(tree.range(Rect(-10, -10, 1.9, 100))) == set()


def test_range_returns_detached_point_set():
    tree = PointSet(SCENARIO)
    result = tree.range(Rect(0, 0, 10, 10))
    assert isinstance(result, PointSet)
    check_invariants(result)

    tree.put(Point(1, 1))
    assert len(result) == 4
    assert Point(1, 1) not in result

    rebuilt = PointSet(result)
    assert set(rebuilt) == set(SCENARIO)


def test_nearest_ties_prefer_smallest_point():
    tree = PointSet([Point(4, 3), Point(2, 3)])
    assert tree.nearest(Point(3, 3)) == Point(2, 3)

    tree = PointSet([Point(3, 4), Point(3, 2), Point(4, 3), Point(2, 3)])
    assert tree.nearest(Point(3, 3)) == Point(2, 3)


def test_nearest_exact_match():
    tree = PointSet(SCENARIO)
    for p in SCENARIO:
        assert tree.nearest(p) == p


def test_k_nearest_limits():
    tree = PointSet(SCENARIO)
    assert len(tree.k_nearest(Point(0, 0), 0)) == 0
    assert set(tree.k_nearest(Point(0, 0), 4)) == set(SCENARIO)
    assert set(tree.k_nearest(Point(0, 0), 100)) == set(SCENARIO)

    #isopalia stin apostasi 2: kerdizei to mikrotero (2, 3)
    assert set(tree.k_nearest(Point(4, 3), 3)) == {Point(4, 2), Point(5, 3), Point(2, 3)}

    with pytest.raises(ValueError):
        tree.k_nearest(Point(0, 0), -1)


def test_copy_is_independent():
    tree = PointSet(SCENARIO)
    clone = tree.copy()
    assert list(clone) == list(tree)

    clone.put(Point(9, 9))
    assert len(tree) == 4
    assert len(clone) == 5

    assert list(copy.copy(tree)) == list(tree)


def test_str_and_repr():
    tree = PointSet(SCENARIO)
    assert str(tree) == "2.0 3.0\n4.0 2.0\n4.0 5.0\n5.0 3.0\n"
    assert repr(tree) == "PointSet(size=4)"


def test_put_rejects_nan_points():
    tree = PointSet(SCENARIO)
    with pytest.raises(ValueError):
        tree.put(Point(float("nan"), 1.0))
    with pytest.raises(ValueError):
        PointSet([Point(1.0, float("nan"))])
    assert len(tree) == 4
    check_invariants(tree)

    #apeira einai isa me ton eauto tous, ara epitrepontai
    tree.put(Point(math.inf, 0.0))
    tree.put(Point(math.inf, 0.0))
    assert len(tree) == 5
    assert Point(math.inf, 0.0) in tree
