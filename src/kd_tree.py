from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple, Union
import heapq

from geometry import Point, Rect
from logger import logger
from points_io import format_points, read_points


@dataclass
class KDNode:
    "Κόμβος του 2D-tree, αποθηκευμένος στο arena του δέντρου."

    point: Point
    x_axis: bool                    #True: ta paidia xorizontai kata x, False: kata y
    size: int = 1                   #komvos + ipodentra
    left: Optional[int] = None      #index sto arena
    right: Optional[int] = None
    parent: Optional[int] = None    #mono gia traversal


class PointSet:
    "Δυναμικό 2D-tree με εναλλασσόμενο άξονα ανά βάθος, χωρίς εξισορρόπηση."

    def __init__(self, points: Optional[Iterable[Point]] = None):
        "Αρχικοποιεί το δέντρο και εισάγει τα points με τη σειρά που δίνονται."

        self._nodes: List[KDNode] = []
        self.root: Optional[int] = None

        if points is not None:
            for p in points:
                self.put(p)

    @classmethod
    def from_file(cls, source: Union[str, Path, TextIO, None]) -> "PointSet":
        "Φτιάχνει δέντρο από αρχείο κειμένου με ζεύγη αριθμών."
        point_set = cls(read_points(source))
        logger.debug("kd-tree loaded %d points from %r", len(point_set), source)
        return point_set

    def copy(self) -> "PointSet":
        return type(self)(iter(self))

    __copy__ = copy

    def is_empty(self) -> bool:
        "Επιστρέφει True αν το δέντρο είναι άδειο."
        return self.root is None

    def __len__(self) -> int:
        "Επιστρέφει πόσα σημεία περιέχει το δέντρο."
        return self._size(self.root)

    def _size(self, index: Optional[int]) -> int:
        if index is None:
            return 0
        return self._nodes[index].size

    def node(self, index: int) -> KDNode:
        return self._nodes[index]

    @staticmethod
    def _goes_left(point: Point, node: KDNode) -> bool:
        if node.x_axis:
            return point < node.point
        return point.y_before(node.point)

    #insertion
    def put(self, point: Point) -> None:
        "Εισάγει ένα σημείο, αν δεν υπάρχει ήδη."
        if point.has_nan():
            raise ValueError(f"cannot index a point with NaN coordinates: {point}")

        if self.root is None:
            self._nodes.append(KDNode(point=point, x_axis=True))
            self.root = len(self._nodes) - 1
            return

        current = self.root
        while True:
            node = self._nodes[current]
            if point == node.point:
                #idio simeio, tipota na kanoume
                return

            go_left = self._goes_left(point, node)
            child = node.left if go_left else node.right
            if child is None:
                self._nodes.append(KDNode(point=point, x_axis=not node.x_axis, parent=current))
                child = len(self._nodes) - 1
                if go_left:
                    node.left = child
                else:
                    node.right = child
                break
            current = child

        #enimerosi size kai parent pros ta pano
        up: Optional[int] = current
        while up is not None:
            self._update_node(up)
            up = self._nodes[up].parent

    def _update_node(self, index: int) -> None:
        node = self._nodes[index]
        node.size = 1 + self._size(node.left) + self._size(node.right)
        for child in (node.left, node.right):
            if child is not None:
                self._nodes[child].parent = index

    def contains(self, point: Point) -> bool:
        "Επιστρέφει True αν το σημείο υπάρχει στο δέντρο."
        current = self.root
        while current is not None:
            node = self._nodes[current]
            if point == node.point:
                return True
            current = node.left if self._goes_left(point, node) else node.right
        return False

    def __contains__(self, point: object) -> bool:
        return isinstance(point, Point) and self.contains(point)

    #traversal me parent links
    def _leftmost(self, index: Optional[int]) -> Optional[int]:
        if index is None:
            return None
        while self._nodes[index].left is not None:
            index = self._nodes[index].left
        return index

    def begin(self) -> Optional[int]:
        "Ο πρώτος κόμβος της δομικής διάσχισης (ο πιο αριστερός)."
        return self._leftmost(self.root)

    def successor(self, index: int) -> Optional[int]:
        "Ο επόμενος κόμβος στη διάσχιση, None στο τέλος."
        node = self._nodes[index]
        if node.right is not None:
            return self._leftmost(node.right)

        current = index
        parent = node.parent
        while parent is not None and self._nodes[parent].right == current:
            current = parent
            parent = self._nodes[parent].parent
        return parent

    def __iter__(self) -> Iterator[Point]:
        current = self.begin()
        while current is not None:
            yield self._nodes[current].point
            current = self.successor(current)

    def __str__(self) -> str:
        return format_points(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self)})"

    #range query
    def range(self, rect: Rect) -> "PointSet":
        "Επιστρέφει νέο δέντρο με τα σημεία μέσα στο rect (κλειστά όρια)."

        result = type(self)()
        if self.root is None:
            return result

        #stack me (node, periochi pou kaliptei to ipodentro)
        stack: List[Tuple[int, Rect]] = [(self.root, Rect.plane())]
        while stack:
            index, border = stack.pop()
            node = self._nodes[index]

            if rect.contains(node.point):
                result.put(node.point)

            #dexia prota sto stack gia na vgei to aristero proto
            for child, left in ((node.right, False), (node.left, True)):
                if child is None:
                    continue
                child_border = border.clip(node.point, node.x_axis, left)
                if rect.intersects(child_border):
                    stack.append((child, child_border))

        logger.debug("range %s matched %d of %d points", rect, len(result), len(self))
        return result

    # nearest neighbour
    def nearest(self, point: Point) -> Optional[Point]:
        "Επιστρέφει το κοντινότερο σημείο ή None αν το δέντρο είναι άδειο."
        if self.root is None:
            return None

        best: Optional[Tuple[float, Point]] = None

        #stack me (node, kato fragma apostasis gia to ipodentro)
        stack: List[Tuple[int, float]] = [(self.root, 0.0)]
        while stack:
            index, bound = stack.pop()
            if best is not None and bound > best[0]:
                #pruning, to ipodentro den mporei na exei kati kalitero
                continue

            node = self._nodes[index]
            candidate = (point.distance(node.point), node.point)
            if best is None or candidate < best:
                best = candidate

            diff = point.coordinate(node.x_axis) - node.point.coordinate(node.x_axis)
            near = node.left if diff < 0 else node.right
            far = node.right if diff < 0 else node.left

            #to far mpainei proto gia na eksereunithei meta to near
            if far is not None:
                stack.append((far, max(bound, abs(diff))))
            if near is not None:
                stack.append((near, bound))

        return best[1]

    def k_nearest(self, point: Point, k: int) -> "PointSet":
        "Επιστρέφει νέο δέντρο με τους k κοντινότερους γείτονες του point."
        if k < 0:
            raise ValueError("k must be non-negative")

        result = type(self)()
        if k == 0:
            return result

        #max-heap me (-dist, -x, -y) gia na vgainei o xeiroteros
        best: List[Tuple[float, float, float, Point]] = []
        for p in self:
            item = (-point.distance(p), -p.x, -p.y, p)
            if len(best) < k:
                heapq.heappush(best, item)
            elif item > best[0]:
                heapq.heapreplace(best, item)

        for _, _, _, p in best:
            result.put(p)
        return result
