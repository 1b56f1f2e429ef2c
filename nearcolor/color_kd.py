from __future__ import annotations

import math
from typing import Iterable
from typing import Iterator
from typing import NamedTuple
from typing import Sequence


class EmptyInputError(ValueError):
    pass


class MalformedCoordinateError(ValueError):
    pass


class Point(NamedTuple):
    l: float  # noqa: E741
    a: float
    b: float
    label: str

    def distance(self, other: Point) -> float:
        return math.sqrt(_square_distance(self, other))

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self[:3])


def _square_distance(p1: Point, p2: Point) -> float:
    dl, da, db = p1.l - p2.l, p1.a - p2.a, p1.b - p2.b
    # huge finite coordinates square to inf
    return dl * dl + da * da + db * db


def _check_finite(point: Point) -> None:
    if not point.is_finite():
        raise MalformedCoordinateError(
            f'non-finite coordinate for {point.label!r}: '
            f'({point.l}, {point.a}, {point.b})',
        )


class _KD(NamedTuple):
    point: Point
    left: _KD | None
    right: _KD | None


def _build(points: list[Point], lo: int, hi: int, depth: int) -> _KD | None:
    if lo >= hi:
        return None

    axis = depth % 3
    # list.sort is stable, equal values keep their input order
    points[lo:hi] = sorted(points[lo:hi], key=lambda p: p[axis])
    pivot = lo + (hi - lo) // 2

    return _KD(
        points[pivot],
        _build(points, lo, pivot, depth=depth + 1),
        _build(points, pivot + 1, hi, depth=depth + 1),
    )


def _from_preorder(points: Sequence[Point], start: int, n: int) -> _KD | None:
    if n == 0:
        return None

    # a median split always puts n // 2 points on the left
    n_left = n // 2
    return _KD(
        points[start],
        _from_preorder(points, start + 1, n_left),
        _from_preorder(points, start + 1 + n_left, n - n_left - 1),
    )


class KD:
    """A static 3-d tree over L*a*b* points, split on L, a, b by depth."""

    def __init__(self, root: _KD, size: int) -> None:
        self.root = root
        self.size = size

    def __repr__(self) -> str:
        return f'{type(self).__name__}(size={self.size})'

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Point]:
        """preorder: node, then left subtree, then right subtree"""
        stack = [self.root]
        while stack:
            kd = stack.pop()
            yield kd.point
            if kd.right is not None:
                stack.append(kd.right)
            if kd.left is not None:
                stack.append(kd.left)

    @classmethod
    def build(cls, points: Iterable[Point]) -> KD:
        arena = list(points)
        if not arena:
            raise EmptyInputError('cannot build an index from zero points')
        for point in arena:
            _check_finite(point)

        root = _build(arena, 0, len(arena), depth=0)
        assert root is not None
        return cls(root, len(arena))

    @classmethod
    def from_preorder(cls, points: Sequence[Point]) -> KD:
        """rebuild the exact tree produced by `build` from its preorder
        export (`list(kd)`) without sorting again.
        """
        if not points:
            raise EmptyInputError('cannot build an index from zero points')
        for point in points:
            _check_finite(point)

        root = _from_preorder(points, 0, len(points))
        assert root is not None
        return cls(root, len(points))

    def nearest(self, query: Point) -> Point:
        _check_finite(query)

        best = self.root.point
        dist = math.inf

        def _search(kd: _KD | None, *, depth: int) -> None:
            nonlocal best
            nonlocal dist

            if kd is None:
                return

            cand_dist = _square_distance(query, kd.point)
            if cand_dist < dist:
                best, dist = kd.point, cand_dist

            axis = depth % 3
            diff = query[axis] - kd.point[axis]
            if diff > 0:
                _search(kd.right, depth=depth + 1)
                if diff * diff < dist:
                    _search(kd.left, depth=depth + 1)
            else:
                _search(kd.left, depth=depth + 1)
                if diff * diff < dist:
                    _search(kd.right, depth=depth + 1)

        _search(self.root, depth=0)
        return best


def nearest_brute(query: Point, points: Iterable[Point]) -> Point:
    _check_finite(query)

    points_iter = iter(points)
    best = next(points_iter, None)
    if best is None:
        raise EmptyInputError('cannot search zero points')

    dist = _square_distance(query, best)
    for point in points_iter:
        cand_dist = _square_distance(query, point)
        if cand_dist < dist:
            best, dist = point, cand_dist
    return best
