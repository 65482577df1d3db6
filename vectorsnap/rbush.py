"""R-tree over axis-aligned boxes, and a payload-keyed index built on it.

``RBush`` follows the classic R*-tree heuristics: inserts descend by least
enlargement, overflowing nodes split on the axis with the smallest total
margin at the index with the least overlap, and bulk loads build an
OMT-packed subtree that is merged into the existing tree by height.

``SpatialIndex`` maps opaque payloads to boxes so callers can remove entries
by payload identity instead of handling tree items themselves.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from .extent import EMPTY_EXTENT, Extent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Box:
    __slots__ = ("min_x", "min_y", "max_x", "max_y")

    def __init__(self, min_x: float, min_y: float, max_x: float, max_y: float) -> None:
        self.min_x = min_x
        self.min_y = min_y
        self.max_x = max_x
        self.max_y = max_y


class _Item(_Box):
    __slots__ = ("value",)

    def __init__(self, extent: Extent, value: Any) -> None:
        super().__init__(extent[0], extent[1], extent[2], extent[3])
        self.value = value


class _Node(_Box):
    __slots__ = ("children", "height", "leaf")

    def __init__(self, children: List[_Box]) -> None:
        super().__init__(math.inf, math.inf, -math.inf, -math.inf)
        self.children = children
        self.height = 1
        self.leaf = True


def _key_min_x(box: _Box) -> float:
    return box.min_x


def _key_min_y(box: _Box) -> float:
    return box.min_y


def _extend(a: _Box, b: _Box) -> _Box:
    a.min_x = min(a.min_x, b.min_x)
    a.min_y = min(a.min_y, b.min_y)
    a.max_x = max(a.max_x, b.max_x)
    a.max_y = max(a.max_y, b.max_y)
    return a


def _dist_bbox(node: _Node, k: int, p: int, dest: Optional[_Node] = None) -> _Node:
    if dest is None:
        dest = _Node([])
    dest.min_x = math.inf
    dest.min_y = math.inf
    dest.max_x = -math.inf
    dest.max_y = -math.inf
    for child in node.children[k:p]:
        _extend(dest, child)
    return dest


def _calc_bbox(node: _Node) -> None:
    _dist_bbox(node, 0, len(node.children), node)


def _area(box: _Box) -> float:
    return (box.max_x - box.min_x) * (box.max_y - box.min_y)


def _margin(box: _Box) -> float:
    return (box.max_x - box.min_x) + (box.max_y - box.min_y)


def _enlarged_area(a: _Box, b: _Box) -> float:
    return (max(b.max_x, a.max_x) - min(b.min_x, a.min_x)) * (
        max(b.max_y, a.max_y) - min(b.min_y, a.min_y)
    )


def _intersection_area(a: _Box, b: _Box) -> float:
    min_x = max(a.min_x, b.min_x)
    min_y = max(a.min_y, b.min_y)
    max_x = min(a.max_x, b.max_x)
    max_y = min(a.max_y, b.max_y)
    return max(0.0, max_x - min_x) * max(0.0, max_y - min_y)


def _contains(a: _Box, b: _Box) -> bool:
    return a.min_x <= b.min_x and a.min_y <= b.min_y and b.max_x <= a.max_x and b.max_y <= a.max_y


def _intersects(a: _Box, b: _Box) -> bool:
    return b.min_x <= a.max_x and b.min_y <= a.max_y and b.max_x >= a.min_x and b.max_y >= a.min_y


class RBush:
    """Dynamic R-tree storing ``_Item`` leaves."""

    def __init__(self, max_entries: int = 9) -> None:
        self._max_entries = max(4, max_entries)
        self._min_entries = max(2, math.ceil(self._max_entries * 0.4))
        self.clear()

    def clear(self) -> None:
        self._data = _Node([])

    @property
    def height(self) -> int:
        return self._data.height

    def extent(self) -> Extent:
        root = self._data
        if not root.children:
            return EMPTY_EXTENT
        return (root.min_x, root.min_y, root.max_x, root.max_y)

    def all(self) -> List[_Item]:
        return self._all(self._data, [])

    def _all(self, node: _Node, result: List[_Item]) -> List[_Item]:
        stack: List[_Node] = []
        current: Optional[_Node] = node
        while current is not None:
            if current.leaf:
                result.extend(current.children)  # type: ignore[arg-type]
            else:
                stack.extend(current.children)  # type: ignore[arg-type]
            current = stack.pop() if stack else None
        return result

    def search(self, bbox: _Box) -> List[_Item]:
        node: Optional[_Node] = self._data
        result: List[_Item] = []
        if not _intersects(bbox, node):
            return result
        stack: List[_Node] = []
        while node is not None:
            for child in node.children:
                if _intersects(bbox, child):
                    if node.leaf:
                        result.append(child)  # type: ignore[arg-type]
                    elif _contains(bbox, child):
                        self._all(child, result)  # type: ignore[arg-type]
                    else:
                        stack.append(child)  # type: ignore[arg-type]
            node = stack.pop() if stack else None
        return result

    def insert(self, item: _Item) -> None:
        self._insert(item, self._data.height - 1)

    def load(self, items: Sequence[_Item]) -> None:
        if not items:
            return
        if len(items) < self._min_entries:
            for item in items:
                self.insert(item)
            return

        node = self._build(list(items), 0, len(items) - 1, 0)

        if not self._data.children:
            self._data = node
        elif self._data.height == node.height:
            self._split_root(self._data, node)
        else:
            if self._data.height < node.height:
                self._data, node = node, self._data
            self._insert(node, self._data.height - node.height - 1)

    def remove(self, item: _Item) -> bool:
        """Remove ``item`` (by identity); returns ``True`` when found."""

        node: Optional[_Node] = self._data
        path: List[_Node] = []
        indexes: List[int] = []
        parent: Optional[_Node] = None
        i = 0
        going_up = False

        while node is not None or path:
            if node is None:
                node = path.pop()
                parent = path[-1] if path else None
                i = indexes.pop()
                going_up = True

            if node.leaf:
                for idx, child in enumerate(node.children):
                    if child is item:
                        del node.children[idx]
                        path.append(node)
                        self._condense(path)
                        return True

            if not going_up and not node.leaf and _contains(node, item):
                path.append(node)
                indexes.append(i)
                i = 0
                parent = node
                node = node.children[0]  # type: ignore[assignment]
            elif parent is not None:
                i += 1
                node = parent.children[i] if i < len(parent.children) else None  # type: ignore[assignment]
                going_up = False
            else:
                node = None
        return False

    def _build(self, items: List[_Box], left: int, right: int, height: int) -> _Node:
        n = right - left + 1
        m = self._max_entries

        if n <= m:
            node = _Node(items[left : right + 1])
            _calc_bbox(node)
            return node

        if not height:
            height = math.ceil(math.log(n) / math.log(m))
            m = math.ceil(n / m ** (height - 1))

        node = _Node([])
        node.leaf = False
        node.height = height

        n2 = math.ceil(n / m)
        n1 = n2 * math.ceil(math.sqrt(m))

        # Sorting a slice stands in for the partial multi-select of rbush.
        items[left : right + 1] = sorted(items[left : right + 1], key=_key_min_x)
        for i in range(left, right + 1, n1):
            right2 = min(i + n1 - 1, right)
            items[i : right2 + 1] = sorted(items[i : right2 + 1], key=_key_min_y)
            for j in range(i, right2 + 1, n2):
                right3 = min(j + n2 - 1, right2)
                node.children.append(self._build(items, j, right3, height - 1))

        _calc_bbox(node)
        return node

    def _choose_subtree(self, bbox: _Box, node: _Node, level: int, path: List[_Node]) -> _Node:
        while True:
            path.append(node)
            if node.leaf or len(path) - 1 == level:
                break

            min_area = math.inf
            min_enlargement = math.inf
            target: Optional[_Node] = None

            for child in node.children:
                area = _area(child)
                enlargement = _enlarged_area(bbox, child) - area
                if enlargement < min_enlargement:
                    min_enlargement = enlargement
                    min_area = area if area < min_area else min_area
                    target = child  # type: ignore[assignment]
                elif enlargement == min_enlargement and area < min_area:
                    min_area = area
                    target = child  # type: ignore[assignment]

            node = target if target is not None else node.children[0]  # type: ignore[assignment]
        return node

    def _insert(self, item: _Box, level: int) -> None:
        insert_path: List[_Node] = []
        node = self._choose_subtree(item, self._data, level, insert_path)
        node.children.append(item)
        _extend(node, item)

        while level >= 0:
            if len(insert_path[level].children) > self._max_entries:
                self._split(insert_path, level)
                level -= 1
            else:
                break

        for i in range(level, -1, -1):
            _extend(insert_path[i], item)

    def _split(self, insert_path: List[_Node], level: int) -> None:
        node = insert_path[level]
        total = len(node.children)
        m = self._min_entries

        self._choose_split_axis(node, m, total)
        split_index = self._choose_split_index(node, m, total)

        new_node = _Node(node.children[split_index:])
        del node.children[split_index:]
        new_node.height = node.height
        new_node.leaf = node.leaf

        _calc_bbox(node)
        _calc_bbox(new_node)

        if level:
            insert_path[level - 1].children.append(new_node)
        else:
            self._split_root(node, new_node)

    def _split_root(self, node: _Node, new_node: _Node) -> None:
        root = _Node([node, new_node])
        root.height = node.height + 1
        root.leaf = False
        _calc_bbox(root)
        self._data = root

    def _choose_split_index(self, node: _Node, m: int, total: int) -> int:
        index: Optional[int] = None
        min_overlap = math.inf
        min_area = math.inf

        for i in range(m, total - m + 1):
            bbox1 = _dist_bbox(node, 0, i)
            bbox2 = _dist_bbox(node, i, total)
            overlap = _intersection_area(bbox1, bbox2)
            area = _area(bbox1) + _area(bbox2)
            if overlap < min_overlap:
                min_overlap = overlap
                index = i
                min_area = area if area < min_area else min_area
            elif overlap == min_overlap and area < min_area:
                min_area = area
                index = i

        return index if index is not None else total - m

    def _choose_split_axis(self, node: _Node, m: int, total: int) -> None:
        x_margin = self._all_dist_margin(node, m, total, _key_min_x)
        y_margin = self._all_dist_margin(node, m, total, _key_min_y)
        # Leaves the children sorted by y; re-sort when x wins.
        if x_margin < y_margin:
            node.children.sort(key=_key_min_x)

    def _all_dist_margin(self, node: _Node, m: int, total: int, key: Callable[[_Box], float]) -> float:
        node.children.sort(key=key)
        left = _dist_bbox(node, 0, m)
        right = _dist_bbox(node, total - m, total)
        margin = _margin(left) + _margin(right)

        for i in range(m, total - m):
            _extend(left, node.children[i])
            margin += _margin(left)

        for i in range(total - m - 1, m - 1, -1):
            _extend(right, node.children[i])
            margin += _margin(right)

        return margin

    def _condense(self, path: List[_Node]) -> None:
        for i in range(len(path) - 1, -1, -1):
            if not path[i].children:
                if i > 0:
                    siblings = path[i - 1].children
                    for idx, sibling in enumerate(siblings):
                        if sibling is path[i]:
                            del siblings[idx]
                            break
                else:
                    self.clear()
            else:
                _calc_bbox(path[i])


def _to_box(extent: Extent) -> _Box:
    return _Box(extent[0], extent[1], extent[2], extent[3])


class SpatialIndex(Generic[T]):
    """Extent index over opaque payloads, removable by payload identity."""

    def __init__(self, max_entries: int = 9) -> None:
        self._rbush = RBush(max_entries)
        self._items: Dict[int, _Item] = {}

    def insert(self, extent: Extent, value: T) -> None:
        item = _Item(extent, value)
        self._rbush.insert(item)
        self._items[id(value)] = item

    def load(self, extents: Sequence[Extent], values: Sequence[T]) -> None:
        if len(extents) != len(values):
            raise ValueError("load requires one extent per value")
        items = [_Item(extent, value) for extent, value in zip(extents, values)]
        for item in items:
            self._items[id(item.value)] = item
        self._rbush.load(items)

    def remove(self, value: T) -> bool:
        item = self._items.pop(id(value), None)
        if item is None:
            return False
        removed = self._rbush.remove(item)
        if not removed:  # pragma: no cover - tree and map out of sync
            logger.warning("Spatial index entry missing from tree for %r", value)
        return removed

    def update(self, extent: Extent, value: T) -> None:
        item = self._items.get(id(value))
        if item is None:
            self.insert(extent, value)
            return
        if (item.min_x, item.min_y, item.max_x, item.max_y) != tuple(extent):
            self.remove(value)
            self.insert(extent, value)

    def get_all(self) -> List[T]:
        return [item.value for item in self._rbush.all()]

    def get_in_extent(self, extent: Extent) -> List[T]:
        return [item.value for item in self._rbush.search(_to_box(extent))]

    def for_each_in_extent(self, extent: Extent, callback: Callable[[T], Any]) -> Any:
        """Call ``callback`` per entry; stop early and return its first truthy result."""

        for value in self.get_in_extent(extent):
            result = callback(value)
            if result:
                return result
        return None

    def remove_where(self, extent: Extent, predicate: Callable[[T], bool]) -> List[T]:
        """Remove the entries within ``extent`` matching ``predicate``."""

        matched = [value for value in self.get_in_extent(extent) if predicate(value)]
        for idx in range(len(matched) - 1, -1, -1):
            self.remove(matched[idx])
        return matched

    def clear(self) -> None:
        self._rbush.clear()
        self._items.clear()

    def is_empty(self) -> bool:
        return not self._items

    def get_extent(self) -> Extent:
        return self._rbush.extent()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, value: object) -> bool:
        return id(value) in self._items


__all__ = ["RBush", "SpatialIndex"]
