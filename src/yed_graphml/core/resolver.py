"""
Resolution of relative coordinates into absolute drawing pane coordinates.

Nodes may be positioned relative to another node, and edges may chain their
waypoints relative to the previous point starting at the source anchor. This
module walks those chains. It only relies on the attributes of nodes and edges,
so it does not import the model classes.
"""

from typing import TYPE_CHECKING, Dict, List, Tuple

from yed_graphml.exceptions.reference import CyclicReferenceError

if TYPE_CHECKING:
    from yed_graphml.models.edge import Edge
    from yed_graphml.models.node import Node


Point = Tuple[float, float]


class CoordinateResolver:
    """Computes absolute node positions and absolute edge waypoints.

    Positions are recomputed on every call unless memoize is set. A memoizing
    resolver must only live for a single build pass, because node positions can
    change between builds; clear() drops everything remembered so far.
    """

    def __init__(self, memoize: bool = False):
        self.memoize = memoize
        self._positions: Dict[int, Point] = {}

    def clear(self) -> None:
        """Forget all memoized positions."""
        self._positions.clear()

    def check_cycle(self, node: "Node") -> int:
        """Walk the relative chain of a node and fail if it loops.

        Args:
            node: The node whose chain is checked

        Returns:
            Number of nodes in the chain above the given node

        Raises:
            CyclicReferenceError: If the walk revisits the node, or any node
                already seen on the way
        """
        visited = {id(node)}
        hops = 0
        current = node.relative
        while current is not None:
            hops += 1
            if current is node:
                raise CyclicReferenceError(
                    f"Loop detected: relative node found itself {hops} nodes later in hierarchy",
                    node.id,
                    hops,
                )
            if id(current) in visited:
                raise CyclicReferenceError(
                    f"Loop detected: relative chain enters a loop at node '{current.id}' after {hops} nodes",
                    node.id,
                    hops,
                )
            visited.add(id(current))
            current = current.relative
        return hops

    def absolute_position(self, node: "Node") -> Point:
        """Absolute (x, y) of a node's upper left corner.

        Raises:
            CyclicReferenceError: If the node's relative chain loops
        """
        self.check_cycle(node)
        if self.memoize and id(node) in self._positions:
            return self._positions[id(node)]

        chain: List["Node"] = []
        current = node
        while current is not None:
            if self.memoize and id(current) in self._positions:
                break
            chain.append(current)
            current = current.relative

        # accumulate from the outermost node down to the requested one
        x, y = self._positions[id(current)] if current is not None else (0.0, 0.0)
        for member in reversed(chain):
            x += member.x
            y += member.y
            if self.memoize:
                self._positions[id(member)] = (x, y)
        return x, y

    def absolute_x(self, node: "Node") -> float:
        return self.absolute_position(node)[0]

    def absolute_y(self, node: "Node") -> float:
        return self.absolute_position(node)[1]

    def absolute_center(self, node: "Node") -> Point:
        """Absolute center of the rectangle surrounding a node."""
        x, y = self.absolute_position(node)
        return x + 0.5 * node.width, y + 0.5 * node.height

    def waypoints(self, edge: "Edge") -> List[Point]:
        """Absolute waypoints of an edge, ordered from source to target.

        With relative waypoints every stored point is an offset from the
        previous absolute point. The first one is relative to the source
        node's center moved by the source anchor offset (sx, sy).
        """
        if not edge.relative_waypoints:
            return [(float(x), float(y)) for x, y in edge.waypoints]

        center_x, center_y = self.absolute_center(edge.source)
        previous = (center_x + edge.sx, center_y + edge.sy)
        points = []
        for dx, dy in edge.waypoints:
            previous = (previous[0] + dx, previous[1] + dy)
            points.append(previous)
        return points
