"""Barnes-Hut quadtree over a particle snapshot.

Nodes live in an arena of flat lists addressed by integer index. The four
children of a node are allocated together, so a node only records the index
of its first child (EMPTY for a leaf). Particles are referenced by their index
in the snapshot passed to bind()/build(); the tree never copies or owns them.

A tree is a single-step artifact: build it, aggregate mass bottom-up, query it
read-only, throw it away.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


logger = logging.getLogger(__name__)

EMPTY = -1
ROOT = 0

# Quadrant order. y grows downward (screen space), so "north" is -y.
NE, NW, SE, SW = 0, 1, 2, 3
_QUADRANT_OFFSETS = ((1.0, -1.0), (-1.0, -1.0), (1.0, 1.0), (-1.0, 1.0))

# Past this depth a leaf chains extra particles instead of subdividing.
# Only coincident (or nearly coincident) particles ever get this deep.
MAX_DEPTH = 48


@dataclass(frozen=True)
class Boundary:
    """Axis-aligned square region."""
    center: Tuple[float, float]
    half_size: float

    def __post_init__(self):
        object.__setattr__(self, "center", (float(self.center[0]), float(self.center[1])))
        object.__setattr__(self, "half_size", float(self.half_size))

    @property
    def size(self) -> float:
        """Full side length."""
        return 2.0 * self.half_size

    def contains(self, point) -> bool:
        """Inclusive containment test."""
        cx, cy = self.center
        h = self.half_size
        return cx - h <= point[0] <= cx + h and cy - h <= point[1] <= cy + h

    def intersects(self, other: "Boundary") -> bool:
        cx, cy = self.center
        ox, oy = other.center
        h, oh = self.half_size, other.half_size
        return not (
            ox - oh > cx + h
            or ox + oh < cx - h
            or oy - oh > cy + h
            or oy + oh < cy - h
        )

    def quadrant(self, q: int) -> "Boundary":
        """Child boundary for quadrant q (NE, NW, SE, SW)."""
        h = self.half_size * 0.5
        dx, dy = _QUADRANT_OFFSETS[q]
        return Boundary((self.center[0] + dx * h, self.center[1] + dy * h), h)


class QuadTree:
    """Quadtree with cached total mass and center of mass per node.

    Usage:
        tree = QuadTree(Boundary((0.0, 0.0), 100.0))
        tree.build(positions, masses)
        fx, fy = tree.compute_force(i, theta=0.5, G=1.0, softening=0.1)
    """

    def __init__(self, boundary: Boundary):
        if boundary.half_size <= 0:
            raise ValueError(f"Root boundary needs a positive half size, got {boundary.half_size}")
        self.boundary = boundary
        self._points: List[List[float]] = []
        self._masses: List[float] = []
        self._next: List[int] = []
        self._reset_nodes()

    def _reset_nodes(self):
        self._boundaries: List[Boundary] = [self.boundary]
        self._first_child: List[int] = [EMPTY]
        self._particle: List[int] = [EMPTY]
        self._depth: List[int] = [0]
        self._mass: List[float] = [0.0]
        self._com_x: List[float] = [self.boundary.center[0]]
        self._com_y: List[float] = [self.boundary.center[1]]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def bind(self, positions, masses):
        """Attach a particle snapshot and reset the tree to a single empty leaf."""
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64).reshape(-1)
        if positions.shape[0] != masses.shape[0]:
            raise ValueError(
                f"Got {positions.shape[0]} positions but {masses.shape[0]} masses"
            )
        self._points = positions[:, :2].tolist() if positions.size else []
        self._masses = masses.tolist()
        self._next = [EMPTY] * len(self._points)
        self._reset_nodes()

    def build(self, positions, masses) -> int:
        """Insert every particle into a fresh tree and aggregate mass.

        Returns:
            Number of particles actually inserted.
        """
        self.bind(positions, masses)
        inserted = 0
        for i in range(len(self._points)):
            if self.insert(i):
                inserted += 1
        dropped = len(self._points) - inserted
        if dropped:
            logger.warning(
                "%d of %d particles lie outside the root boundary %s and were skipped",
                dropped, len(self._points), self.boundary,
            )
        self.update_center_of_mass()
        logger.debug("Built quadtree: %d particles, %d nodes", inserted, self.node_count)
        return inserted

    def insert(self, index: int) -> bool:
        """Insert snapshot particle `index`. Returns False if it is outside the root."""
        x, y = self._points[index]
        if not self._boundaries[ROOT].contains((x, y)):
            return False

        node = ROOT
        while True:
            first = self._first_child[node]
            if first == EMPTY:
                head = self._particle[node]
                if head == EMPTY:
                    self._particle[node] = index
                    return True
                if self._depth[node] >= MAX_DEPTH:
                    self._next[index] = head
                    self._particle[node] = index
                    return True
                first = self._subdivide(node)
            node = self._child_containing(node, first, x, y)

    def _subdivide(self, node: int) -> int:
        """Split a full leaf into four children and push its particle down."""
        first = len(self._boundaries)
        parent = self._boundaries[node]
        depth = self._depth[node] + 1
        for q in (NE, NW, SE, SW):
            child = parent.quadrant(q)
            self._boundaries.append(child)
            self._first_child.append(EMPTY)
            self._particle.append(EMPTY)
            self._depth.append(depth)
            self._mass.append(0.0)
            self._com_x.append(child.center[0])
            self._com_y.append(child.center[1])
        self._first_child[node] = first

        held = self._particle[node]
        self._particle[node] = EMPTY
        x, y = self._points[held]
        self._particle[self._child_containing(node, first, x, y)] = held
        return first

    def _child_containing(self, node: int, first: int, x: float, y: float) -> int:
        """First child, in NE/NW/SE/SW order, whose boundary holds (x, y).

        The caller guarantees (x, y) is inside `node`. If rounding leaves the
        point in a sliver between child boundaries, fall back to the side of
        the parent center it lies on so the particle is never lost.
        """
        for child in range(first, first + 4):
            if self._boundaries[child].contains((x, y)):
                return child
        cx, cy = self._boundaries[node].center
        q = (NE if x >= cx else NW) + (2 if y >= cy else 0)
        return first + q

    def update_center_of_mass(self):
        """Recompute total mass and center of mass for every node, bottom-up.

        Children are always allocated after their parent, so walking the arena
        backwards visits every child before its parent.
        """
        points = self._points
        masses = self._masses
        for node in range(len(self._boundaries) - 1, -1, -1):
            total = 0.0
            mx = 0.0
            my = 0.0
            first = self._first_child[node]
            if first == EMPTY:
                p = self._particle[node]
                while p != EMPTY:
                    m = masses[p]
                    total += m
                    mx += m * points[p][0]
                    my += m * points[p][1]
                    p = self._next[p]
            else:
                for child in range(first, first + 4):
                    cm = self._mass[child]
                    if cm > 0:
                        total += cm
                        mx += cm * self._com_x[child]
                        my += cm * self._com_y[child]
            self._mass[node] = total
            if total > 0:
                self._com_x[node] = mx / total
                self._com_y[node] = my / total
            else:
                self._com_x[node], self._com_y[node] = self._boundaries[node].center

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def compute_force(
        self,
        index: int,
        theta: float,
        G: float,
        softening: float,
    ) -> Tuple[float, float]:
        """Net force on snapshot particle `index` from every other particle.

        Internal nodes with size / distance < theta that do not contain the
        query particle are treated as a single mass at their center of mass.
        Distances are Plummer-softened:
        d = sqrt(|dr|^2 + softening^2), force = G m_i m_j dr / d^3.
        """
        px, py = self._points[index]
        gm = G * self._masses[index]
        eps2 = softening * softening
        points = self._points
        masses = self._masses
        fx = 0.0
        fy = 0.0

        stack = [ROOT]
        while stack:
            node = stack.pop()
            node_mass = self._mass[node]
            if node_mass == 0.0:
                continue
            first = self._first_child[node]
            if first == EMPTY:
                p = self._particle[node]
                while p != EMPTY:
                    if p != index:
                        dx = points[p][0] - px
                        dy = points[p][1] - py
                        r2 = dx * dx + dy * dy + eps2
                        if r2 > 0.0:
                            f = gm * masses[p] / (r2 * math.sqrt(r2))
                            fx += f * dx
                            fy += f * dy
                    p = self._next[p]
                continue

            dx = self._com_x[node] - px
            dy = self._com_y[node] - py
            r2 = dx * dx + dy * dy + eps2
            d = math.sqrt(r2)
            boundary = self._boundaries[node]
            # A node holding the query particle is always opened so its own
            # mass never leaks into an aggregate.
            if d > 0.0 and boundary.size / d < theta and not boundary.contains((px, py)):
                f = gm * node_mass / (r2 * d)
                fx += f * dx
                fy += f * dy
            else:
                # Reversed so children pop in NE, NW, SE, SW order.
                stack.extend(range(first + 3, first - 1, -1))
        return fx, fy

    def query(self, region: Boundary) -> List[int]:
        """Indices of particles inside `region`."""
        found = []
        stack = [ROOT]
        while stack:
            node = stack.pop()
            if self._mass[node] == 0.0 or not self._boundaries[node].intersects(region):
                continue
            first = self._first_child[node]
            if first == EMPTY:
                p = self._particle[node]
                while p != EMPTY:
                    if region.contains(self._points[p]):
                        found.append(p)
                    p = self._next[p]
            else:
                stack.extend(range(first, first + 4))
        return sorted(found)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self._boundaries)

    @property
    def total_mass(self) -> float:
        return self._mass[ROOT]

    @property
    def center_of_mass(self) -> Tuple[float, float]:
        return self._com_x[ROOT], self._com_y[ROOT]

    def is_leaf(self, node: int = ROOT) -> bool:
        return self._first_child[node] == EMPTY

    def children(self, node: int = ROOT) -> Tuple[int, ...]:
        first = self._first_child[node]
        if first == EMPTY:
            return ()
        return tuple(range(first, first + 4))

    def node_boundary(self, node: int = ROOT) -> Boundary:
        return self._boundaries[node]

    def node_mass(self, node: int = ROOT) -> float:
        return self._mass[node]

    def node_center_of_mass(self, node: int = ROOT) -> Tuple[float, float]:
        return self._com_x[node], self._com_y[node]

    def particles_in(self, node: int) -> List[int]:
        """Particle indices held directly by a leaf (empty for internal nodes)."""
        held = []
        p = self._particle[node]
        while p != EMPTY:
            held.append(p)
            p = self._next[p]
        return held

    def boundaries(self) -> List[Boundary]:
        """Every node's boundary, root first."""
        return list(self._boundaries)
