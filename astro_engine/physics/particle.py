"""Particle records and the particle store that owns them."""

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np


Color = Tuple[int, int, int]
WHITE: Color = (255, 255, 255)


@dataclass
class Particle:
    """A single point mass.

    Identity-less: a particle is addressed by its index in a ParticleStore.
    """
    position: Tuple[float, float]
    velocity: Tuple[float, float] = (0.0, 0.0)
    mass: float = 1.0
    fixed: bool = False
    name: str = ""
    color: Color = WHITE

    def __post_init__(self):
        self.position = (float(self.position[0]), float(self.position[1]))
        self.velocity = (float(self.velocity[0]), float(self.velocity[1]))
        self.mass = float(self.mass)
        if not all(math.isfinite(v) for v in self.position + self.velocity):
            raise ValueError(f"Particle {self.name!r} has a non-finite position or velocity")
        if not math.isfinite(self.mass) or self.mass <= 0:
            raise ValueError(f"Particle {self.name!r} must have a positive mass, got {self.mass}")

    def kinetic_energy(self) -> float:
        vx, vy = self.velocity
        return 0.5 * self.mass * (vx * vx + vy * vy)


class ParticleStore:
    """Struct-of-arrays owner of all particle data.

    Arrays:
        positions: (n, 2) float64
        velocities: (n, 2) float64
        accelerations: (n, 2) float64, last combined dv/dt written by an integrator
        masses: (n,) float64
        fixed: (n,) bool

    Names and colors are presentation data carried alongside; the physics
    never reads them.
    """

    def __init__(
        self,
        positions=None,
        velocities=None,
        masses=None,
        fixed=None,
        names: Optional[List[str]] = None,
        colors: Optional[List[Color]] = None,
    ):
        self.positions = _as_vectors(positions)
        n = self.positions.shape[0]
        self.velocities = _as_vectors(velocities) if velocities is not None else np.zeros((n, 2))
        self.masses = (
            np.asarray(masses, dtype=np.float64).reshape(-1).copy()
            if masses is not None else np.ones(n)
        )
        self.fixed = (
            np.asarray(fixed, dtype=bool).reshape(-1).copy()
            if fixed is not None else np.zeros(n, dtype=bool)
        )
        self.accelerations = np.zeros((n, 2))
        self.names = list(names) if names is not None else [""] * n
        self.colors = list(colors) if colors is not None else [WHITE] * n

        if not (
            self.velocities.shape[0] == n
            and self.masses.shape[0] == n
            and self.fixed.shape[0] == n
            and len(self.names) == n
            and len(self.colors) == n
        ):
            raise ValueError("All particle arrays must have the same length")

    @classmethod
    def from_particles(cls, particles: Iterable[Particle]) -> "ParticleStore":
        particles = list(particles)
        return cls(
            positions=[p.position for p in particles],
            velocities=[p.velocity for p in particles],
            masses=[p.mass for p in particles],
            fixed=[p.fixed for p in particles],
            names=[p.name for p in particles],
            colors=[p.color for p in particles],
        )

    @classmethod
    def from_arrays(cls, positions, velocities, masses, fixed=None) -> "ParticleStore":
        store = cls(positions, velocities, masses, fixed)
        store.validate()
        return store

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __getitem__(self, index: int) -> Particle:
        return Particle(
            position=tuple(self.positions[index]),
            velocity=tuple(self.velocities[index]),
            mass=self.masses[index],
            fixed=bool(self.fixed[index]),
            name=self.names[index],
            color=self.colors[index],
        )

    def __iter__(self) -> Iterator[Particle]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return f"ParticleStore(n={len(self)}, fixed={int(self.fixed.sum())})"

    def add(self, particle: Particle) -> int:
        """Append a particle and return its index."""
        self.positions = np.vstack([self.positions, [particle.position]])
        self.velocities = np.vstack([self.velocities, [particle.velocity]])
        self.accelerations = np.vstack([self.accelerations, [[0.0, 0.0]]])
        self.masses = np.append(self.masses, particle.mass)
        self.fixed = np.append(self.fixed, particle.fixed)
        self.names.append(particle.name)
        self.colors.append(particle.color)
        return len(self) - 1

    def remove(self, index: int):
        """Remove one particle; later indices shift down by one."""
        if not -len(self) <= index < len(self):
            raise IndexError(f"Particle index {index} out of range for {len(self)} particles")
        self.positions = np.delete(self.positions, index, axis=0)
        self.velocities = np.delete(self.velocities, index, axis=0)
        self.accelerations = np.delete(self.accelerations, index, axis=0)
        self.masses = np.delete(self.masses, index)
        self.fixed = np.delete(self.fixed, index)
        del self.names[index]
        del self.colors[index]

    def clear(self):
        self.__init__()

    def snapshot(self, positions=None, velocities=None) -> "ParticleStore":
        """Return an independent copy, optionally with displaced state.

        Used to evaluate forces against hypothetical states without touching
        the live store.
        """
        return ParticleStore(
            positions=self.positions if positions is None else positions,
            velocities=self.velocities if velocities is None else velocities,
            masses=self.masses,
            fixed=self.fixed,
            names=self.names,
            colors=self.colors,
        )

    def validate(self):
        """Raise ValueError if the store holds data the physics cannot use."""
        if np.any(~np.isfinite(self.masses)) or np.any(self.masses <= 0):
            bad = int(np.flatnonzero(~(self.masses > 0) | ~np.isfinite(self.masses))[0])
            raise ValueError(
                f"Particle {bad} ({self.names[bad]!r}) must have a positive mass, "
                f"got {self.masses[bad]}"
            )
        if not np.all(np.isfinite(self.positions)) or not np.all(np.isfinite(self.velocities)):
            raise ValueError("Particle positions and velocities must be finite")

    @property
    def total_mass(self) -> float:
        return float(np.sum(self.masses))

    @property
    def movable(self) -> np.ndarray:
        """Boolean mask of particles an integrator may move."""
        return ~self.fixed


def _as_vectors(data: Optional[Sequence]) -> np.ndarray:
    if data is None:
        return np.zeros((0, 2))
    arr = np.array(data, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2))
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected an (n, 2) array of vectors, got shape {arr.shape}")
    return arr
