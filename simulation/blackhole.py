#blackhole.py
from dataclasses import dataclass
from typing import NamedTuple


class Point(NamedTuple):
    """A 2D point in normalized device coordinates (NDC)."""
    x: float
    y: float


@dataclass(frozen=True)
class Lens:
    """
    The single point-mass lens ("black hole") of the scene.
    position: NDC centre
    rs: Schwarzschild radius in NDC units (> 0)
    active: when False the ray generator ignores position and rs
    """
    position: Point = Point(100.0, 100.0)
    rs: float = 0.1
    active: bool = False


@dataclass(frozen=True)
class ChargeState:
    """
    Press-and-hold state between pointer press and release.
    start_time: seconds, same clock as the release event
    anchor: NDC position where the lens will be placed
    """
    charging: bool = False
    start_time: float = 0.0
    anchor: Point = Point(0.0, 0.0)


@dataclass(frozen=True)
class RaySetConfig:
    """Fan of horizontal rays entering from the left, evenly spaced in y."""
    ray_count: int = 27
    y_min: float = -0.85
    y_max: float = 0.85
    start_x: float = -0.98


@dataclass(frozen=True)
class ChargeConfig:
    """Schwarzschild radius growth while the pointer is held."""
    rs_min: float = 0.03
    rs_max: float = 0.25
    rs_per_second: float = 0.09


@dataclass(frozen=True)
class RayTrace:
    """
    One generated ray.
    points: the ray path, never empty
    steps: integration steps taken (0 for straight rays)
    status: 'straight', 'escaped', 'captured', 'exited', 'clipped' or 'exhausted'
    """
    points: tuple
    steps: int
    status: str
