#utils.py
import math
import numpy as np
from simulation.blackhole import Point

# -----------------------------------------------------------------------------
# Helper: pixel → normalized device coordinates
# -----------------------------------------------------------------------------
def to_ndc(pixel_x, pixel_y, drawable_width, drawable_height):
    """Map a pixel position (origin top-left, y down) to NDC (y up).

    The width/height must be the drawable surface size in physical pixels,
    not the logical window size, or HiDPI displays land off by the scale.
    """
    assert drawable_width > 0 and drawable_height > 0, \
        f"drawable size must be positive, got {drawable_width}x{drawable_height}"
    return Point(
        2.0 * pixel_x / drawable_width - 1.0,
        1.0 - 2.0 * pixel_y / drawable_height,
    )


def lerp(a, b, t):
    return a + (b - a) * t


def ray_parameter(i, ray_count):
    """Sweep parameter t in [0, 1] of ray i; a lone ray sits in the middle."""
    if ray_count == 1:
        return 0.5
    return i / (ray_count - 1)


# -----------------------------------------------------------------------------
# Helper: Cartesian vector → local polar (r̂, φ̂) components
# -----------------------------------------------------------------------------
def polar_components(vx, vy, phi):
    """Return (v_r, v_φ) of the vector (vx, vy) in the polar basis at angle φ.

        r̂ = ( cos φ, sin φ)
        φ̂ = (-sin φ, cos φ)
    """
    c, s = math.cos(phi), math.sin(phi)
    v_r = vx * c + vy * s
    v_phi = -vx * s + vy * c
    return v_r, v_phi


def polar_to_point(center, r, phi):
    """Cartesian point at radius r, angle φ around *center*."""
    return Point(center.x + r * math.cos(phi), center.y + r * math.sin(phi))


def charge_radius(held, charge_config):
    """Schwarzschild radius committed after holding the pointer *held* seconds."""
    rs = charge_config.rs_min + held * charge_config.rs_per_second
    return float(np.clip(rs, charge_config.rs_min, charge_config.rs_max))
