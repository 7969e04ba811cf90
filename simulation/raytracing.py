# raytracing.py
import math
import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from functools import partial

import pandas as pd
from tqdm import tqdm

from simulation.blackhole import Point, RayTrace
from simulation.utils import lerp, ray_parameter, polar_components, polar_to_point

# ── integration parameters ───────────────────────────────────────────────
MAX_STEPS = 12000        # RK4 steps per ray
D_PHI = 0.01             # angular step (rad), sign follows the ray's sense of rotation
EMIT_EVERY = 4           # keep every 4th step → ≤ 3000 points per ray
HORIZON_MARGIN = 1.01    # start radius is clamped to just outside rs
TILT = 0.1               # per-ray initial direction tilt, fans the rays
MIN_IMPACT = 0.01        # floor on the impact parameter b

# ── viewport boundaries (NDC) ────────────────────────────────────────────
EXIT_X = 1.0             # right edge: ray is clamped here and ends
CLIP_Y = 1.2             # top/bottom margin, past the ±1 viewport
CLIP_X_LEFT = -1.5


def _geodesic_rhs(u, du, rs):
    """u'' + u = 1.5 rs u²  as a first-order system in (u, u')."""
    return du, -u + 1.5 * rs * u * u


def rk4_step(u, du, h, rs):
    """One classical Runge–Kutta step of the orbit equation in φ."""
    k1u, k1d = _geodesic_rhs(u, du, rs)
    k2u, k2d = _geodesic_rhs(u + 0.5 * h * k1u, du + 0.5 * h * k1d, rs)
    k3u, k3d = _geodesic_rhs(u + 0.5 * h * k2u, du + 0.5 * h * k2d, rs)
    k4u, k4d = _geodesic_rhs(u + h * k3u, du + h * k3d, rs)
    u_next = u + h / 6.0 * (k1u + 2.0 * k2u + 2.0 * k3u + k4u)
    du_next = du + h / 6.0 * (k1d + 2.0 * k2d + 2.0 * k3d + k4d)
    return u_next, du_next


def straight_ray(start):
    return RayTrace(points=(start, Point(EXIT_X, start.y)), steps=0, status='straight')


def bent_ray(start, lens, t, max_steps=MAX_STEPS):
    """
    Integrate a ray from *start* around an active lens.

    Works on u = 1/r as a function of the polar angle φ about the lens, so the
    path ends on one of: u leaving (0, ∞) (escaped), u ≥ 1/rs (captured),
    crossing x = 1 (exited, last point clamped onto the edge), leaving the
    clip margins (clipped), or running out of steps (exhausted).
    """
    rs = lens.rs
    assert rs > 0, f"active lens needs rs > 0, got {rs}"

    rel_x = start.x - lens.position.x
    rel_y = start.y - lens.position.y
    r = max(math.hypot(rel_x, rel_y), HORIZON_MARGIN * rs)
    phi = math.atan2(rel_y, rel_x)

    # mostly rightward, tilted a little per ray
    vx, vy = 1.0, (t - 0.5) * TILT
    norm = math.hypot(vx, vy)
    vx, vy = vx / norm, vy / norm
    v_r, v_phi = polar_components(vx, vy, phi)

    b = max(abs(r * v_phi), MIN_IMPACT)
    direction = -1.0 if v_phi < 0 else 1.0
    u = 1.0 / r
    du = -v_r / b * direction
    d_phi = D_PHI * direction

    points = [start]
    status = 'exhausted'
    steps = max_steps
    for step in range(max_steps):
        u, du = rk4_step(u, du, d_phi, rs)
        phi += d_phi

        if not (math.isfinite(u) and math.isfinite(du)) or u <= 0.0:
            status, steps = 'escaped', step + 1
            break
        if u >= 1.0 / rs:
            status, steps = 'captured', step + 1
            break
        pos = polar_to_point(lens.position, 1.0 / u, phi)
        if pos.x >= EXIT_X:
            points.append(Point(EXIT_X, pos.y))
            status, steps = 'exited', step + 1
            break
        if pos.y < -CLIP_Y or pos.y > CLIP_Y or pos.x < CLIP_X_LEFT:
            status, steps = 'clipped', step + 1
            break

        if step % EMIT_EVERY == 0:
            points.append(pos)

    return RayTrace(points=tuple(points), steps=steps, status=status)


def trace_ray(config, lens, i):
    """Generate ray *i* of the fan described by *config*."""
    t = ray_parameter(i, config.ray_count)
    start = Point(config.start_x, lerp(config.y_min, config.y_max, t))
    if not lens.active:
        return straight_ray(start)
    return bent_ray(start, lens, t)


def trace_rays(config, lens, workers=1, progress=False):
    """
    Regenerate every ray of the fan, in ray order.

    With workers > 1 the rays are spread over a process pool; the result list
    is only returned once every ray is done.
    """
    assert config.ray_count >= 1, f"ray_count must be >= 1, got {config.ray_count}"
    indices = range(config.ray_count)
    if workers is not None and workers > 1 and lens.active:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            traces = list(tqdm(executor.map(partial(trace_ray, config, lens), indices),
                               total=config.ray_count, desc="Tracing rays", unit="ray",
                               disable=not progress))
    else:
        traces = [trace_ray(config, lens, i)
                  for i in tqdm(indices, desc="Tracing rays", unit="ray", disable=not progress)]
    logging.debug(f"Traced {len(traces)} rays: {summarize_traces(traces)}")
    return traces


def compute_rays(config, lens, workers=1):
    """Return one path (tuple of Points) per ray; a full replacement every call."""
    return [trace.points for trace in trace_rays(config, lens, workers=workers)]


def summarize_traces(traces):
    return dict(Counter(trace.status for trace in traces))


def rays_to_frame(traces):
    """Flatten ray traces into one row per point, for CSV export."""
    rows = []
    for ridx, trace in enumerate(traces):
        for pidx, (px, py) in enumerate(trace.points):
            rows.append({'ray_id': ridx, 'point_idx': pidx, 'x': px, 'y': py,
                         'status': trace.status, 'steps': trace.steps})
    return pd.DataFrame(rows, columns=['ray_id', 'point_idx', 'x', 'y', 'status', 'steps'])
