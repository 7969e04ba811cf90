import math

import numpy as np
import pytest

from simulation.blackhole import Lens, Point, RaySetConfig
from simulation.raytracing import (
    MAX_STEPS, EMIT_EVERY, bent_ray, compute_rays, rays_to_frame, rk4_step,
    summarize_traces, trace_ray, trace_rays,
)

CENTER_LENS = Lens(position=Point(0.0, 0.0), rs=0.2, active=True)
MAX_POINTS = math.ceil(MAX_STEPS / EMIT_EVERY) + 2


def test_straight_rays_without_lens():
    config = RaySetConfig()
    rays = compute_rays(config, Lens())
    assert len(rays) == config.ray_count
    for i, path in enumerate(rays):
        y = config.y_min + (config.y_max - config.y_min) * i / (config.ray_count - 1)
        assert len(path) == 2
        assert path[0] == pytest.approx((config.start_x, y))
        assert path[1] == pytest.approx((1.0, y))


def test_inactive_lens_ignores_position_and_radius():
    config = RaySetConfig(ray_count=5)
    parked = Lens(position=Point(0.0, 0.0), rs=0.25, active=False)
    assert compute_rays(config, parked) == compute_rays(config, Lens())


def test_single_ray_sits_in_the_middle():
    rays = compute_rays(RaySetConfig(ray_count=1, y_min=-0.5, y_max=0.3), Lens())
    assert len(rays) == 1
    assert rays[0][0].y == pytest.approx(-0.1)


def test_start_y_strictly_increasing():
    for lens in (Lens(), CENTER_LENS):
        rays = compute_rays(RaySetConfig(ray_count=9), lens)
        start_ys = np.array([path[0].y for path in rays])
        assert np.all(np.diff(start_ys) > 0)


def test_middle_radial_ray_scenario():
    config = RaySetConfig(ray_count=3, y_min=-1.0, y_max=1.0, start_x=-1.0)
    trace = trace_ray(config, CENTER_LENS, 1)
    assert trace.points[0] == (-1.0, 0.0)
    assert trace.status in ('captured', 'exited')
    pts = np.array(trace.points)
    assert np.all(np.isfinite(pts))
    # every recorded point is still outside the horizon, i.e. 0 < u < 1/rs
    radii = np.hypot(pts[1:, 0], pts[1:, 1])
    assert np.all(radii > CENTER_LENS.rs)
    if trace.status == 'exited':
        assert trace.points[-1].x == 1.0


def test_head_on_ray_is_captured():
    trace = bent_ray(Point(-1.0, 0.0), CENTER_LENS, 0.5)
    assert trace.status == 'captured'
    assert trace.steps < 10


def test_capture_not_slower_closer_to_horizon():
    steps = []
    for x in (-0.9, -0.6, -0.4, -0.25, -0.21, -0.1):
        trace = bent_ray(Point(x, 0.0), CENTER_LENS, 0.5)
        assert trace.status == 'captured'
        steps.append(trace.steps)
    assert all(a >= b for a, b in zip(steps, steps[1:]))


def test_distant_ray_exits_right_edge():
    lens = Lens(position=Point(0.0, 0.0), rs=0.03, active=True)
    trace = bent_ray(Point(-0.98, 0.85), lens, 1.0)
    assert trace.status == 'exited'
    assert trace.points[-1].x == 1.0
    assert all(p.x < 1.0 for p in trace.points[:-1])
    # bent toward the lens compared with the straight tilted line
    assert trace.points[-1].y < 0.85 + 0.05 * 1.98


def test_step_budget_ends_path_quietly():
    lens = Lens(position=Point(0.0, 0.0), rs=0.03, active=True)
    trace = bent_ray(Point(-0.98, 0.85), lens, 1.0, max_steps=8)
    assert trace.status == 'exhausted'
    assert trace.steps == 8
    # start + steps 0 and 4
    assert len(trace.points) == 3


def test_paths_bounded_and_finite():
    config = RaySetConfig()
    for lens in (Lens(position=Point(0.0, 0.0), rs=0.1, active=True),
                 Lens(position=Point(0.3, -0.2), rs=0.25, active=True),
                 Lens(position=Point(-0.9, 0.8), rs=0.03, active=True)):
        for path in compute_rays(config, lens):
            assert 1 <= len(path) <= MAX_POINTS
            assert np.all(np.isfinite(np.array(path)))
            assert all(p.x <= 1.0 for p in path)


def test_deterministic():
    config = RaySetConfig()
    lens = Lens(position=Point(0.1, 0.05), rs=0.15, active=True)
    assert compute_rays(config, lens) == compute_rays(config, lens)


def test_process_pool_matches_serial():
    config = RaySetConfig(ray_count=5)
    serial = trace_rays(config, CENTER_LENS)
    pooled = trace_rays(config, CENTER_LENS, workers=2)
    assert pooled == serial


def test_rk4_step_without_lens_term_is_harmonic():
    # rs = 0 leaves u'' = -u, whose solution is cos φ
    u, du = 1.0, 0.0
    h = 0.01
    for _ in range(100):
        u, du = rk4_step(u, du, h, 0.0)
    assert u == pytest.approx(math.cos(1.0), abs=1e-9)
    assert du == pytest.approx(-math.sin(1.0), abs=1e-9)


def test_summary_and_frame():
    config = RaySetConfig(ray_count=4)
    traces = trace_rays(config, Lens())
    assert summarize_traces(traces) == {'straight': 4}
    df = rays_to_frame(traces)
    assert list(df.columns) == ['ray_id', 'point_idx', 'x', 'y', 'status', 'steps']
    assert len(df) == 8
    assert set(df['ray_id']) == {0, 1, 2, 3}
    assert (df.loc[df['point_idx'] == 1, 'x'] == 1.0).all()


def test_clipped_rays_stop_inside_margins():
    lens = Lens(position=Point(-0.9, 0.8), rs=0.03, active=True)
    traces = trace_rays(RaySetConfig(), lens)
    clipped = [trace for trace in traces if trace.status == 'clipped']
    assert clipped
    for trace in clipped:
        pts = np.array(trace.points)
        # the step that crossed the margin is never recorded
        assert np.all(np.abs(pts[:, 1]) <= 1.2)
        assert np.all(pts[:, 0] >= -1.5)
        assert np.all(pts[:, 0] < 1.0)


def test_outward_radial_ray_escapes():
    # starts right of the lens heading straight away: u drops by ~1 per step
    lens = Lens(position=Point(-1.0, 0.0), rs=0.03, active=True)
    trace = bent_ray(Point(-0.65, 0.0), lens, 0.5)
    assert trace.status == 'escaped'
    # u goes 2.86 → 1.86 → 0.86 → below zero on the third step
    assert trace.steps == 3
    # start plus step 0; nothing after the last positive u
    assert len(trace.points) == 2
    assert trace.points[0] == (-0.65, 0.0)
    last = trace.points[-1]
    assert np.isfinite(last.x) and np.isfinite(last.y)
    assert last.x == pytest.approx(-1.0 + 1.0 / 1.857, abs=0.01)
