from types import SimpleNamespace

import matplotlib.pyplot as plt
import pytest
from matplotlib.backend_bases import MouseButton

from simulation.blackhole import RaySetConfig
from simulation.session import new_session
from visualization.viewer import LensViewer


@pytest.fixture
def viewer():
    v = LensViewer(new_session(RaySetConfig(ray_count=5), drawable_size=(800, 600)))
    v.fig.canvas.draw()
    yield v
    plt.close(v.fig)


def test_viewer_reads_drawable_size(viewer):
    assert viewer.drawable_size() == (800, 600)
    assert (viewer.session.drawable_width, viewer.session.drawable_height) == (800, 600)


def test_click_places_lens_at_cursor(viewer):
    # matplotlib y grows upward: 450 from the bottom is 150 from the top
    viewer.on_press(SimpleNamespace(button=MouseButton.LEFT, x=400, y=450, inaxes=viewer.ax))
    assert viewer.session.charge.charging
    viewer.update_frame(0)
    assert viewer.preview_patch.get_visible()
    viewer.on_release(SimpleNamespace(button=MouseButton.LEFT))
    lens = viewer.session.lens
    assert lens.active
    assert lens.position == pytest.approx((0.0, 0.5))
    assert viewer.lens_patch.get_visible()
    assert len(viewer.ray_lines.get_segments()) == 5
    viewer.update_frame(1)
    assert not viewer.preview_patch.get_visible()


def test_right_click_ignored(viewer):
    viewer.on_press(SimpleNamespace(button=MouseButton.RIGHT, x=400, y=300, inaxes=viewer.ax))
    assert not viewer.session.charge.charging


def test_space_resets_lens(viewer):
    viewer.on_press(SimpleNamespace(button=MouseButton.LEFT, x=100, y=100, inaxes=viewer.ax))
    viewer.on_release(SimpleNamespace(button=MouseButton.LEFT))
    viewer.on_key(SimpleNamespace(key=' '))
    assert not viewer.session.lens.active
    assert not viewer.lens_patch.get_visible()
    assert all(len(seg) == 2 for seg in viewer.ray_lines.get_segments())


def test_press_outside_axes_ignored(viewer):
    viewer.on_press(SimpleNamespace(button=MouseButton.LEFT, x=400, y=300, inaxes=None))
    assert not viewer.session.charge.charging
