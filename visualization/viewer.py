import time
import logging
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.backend_bases import MouseButton

from simulation.session import (
    PointerPress, PointerRelease, ResetLens, Resize,
    handle_event, lens_circle, preview_circle,
)
from visualization.plot import (
    BACKGROUND, PREVIEW_COLOR, make_lens_circle, make_ray_collection,
    ray_segments, setup_ndc_axes,
)

FRAME_INTERVAL_MS = 16


class LensViewer:
    """
    Interactive window around a Session.

    Left press starts charging a lens at the cursor, release places it (held
    longer = bigger). Space removes the lens, Escape closes the window. Rays are
    only regenerated when the lens changes; the frame timer only redraws the
    charging preview.
    """

    def __init__(self, session, dpi=100, title="Black Hole Ray Bending"):
        self.session = session
        self.fig = plt.figure(figsize=(session.drawable_width / dpi, session.drawable_height / dpi), dpi=dpi)
        self.fig.patch.set_facecolor(BACKGROUND)
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(title)
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        setup_ndc_axes(self.ax)

        self.ray_lines = make_ray_collection(session.rays)
        self.ax.add_collection(self.ray_lines)
        self.lens_patch = make_lens_circle()
        self.lens_patch.set_visible(False)
        self.ax.add_patch(self.lens_patch)
        self.preview_patch = make_lens_circle(color=PREVIEW_COLOR, linestyle='--')
        self.preview_patch.set_visible(False)
        self.ax.add_patch(self.preview_patch)

        canvas = self.fig.canvas
        canvas.mpl_connect('button_press_event', self.on_press)
        canvas.mpl_connect('button_release_event', self.on_release)
        canvas.mpl_connect('key_press_event', self.on_key)
        canvas.mpl_connect('resize_event', self.on_resize)
        self.dispatch(Resize(*self.drawable_size()))
        self.animation = FuncAnimation(self.fig, self.update_frame, interval=FRAME_INTERVAL_MS,
                                       cache_frame_data=False)

    def drawable_size(self):
        # figure bbox is in physical (device) pixels, like the mouse events
        return max(int(round(self.fig.bbox.width)), 1), max(int(round(self.fig.bbox.height)), 1)

    def dispatch(self, event):
        before = self.session
        self.session = handle_event(self.session, event)
        if self.session.rays is not before.rays:
            self.ray_lines.set_segments(ray_segments(self.session.rays))
        self.update_lens()

    def update_lens(self):
        circle = lens_circle(self.session)
        if circle is None:
            self.lens_patch.set_visible(False)
        else:
            self.lens_patch.center, self.lens_patch.radius = circle
            self.lens_patch.set_visible(True)

    def update_frame(self, _frame):
        circle = preview_circle(self.session, time.perf_counter())
        if circle is None:
            self.preview_patch.set_visible(False)
        else:
            self.preview_patch.center, self.preview_patch.radius = circle
            self.preview_patch.set_visible(True)
        return self.ray_lines, self.lens_patch, self.preview_patch

    # ── matplotlib callbacks ────────────────────────────────────────────
    def on_press(self, event):
        if event.button != MouseButton.LEFT or event.inaxes is not self.ax:
            return
        _, height = self.drawable_size()
        # matplotlib measures y from the bottom of the canvas
        self.dispatch(PointerPress(event.x, height - event.y, time.perf_counter()))

    def on_release(self, event):
        if event.button != MouseButton.LEFT:
            return
        self.dispatch(PointerRelease(time.perf_counter()))

    def on_key(self, event):
        if event.key == ' ':
            self.dispatch(ResetLens())
        elif event.key == 'escape':
            plt.close(self.fig)

    def on_resize(self, event):
        self.dispatch(Resize(*self.drawable_size()))
        logging.debug(f"Drawable resized to {self.session.drawable_width}x{self.session.drawable_height}")

    def show(self):
        plt.show()
        return self.session
