# session.py
import logging
from dataclasses import dataclass, field, replace

from simulation.blackhole import Lens, ChargeState, RaySetConfig, ChargeConfig
from simulation.raytracing import compute_rays
from simulation.utils import to_ndc, charge_radius


@dataclass(frozen=True)
class Session:
    """
    Everything the viewer mutates: the lens, the charge in progress, the
    drawable size used for pixel → NDC, and the rays of the current lens.
    Handlers never modify a session; they return a new one.
    """
    config: RaySetConfig = field(default_factory=RaySetConfig)
    charge_config: ChargeConfig = field(default_factory=ChargeConfig)
    drawable_width: int = 800
    drawable_height: int = 600
    lens: Lens = field(default_factory=Lens)
    charge: ChargeState = field(default_factory=ChargeState)
    rays: tuple = ()
    workers: int = 1


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PointerPress:
    pixel_x: float
    pixel_y: float
    time: float


@dataclass(frozen=True)
class PointerRelease:
    time: float


@dataclass(frozen=True)
class ResetLens:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


def recompute(session):
    rays = compute_rays(session.config, session.lens, workers=session.workers)
    return replace(session, rays=tuple(rays))


def new_session(config=None, charge_config=None, drawable_size=(800, 600), workers=1):
    """Initial session: no lens, straight rays already computed."""
    session = Session(
        config=config or RaySetConfig(),
        charge_config=charge_config or ChargeConfig(),
        drawable_width=drawable_size[0],
        drawable_height=drawable_size[1],
        workers=workers,
    )
    return recompute(session)


def on_pointer_press(session, event):
    anchor = to_ndc(event.pixel_x, event.pixel_y, session.drawable_width, session.drawable_height)
    logging.info(f"Charging lens at ({anchor.x:.3f}, {anchor.y:.3f})")
    return replace(session, charge=ChargeState(charging=True, start_time=event.time, anchor=anchor))


def on_pointer_release(session, event):
    if not session.charge.charging:
        return session
    held = event.time - session.charge.start_time
    rs = charge_radius(held, session.charge_config)
    lens = Lens(position=session.charge.anchor, rs=rs, active=True)
    session = replace(session, lens=lens, charge=ChargeState())
    logging.info(f"Placed lens with rs={rs:.4f} (held {held:.2f}s)")
    return recompute(session)


def on_reset(session, event):
    logging.info("Lens cleared")
    session = replace(session, lens=replace(session.lens, active=False), charge=ChargeState())
    return recompute(session)


def on_resize(session, event):
    return replace(session, drawable_width=event.width, drawable_height=event.height)


HANDLERS = {
    PointerPress: on_pointer_press,
    PointerRelease: on_pointer_release,
    ResetLens: on_reset,
    Resize: on_resize,
}


def handle_event(session, event):
    return HANDLERS[type(event)](session, event)


def preview_circle(session, now):
    """(anchor, radius) of the lens being charged, or None."""
    if not session.charge.charging:
        return None
    held = now - session.charge.start_time
    return session.charge.anchor, charge_radius(held, session.charge_config)


def lens_circle(session):
    if not session.lens.active:
        return None
    return session.lens.position, session.lens.rs
