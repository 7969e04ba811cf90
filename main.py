#main.py
import logging
from dataclasses import replace

from config import parse_args
from simulation.blackhole import Lens, Point, RaySetConfig, ChargeConfig
from simulation.raytracing import trace_rays, rays_to_frame, summarize_traces
from simulation.session import new_session

# ---
# Everything lives in normalized device coordinates: the window spans
# [-1, 1] on both axes, y up. The lens radius is in the same units.
# ---


def run_headless(session, args):
    """Place one lens, save the picture and the ray points, log what the rays did."""
    from visualization.plot import plot_rays

    lens = Lens(position=Point(args.lens_x, args.lens_y), rs=args.rs, active=args.rs > 0)
    logging.info(f"Tracing {session.config.ray_count} rays around lens at "
                 f"({lens.position.x}, {lens.position.y}) rs={lens.rs} active={lens.active}")
    traces = trace_rays(session.config, lens, workers=session.workers, progress=True)
    session = replace(session, lens=lens, rays=tuple(trace.points for trace in traces))

    plot_rays(session.rays, lens, out_path=args.out,
              size=(session.drawable_width, session.drawable_height))
    rays_to_frame(traces).to_csv(args.csv, index=False)
    logging.info(f"Saved {len(traces)} rays to {args.csv}")

    summary = summarize_traces(traces)
    print("\nRay summary:")
    for status in ('straight', 'exited', 'captured', 'clipped', 'escaped', 'exhausted'):
        if status in summary:
            print(f"  {status}: {summary[status]}")
    return session


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s: %(message)s')
    config = RaySetConfig(ray_count=args.rays, y_min=args.y_min, y_max=args.y_max, start_x=args.start_x)
    charge_config = ChargeConfig(rs_min=args.rs_min, rs_max=args.rs_max, rs_per_second=args.rs_per_second)
    session = new_session(config, charge_config, drawable_size=(args.width, args.height), workers=args.workers)

    if args.headless:
        return run_headless(session, args)

    from visualization.viewer import LensViewer
    logging.info("Click and hold to grow a black hole, release to place it. SPACE clears, ESC quits.")
    return LensViewer(session).show()


if __name__ == "__main__":
    main()
