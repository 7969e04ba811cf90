import argparse

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Black Hole Ray Bending (2D)")
    parser.add_argument('--width', type=int, default=800, help='Window width in pixels (default: 800)')
    parser.add_argument('--height', type=int, default=600, help='Window height in pixels (default: 600)')
    # Ray fan
    parser.add_argument('--rays', type=int, default=27, help='Number of rays (default: 27)')
    parser.add_argument('--y-min', type=float, default=-0.85, help='Lowest ray start y in NDC (default: -0.85)')
    parser.add_argument('--y-max', type=float, default=0.85, help='Highest ray start y in NDC (default: 0.85)')
    parser.add_argument('--start-x', type=float, default=-0.98, help='Ray start x in NDC (default: -0.98)')
    # Press-and-hold lens sizing
    parser.add_argument('--rs-min', type=float, default=0.03, help='Smallest Schwarzschild radius (default: 0.03)')
    parser.add_argument('--rs-max', type=float, default=0.25, help='Largest Schwarzschild radius (default: 0.25)')
    parser.add_argument('--rs-per-second', type=float, default=0.09, help='Radius growth while held (default: 0.09/s)')
    parser.add_argument('--workers', type=int, default=1, help='Processes used to trace rays (default: 1)')
    # Headless export
    parser.add_argument('--headless', action='store_true', help='Place a lens without opening a window and save the result')
    parser.add_argument('--lens-x', type=float, default=0.0, help='Headless lens x in NDC (default: 0)')
    parser.add_argument('--lens-y', type=float, default=0.0, help='Headless lens y in NDC (default: 0)')
    parser.add_argument('--rs', type=float, default=0.1, help='Headless lens Schwarzschild radius; 0 for no lens (default: 0.1)')
    parser.add_argument('--out', type=str, default='images/rays.png', help='Headless image output path')
    parser.add_argument('--csv', type=str, default='rays.csv', help='Headless ray CSV output path')
    parser.add_argument('--verbose', action='store_true', help='Log debug messages')
    args = parser.parse_args(argv)

    if args.width <= 0 or args.height <= 0:
        parser.error('--width and --height must be positive')
    if args.rays < 1:
        parser.error('--rays must be at least 1')
    if args.y_min >= args.y_max:
        parser.error('--y-min must be below --y-max')
    if not 0 < args.rs_min <= args.rs_max:
        parser.error('need 0 < --rs-min <= --rs-max')
    if args.rs < 0:
        parser.error('--rs must not be negative')
    if args.workers < 1:
        parser.error('--workers must be at least 1')
    return args
