import argparse
import logging
import sys

from contribcity.config import LayoutConfig, LayoutStyle
from contribcity.contributions import load_calendar, sample_contributions
from contribcity.errors import ContribCityError
from contribcity.layout import generate_layout


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contribcity",
        description="Turn a yearly contribution calendar into a toy city layout.")
    parser.add_argument("--calendar", help="Calendar JSON (raw 7xN matrix or GraphQL payload)")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--style", choices=[s.value for s in LayoutStyle],
                        default=LayoutStyle.DEFAULT.value)
    parser.add_argument("--weeks", type=positive_int, default=53,
                        help="Weeks in the placeholder city when no calendar is given")
    parser.add_argument("--export", metavar="PATH", help="Write the layout as JSON")
    parser.add_argument("--show", action="store_true", help="Open a matplotlib preview")
    parser.add_argument("--preview", metavar="PNG", help="Save the preview image")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s")

    print("=== Contribution City ===")
    try:
        config = LayoutConfig(seed=args.seed, style=LayoutStyle(args.style))
        if args.calendar:
            print(f"Loading calendar from {args.calendar}...")
            counts = load_calendar(args.calendar)
        else:
            print(f"No calendar given, building placeholder city ({args.weeks} weeks)...")
            counts = sample_contributions(weeks=args.weeks, seed=args.seed)
        layout = generate_layout(counts, config)
    except ContribCityError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rows, cols = layout.shape
    print(f"Generated {rows}x{cols} layout:")
    for kind, n in layout.counts.items():
        print(f"  {kind}: {n}")

    if args.export:
        layout.save_json(args.export)
        print(f"City exported to {args.export}")

    if args.show or args.preview:
        from contribcity.visualizer import LayoutVisualizer
        viz = LayoutVisualizer(layout, max_height=config.max_height)
        if args.preview:
            viz.save(args.preview)
            print(f"Preview saved to {args.preview}")
        if args.show:
            viz.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
