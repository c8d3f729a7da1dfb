#!/usr/bin/env python3
"""Watch for an available vehicle near a location from the terminal.

Runs one interactive search (radius-ladder narrowing by default) and
prints every status line, display set and match until a final match is
found or Ctrl-C is pressed.

Examples:
    python scripts/watch.py --lat 45.5017 --lng -73.5673 --radius 1500
    python scripts/watch.py --city toronto --lat 43.65 --lng -79.38 --single-shot
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pyflexnotify import (
    CandidateEvent,
    DisplaySet,
    FlexClient,
    FlexConfig,
    FlexNotifyError,
    MatchEvent,
    SingleShotPolicy,
    StatusUpdate,
    detect_city,
    format_distance,
)
from pyflexnotify.notifications import build_candidate_notification, build_match_notification


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--lat", type=float, required=True, help="Origin latitude")
    parser.add_argument("--lng", type=float, required=True, help="Origin longitude")
    parser.add_argument("--city", help="montreal, quebec or toronto (detected from coordinates if omitted)")
    parser.add_argument("--radius", type=float, default=1500.0, help="Initial alert radius in metres")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between polls")
    parser.add_argument("--single-shot", action="store_true", help="Stop at the first hit instead of narrowing")
    parser.add_argument("--walk", action="store_true", help="Look up walking distance for matches")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _print_status(update: StatusUpdate) -> None:
    print(f"[status] {update.text}")


def _print_display(display: DisplaySet) -> None:
    for item in display.vehicles:
        print(f"  - {item.label} {item.vehicle.color} {item.plate}: {format_distance(item.distance)}")


def _print_candidate(event: CandidateEvent) -> None:
    payload = build_candidate_notification(event)
    print(f"[found] {payload.body}")


async def _run(args: argparse.Namespace) -> int:
    city = args.city or detect_city(args.lat, args.lng)
    if city is None:
        print("Could not detect the city from these coordinates; pass --city.", file=sys.stderr)
        return 2

    config = FlexConfig.from_env()
    async with FlexClient(config) as client:
        search = client.search(
            city,
            args.lat,
            args.lng,
            args.radius,
            poll_interval=args.interval,
            policy=SingleShotPolicy(config.top_n) if args.single_shot else None,
            on_status=_print_status,
            on_display=_print_display,
            on_candidate=_print_candidate,
        )
        await search.wait()
        match: MatchEvent | None = search.last_match
        if match is None:
            return 1

        payload = build_match_notification(match)
        print(f"[match] {payload.title} {payload.body}")
        print(f"[match] Book at {payload.url}")
        if args.walk:
            for item in match.vehicles:
                route = await client.get_walking_route(
                    (args.lat, args.lng),
                    (item.vehicle.latitude, item.vehicle.longitude),
                )
                if route is not None:
                    print(f"  {item.plate}: {format_distance(route.distance)} walk ({route.minutes} min)")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except FlexNotifyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
