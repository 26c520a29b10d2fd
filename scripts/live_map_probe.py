#!/usr/bin/env python3
"""Passive live map probe.

This script reuses the fleetlive client to:
1) load the REST snapshot with ``FLEETLIVE_TOKEN``,
2) open the Socket.IO push channel at ``FLEETLIVE_SOCKET_URL``,
3) print every event log entry as it arrives.

Use this to check which event names a backend actually emits and how often.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetlive import FleetLiveConfig, LiveMapView, open_live_map  # noqa: E402

_LOG = logging.getLogger("live_map_probe")


@dataclass
class ProbeStats:
    started_at: float
    total_events: int = 0
    last_event_id: str | None = None
    last_event_at: float | None = None


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Passive probe for the live map push channel.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print full event payloads as JSON.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_summary(stats: ProbeStats, view: LiveMapView) -> None:
    runtime = time.time() - stats.started_at
    print("[probe] Summary")
    print(f"[probe]   runtime_s      : {runtime:.1f}")
    print(f"[probe]   total_events   : {stats.total_events}")
    print(f"[probe]   drivers        : {len(view.drivers)} ({view.online_driver_count} online)")
    print(f"[probe]   pending_trips  : {len(view.trips)}")
    print(f"[probe]   connected      : {view.connection.connected}")
    if view.connection.connection_error:
        print(f"[probe]   last_error     : {view.connection.connection_error}")


async def _run(args: argparse.Namespace, config: FleetLiveConfig) -> int:
    stats = ProbeStats(started_at=time.time())

    def on_change(view: LiveMapView) -> None:
        # The log is newest-first; print entries we have not seen yet, oldest first.
        fresh = []
        for entry in view.events:
            if entry.id == stats.last_event_id:
                break
            fresh.append(entry)
        for entry in reversed(fresh):
            stats.total_events += 1
            stats.last_event_id = entry.id
            stats.last_event_at = time.time()
            ts_text = time.strftime("%H:%M:%S", time.localtime(entry.ts / 1000))
            print(f"[probe] {ts_text} {entry.type.value:<13} {entry.describe()}")
            if args.json:
                print(json.dumps(entry.payload, ensure_ascii=False, sort_keys=True, default=str))

    client = await open_live_map(config, on_change=on_change)
    view = client.view()
    print(f"[probe] Seeded drivers={len(view.drivers)} trips={len(view.trips)}")
    if not config.can_stream:
        print("[probe] FLEETLIVE_SOCKET_URL or FLEETLIVE_TOKEN missing; not streaming.", file=sys.stderr)
        await client.close()
        return 2

    try:
        while True:
            if args.duration > 0 and (time.time() - stats.started_at) >= args.duration:
                print(f"[probe] Reached --duration={args.duration}s, stopping.")
                break
            await asyncio.sleep(1.0)
    except asyncio.CancelledError:
        pass
    finally:
        await client.close()

    _print_summary(stats, client.view())
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = FleetLiveConfig.from_env()
    try:
        return asyncio.run(_run(args, config))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(_main())
