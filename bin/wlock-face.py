#!/usr/bin/env python3
"""Run the wlock watch face, or render a single frame for preview."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
from datetime import datetime
from pathlib import Path

from wlock.alerts import AlertKind
from wlock.battery import read_battery_fraction
from wlock.config import WatchFaceConfig
from wlock.day_model import local_now
from wlock.driver import WatchFaceDriver
from wlock.engine import FaceFrame, WatchFaceEngine
from wlock.haptics import VibrationPattern
from wlock.mqtt import FaceMqtt
from wlock.surface import render_svg

LOGGER = logging.getLogger("wlock-face")


def _iso_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO timestamp: {value!r}") from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--once", action="store_true", help="Render one frame and exit")
    parser.add_argument("--at", type=_iso_timestamp, help="ISO timestamp to render instead of now (with --once)")
    parser.add_argument("--offset-hours", type=int, default=0, help="Scrub offset in hours")
    parser.add_argument("--battery", type=float, help="Battery fraction 0..1 instead of reading the device")
    parser.add_argument("--ambient", action="store_true", help="Render in ambient mode")
    parser.add_argument("--svg", type=Path, help="Write the frame as SVG to this path (with --once)")
    return parser.parse_args(argv)


def build_engine(config: WatchFaceConfig) -> WatchFaceEngine:
    return WatchFaceEngine(
        config.events,
        weekday_colors=config.weekday_colors,
        viewport=config.viewport,
        haptics=config.haptics,
    )


def render_once(args: argparse.Namespace, config: WatchFaceConfig) -> str:
    engine = build_engine(config)
    instant = args.at or local_now()
    battery = args.battery if args.battery is not None else read_battery_fraction()
    frame = engine.tick(instant, battery, ambient_mode=args.ambient, scrub_offset_hours=args.offset_hours)
    if args.svg:
        args.svg.write_text(render_svg(frame.render, config.viewport), encoding="utf-8")
        return str(args.svg)
    return json.dumps(frame.to_dict(), indent=2)


def _log_frame(frame: FaceFrame) -> None:
    LOGGER.debug(
        "frame %s next=%s",
        frame.instant.strftime("%H:%M:%S"),
        frame.next_event.as_pair() if not frame.next_event.is_empty else "-",
    )


def _log_haptics(kind: AlertKind, pattern: VibrationPattern) -> None:
    LOGGER.info("buzz %s (%d pulses, %d ms)", kind, pattern.pulse_count, pattern.duration_ms)


async def run(args: argparse.Namespace, config: WatchFaceConfig) -> None:
    mqtt = FaceMqtt(config.mqtt)
    mqtt.connect()
    battery = (lambda: args.battery) if args.battery is not None else read_battery_fraction
    driver = WatchFaceDriver(
        engine=build_engine(config),
        frame_sink=_log_frame,
        battery=battery,
        haptics=_log_haptics,
        mqtt=mqtt,
        interval_ms=config.tick_interval_ms,
        ambient=args.ambient,
        scrub_offset_hours=args.offset_hours,
    )

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _handle_signal(signum: int) -> None:
        LOGGER.info("Received signal %s, shutting down", signum)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _handle_signal, sig)

    LOGGER.info("Watch face running with %d events", len(config.events))
    driver.set_visible(True)
    minute_task = asyncio.create_task(_ambient_minute_ticks(driver))
    await stop_event.wait()
    minute_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await minute_task
    await driver.stop()
    mqtt.disconnect()


async def _ambient_minute_ticks(driver: WatchFaceDriver) -> None:
    while True:
        await asyncio.sleep(60 - local_now().second)
        if driver.ambient:
            driver.time_tick()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        config = WatchFaceConfig.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    if args.once:
        print(render_once(args, config))
        return 0
    try:
        asyncio.run(run(args, config))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
