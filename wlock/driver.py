"""
Host driver for the watch face

Owns the periodic redraw that the engine itself never schedules:

- Interactive mode: one frame per tick, aligned to the next whole interval
- Ambient mode or hidden face: the periodic task is cancelled; the host calls
  ``time_tick()`` once a minute to refresh the face
- Taps: left of center scrubs the clock one hour back, right of center one
  hour forward

Frames go to a sink callback (the renderer), alerts to a haptics callback,
and both are published over MQTT while the client is connected. An alert is
delivered at most once per event and wall-clock second.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from wlock.alerts import AlertKind
from wlock.day_model import local_now
from wlock.engine import FaceFrame, WatchFaceEngine
from wlock.haptics import VibrationPattern
from wlock.mqtt import FaceMqtt

FrameSink = Callable[[FaceFrame], None]
HapticsSink = Callable[[AlertKind, VibrationPattern], None]
BatteryProvider = Callable[[], float]
Clock = Callable[[], datetime]

LOGGER = logging.getLogger("wlock.driver")


def delay_until_next_tick(now: datetime, interval_ms: int) -> float:
    """Seconds until the next multiple of ``interval_ms`` on the wall clock."""
    now_ms = int(now.timestamp() * 1000)
    return (interval_ms - now_ms % interval_ms) / 1000


@dataclass
class WatchFaceDriver:
    engine: WatchFaceEngine
    frame_sink: FrameSink
    battery: BatteryProvider = lambda: 0.0
    haptics: HapticsSink | None = None
    mqtt: FaceMqtt | None = None
    clock: Clock = local_now
    interval_ms: int = 1000
    ambient: bool = False
    visible: bool = False
    scrub_offset_hours: int = 0
    center_x: float | None = None
    last_frame: FaceFrame | None = field(default=None, init=False)
    _last_alert: tuple[str, datetime] | None = field(default=None, init=False, repr=False)
    _task: asyncio.Task | None = field(default=None, init=False, repr=False)

    def invalidate(self) -> FaceFrame:
        """Compute and deliver one frame."""
        frame = self.engine.tick(
            self.clock(),
            self.battery(),
            ambient_mode=self.ambient,
            scrub_offset_hours=self.scrub_offset_hours,
        )
        self.last_frame = frame
        self.frame_sink(frame)
        publishing = self.mqtt is not None and self.mqtt.is_connected()
        if publishing:
            self.mqtt.publish_frame(frame)
        if self._claim_alert(frame):
            LOGGER.info("[driver] %s alert for '%s'", frame.alert, frame.next_event.name)
            if self.haptics:
                self.haptics(frame.alert, frame.vibration)
            if publishing:
                self.mqtt.publish_alert(frame)
        return frame

    def _claim_alert(self, frame: FaceFrame) -> bool:
        """True the first time an alert is seen for its event within a wall-clock second."""
        if frame.alert is None or frame.vibration is None:
            return False
        key = (frame.next_event.name, frame.instant.replace(microsecond=0))
        if key == self._last_alert:
            LOGGER.debug("[driver] %s alert for '%s' already delivered", frame.alert, key[0])
            return False
        self._last_alert = key
        return True

    def should_timer_run(self) -> bool:
        return self.visible and not self.ambient

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_visible(self, visible: bool) -> None:
        self.visible = visible
        if visible and not self.should_timer_run():
            self.invalidate()
        self._update_timer()

    def set_ambient(self, ambient: bool) -> None:
        if ambient == self.ambient:
            return
        self.ambient = ambient
        LOGGER.debug("[driver] ambient=%s", ambient)
        self._update_timer()
        if self.visible and ambient:
            self.invalidate()

    def time_tick(self) -> None:
        """Minute tick from the host while ambient."""
        self.invalidate()

    def tap(self, x: float) -> None:
        center = self.center_x if self.center_x is not None else self.engine.viewport.center_x
        self.scrub_offset_hours += -1 if x <= center else 1
        LOGGER.debug("[driver] scrub offset now %+d h", self.scrub_offset_hours)
        self.invalidate()

    def _update_timer(self) -> None:
        if self.should_timer_run():
            if not self.running:
                self._task = asyncio.get_running_loop().create_task(self._run())
        elif self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while self.should_timer_run():
            try:
                self.invalidate()
            except Exception as exc:
                LOGGER.error("[driver] Frame update failed: %s", exc, exc_info=True)
            await asyncio.sleep(delay_until_next_tick(self.clock(), self.interval_ms))

    async def stop(self) -> None:
        self.visible = False
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
