"""
wlock - watch face scheduling and geometry engine

This is the root package for wlock, a watch face that tracks a fixed table of
recurring daily events (breaks, lunch, end of day) and renders the week as a
ring of colored arcs.

Core modules:
- day_model: Weekday normalization, weekend detection, day progress
- events: Event table, next-event resolution and countdown formatting
- alerts: Haptic alert decisions on whole-minute boundaries
- haptics: Vibration waveforms for each alert kind
- geometry: Declarative draw plan (arcs and text) for a frame
- surface: Drawing protocol and an SVG preview surface
- engine: Per-tick composition of all of the above
- driver: Asyncio host driver owning the periodic tick
- mqtt: Publish-only MQTT client for frames and alerts
"""

__version__ = "0.4.2"
