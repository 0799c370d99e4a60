"""Publish-only MQTT client for face frames and haptic alerts."""

from __future__ import annotations

import json
import logging
import ssl
import threading

import paho.mqtt.client as mqtt

from .config import MqttConfig
from .engine import FaceFrame


class FaceMqtt:
    def __init__(self, config: MqttConfig, logger: logging.Logger | None = None) -> None:
        self.config = config
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._lock = threading.Lock()

    @property
    def face_topic(self) -> str:
        return f"{self.config.topic_base}/face"

    @property
    def alert_topic(self) -> str:
        return f"{self.config.topic_base}/alert"

    def connect(self) -> None:
        if not self.config.host:
            self._logger.debug("[mqtt] MQTT host not configured; frame publishing disabled")
            return
        with self._lock:
            if self._client is None:
                self._client = self._open_client(self.config.host)

    def _open_client(self, host: str) -> mqtt.Client | None:
        client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=f"wlock-{self.config.topic_base.replace('/', '-')}",
            clean_session=True,
        )
        if self.config.username:
            client.username_pw_set(self.config.username, self.config.password or "")
        if self.config.tls_enabled:
            client.tls_set(**self._tls_options())
        try:
            client.connect(host, self.config.port, keepalive=30)
        except Exception as exc:
            self._logger.warning("[mqtt] Failed to connect to %s:%s: %s", host, self.config.port, exc)
            return None
        client.loop_start()
        self._logger.info("[mqtt] Publishing watch face to %s/#", self.config.topic_base)
        return client

    def _tls_options(self) -> dict[str, object]:
        options: dict[str, object] = {"tls_version": ssl.PROTOCOL_TLS_CLIENT}
        for key, value in (
            ("ca_certs", self.config.ca_cert),
            ("certfile", self.config.cert),
            ("keyfile", self.config.key),
        ):
            if value:
                options[key] = value
        return options

    def disconnect(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is None:
            return
        client.loop_stop()
        client.disconnect()

    def is_connected(self) -> bool:
        """False until connected and whenever the broker link is down."""
        client = self._client
        if client is None:
            return False
        try:
            return bool(client.is_connected())
        except Exception:
            return False

    def publish(self, topic: str, payload: str, retain: bool = False, qos: int = 0) -> None:
        client = self._client
        if client is None:
            return
        try:
            client.publish(topic, payload=payload, qos=qos, retain=retain)
        except Exception as exc:
            self._logger.debug("[mqtt] Publish to %s failed: %s", topic, exc)

    def publish_frame(self, frame: FaceFrame) -> None:
        """Publish the latest frame as a retained message."""
        self.publish(self.face_topic, json.dumps(frame.to_dict()), retain=True)

    def publish_alert(self, frame: FaceFrame) -> None:
        if frame.alert is None:
            return
        payload = {
            "kind": frame.alert,
            "event": frame.next_event.name,
            "timings_ms": list(frame.vibration.timings_ms) if frame.vibration else [],
            "at": frame.instant.isoformat(),
        }
        self.publish(self.alert_topic, json.dumps(payload), qos=1)
