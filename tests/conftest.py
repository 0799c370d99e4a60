"""Shared test fixtures and configuration for the wlock test suite.

This module provides reusable fixtures for common test scenarios including:
- Fixed instants on workdays and weekends
- Event tables
- MQTT configuration and client mocking
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import Mock

import paho.mqtt.client as mqtt
import pytest
from wlock.config import MqttConfig
from wlock.events import EventDefinition

# ============================================================================
# Pytest Configuration
# ============================================================================


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return Mock(spec=logging.Logger)


# ============================================================================
# Time Fixtures
# ============================================================================


@pytest.fixture
def monday_morning():
    """Monday 2025-01-13 08:00:00 UTC."""
    return datetime(2025, 1, 13, 8, 0, 0, tzinfo=UTC)


@pytest.fixture
def saturday_morning():
    """Saturday 2025-01-18 09:00:00 UTC."""
    return datetime(2025, 1, 18, 9, 0, 0, tzinfo=UTC)


# ============================================================================
# Event Fixtures
# ============================================================================


@pytest.fixture
def office_events():
    """The default office day: two breaks, lunch and leaving time."""
    return (
        EventDefinition("pausa", 1030, 90),
        EventDefinition("pranzo", 1300, 90),
        EventDefinition("pausa", 1600, 90),
        EventDefinition("uscita", 1730, 90),
    )


# ============================================================================
# MQTT Fixtures
# ============================================================================


@pytest.fixture
def mqtt_config():
    """Create a basic MQTT configuration for testing."""
    return MqttConfig(
        host="localhost",
        port=1883,
        username=None,
        password=None,
        tls_enabled=False,
        cert=None,
        key=None,
        ca_cert=None,
        topic_base="wlock/test-watch",
    )


@pytest.fixture
def mock_mqtt_client():
    """Create a mock paho MQTT client."""
    client = Mock(spec=mqtt.Client)
    message_info = Mock(spec=mqtt.MQTTMessageInfo)
    message_info.rc = mqtt.MQTT_ERR_SUCCESS
    message_info.mid = 1
    client.publish = Mock(return_value=message_info)
    client.connect = Mock()
    client.disconnect = Mock()
    client.loop_start = Mock()
    client.loop_stop = Mock()
    client.is_connected = Mock(return_value=True)
    return client
