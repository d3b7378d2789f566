"""
Tests for control/robot_client.py - HTTP transport to the robot hand.

Tests cover:
- API URL construction
- Position and limit payloads
- Transport and HTTP error wrapping
"""

from unittest.mock import MagicMock

import pytest
import requests

from hand_teleop.control.robot_client import RobotClient, RobotConnectionError
from hand_teleop.shared.constants import DEFAULT_REQUEST_TIMEOUT
from hand_teleop.shared.types import ServoPosition

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def session():
    """requests.Session stand-in returning a successful response."""
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = [{"id": 1, "position": 512}]
    session.request.return_value = response
    return session


@pytest.fixture
def client(session):
    return RobotClient("192.168.1.50", session=session)


# =============================================================================
# Tests
# =============================================================================


class TestApiUrl:
    """Tests for URL construction."""

    def test_builds_servo_endpoint(self, client):
        assert client.get_api_url() == "http://192.168.1.50/api/servos"

    def test_keeps_port(self, session):
        client = RobotClient("robot.local:8080", session=session)
        assert client.get_api_url() == "http://robot.local:8080/api/servos"

    def test_requires_ip(self, session):
        client = RobotClient(session=session)
        with pytest.raises(ValueError, match="Robot IP not set"):
            client.get_api_url()


class TestSendPositions:
    """Tests for send_positions."""

    def test_posts_json_array(self, client, session):
        client.send_positions(
            [ServoPosition(id=1, position=512), ServoPosition(id=11, position=2048)]
        )

        session.request.assert_called_once_with(
            "POST",
            "http://192.168.1.50/api/servos",
            json=[{"id": 1, "position": 512}, {"id": 11, "position": 2048}],
            timeout=DEFAULT_REQUEST_TIMEOUT,
        )

    def test_custom_timeout(self, session):
        client = RobotClient("10.0.0.2", timeout=0.5, session=session)
        client.send_positions([ServoPosition(id=2, position=10)])
        assert session.request.call_args.kwargs["timeout"] == 0.5

    def test_wraps_transport_errors(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(RobotConnectionError, match="refused"):
            client.send_positions([ServoPosition(id=1, position=0)])

    def test_wraps_timeouts(self, client, session):
        session.request.side_effect = requests.Timeout("timed out")
        with pytest.raises(RobotConnectionError):
            client.send_positions([ServoPosition(id=1, position=0)])

    def test_redirect_status_is_error(self, client, session):
        session.request.return_value.status_code = 302
        with pytest.raises(RobotConnectionError, match="HTTP error 302"):
            client.send_positions([ServoPosition(id=1, position=0)])

    def test_http_error_status(self, client, session):
        session.request.return_value.status_code = 500
        with pytest.raises(RobotConnectionError, match="HTTP error 500"):
            client.send_positions([ServoPosition(id=1, position=0)])


class TestGetStatus:
    """Tests for get_status."""

    def test_returns_decoded_json(self, client, session):
        assert client.get_status() == [{"id": 1, "position": 512}]
        assert session.request.call_args.args == ("GET", "http://192.168.1.50/api/servos")

    def test_invalid_json(self, client, session):
        session.request.return_value.json.side_effect = ValueError("no json")
        with pytest.raises(RobotConnectionError, match="Invalid status response"):
            client.get_status()

    def test_http_error_status(self, client, session):
        session.request.return_value.status_code = 404
        with pytest.raises(RobotConnectionError, match="HTTP error 404"):
            client.get_status()


class TestSetServoLimits:
    def test_posts_limits(self, client, session):
        limits = [{"id": 11, "min": 0, "max": 4095}]
        client.set_servo_limits(limits)
        assert session.request.call_args.kwargs["json"] == limits
        assert session.request.call_args.args[0] == "POST"


class TestClose:
    def test_closes_session(self, client, session):
        client.close()
        session.close.assert_called_once()
