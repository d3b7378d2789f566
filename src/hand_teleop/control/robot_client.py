"""
HTTP transport to the robot hand.
"""

import logging
from typing import Any

import requests

from hand_teleop.shared.constants import API_ENDPOINT, DEFAULT_REQUEST_TIMEOUT
from hand_teleop.shared.types import ServoPosition

logger = logging.getLogger(__name__)


class RobotConnectionError(Exception):
    """Raised when the robot hand cannot be reached or rejects a request."""


class RobotClient:
    """
    Talks to the robot hand's servo API over HTTP.

    Attributes:
        robot_ip: Host (and optional port) of the robot hand
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        robot_ip: str = "",
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.robot_ip = robot_ip
        self.timeout = timeout
        self._session = session or requests.Session()

    def get_api_url(self) -> str:
        if not self.robot_ip:
            raise ValueError("Robot IP not set")
        return f"http://{self.robot_ip}{API_ENDPOINT}"

    def _request(self, method: str, json: Any = None) -> requests.Response:
        url = self.get_api_url()
        try:
            response = self._session.request(
                method, url, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise RobotConnectionError(f"{method} {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RobotConnectionError(f"HTTP error {response.status_code}")
        return response

    def send_positions(self, positions: list[ServoPosition]) -> None:
        """POST servo positions as a JSON array of {id, position}."""
        payload = [p.model_dump() for p in positions]
        self._request("POST", json=payload)
        logger.debug(f"Sent {len(payload)} servo position(s) to {self.robot_ip}")

    def get_status(self) -> Any:
        """GET the robot's current servo status."""
        response = self._request("GET")
        try:
            return response.json()
        except ValueError as e:
            raise RobotConnectionError(f"Invalid status response: {e}") from e

    def set_servo_limits(self, limits: list[dict[str, Any]]) -> None:
        """POST servo limit objects to the robot."""
        self._request("POST", json=limits)

    def close(self) -> None:
        self._session.close()
