import logging
import threading
import time
from collections.abc import Callable, Sequence
from typing import Any

from hand_teleop.control.robot_client import RobotClient, RobotConnectionError
from hand_teleop.formula import FormulaError, evaluate_formula, get_error_message, validate
from hand_teleop.formula.engine import is_blank
from hand_teleop.shared.constants import (
    DEFAULT_MIN_CHANGE,
    DEFAULT_SEND_INTERVAL,
    MAX_SERVO_VALUE,
    MIN_SERVO_VALUE,
    ROBOT_STATUS_UPDATE_INTERVAL,
    SERVO_MAX_VALUE_OVERRIDES,
)
from hand_teleop.shared.types import Landmark, ServoPosition, TeleopConfig

logger = logging.getLogger(__name__)


class ServoControl:
    """
    Turns landmark frames into servo positions and streams them to the robot hand.

    Public Attributes:
        min_change_threshold: Positions are only re-sent once they move more than this
        send_interval: Seconds between position sends
        servo_max_values: Servo id to upper bound, for servos not using MAX_SERVO_VALUE

    Private Attributes:
        _client: RobotClient used for HTTP transport
        _formulas: Formula registry, servo id to formula string
        _calculated_positions: Last successfully evaluated position per servo
        _last_sent_positions: Last position sent per servo
        _connected: Whether the last robot request succeeded
        _running: Flag indicating if the send thread is running
        _send_thread: Thread for periodic sends and status polling
        _stop_event: Stop signal owned by the current send loop
        _lock: Threading lock for registry and position state
        _*_callbacks: Listeners notified on state changes
    """

    def __init__(
        self,
        robot_ip: str = "",
        min_change_threshold: float = DEFAULT_MIN_CHANGE,
        send_interval: float = DEFAULT_SEND_INTERVAL,
        servo_max_values: dict[int, int] | None = None,
        client: RobotClient | None = None,
    ):
        """
        Initialize servo control.

        Args:
            robot_ip: Robot hand address, may be set later with update_robot_ip
            min_change_threshold: Minimum change before a position is re-sent
            send_interval: Seconds between position sends
            servo_max_values: Per-servo upper bounds (default: SERVO_MAX_VALUE_OVERRIDES)
            client: Transport to use instead of a new RobotClient
        """
        # Public attributes
        self.min_change_threshold = min_change_threshold
        self.send_interval = send_interval
        self.servo_max_values = (
            dict(SERVO_MAX_VALUE_OVERRIDES)
            if servo_max_values is None
            else dict(servo_max_values)
        )

        # Private attributes
        self._client = client or RobotClient(robot_ip)
        if robot_ip:
            self._client.robot_ip = robot_ip
        self._formulas: dict[int, str] = {}
        self._calculated_positions: dict[int, int] = {}
        self._last_sent_positions: dict[int, int] = {}
        self._connected = False
        self._running = False
        self._send_thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        # callbacks for state changes
        self._calculated_callbacks: list[Callable[[dict[int, int]], None]] = []
        self._sent_callbacks: list[Callable[[dict[int, int]], None]] = []
        self._status_callbacks: list[Callable[[Any], None]] = []
        self._connection_callbacks: list[Callable[[bool], None]] = []

    @classmethod
    def from_config(
        cls, config: TeleopConfig, client: RobotClient | None = None
    ) -> "ServoControl":
        """Build a ServoControl from a loaded TeleopConfig."""
        control = cls(
            robot_ip=config.robot_ip,
            min_change_threshold=config.min_change_threshold,
            send_interval=config.send_interval,
            servo_max_values=config.servo_max_value_map(),
            client=client,
        )
        control.set_formulas(config.formulas)
        return control

    # =============================================================================== #
    # Private Methods
    # =============================================================================== #

    def _set_connected(self, connected: bool) -> None:
        if connected == self._connected:
            return
        self._connected = connected
        logger.info(f"Robot {'connected' if connected else 'disconnected'}")
        for callback in self._connection_callbacks:
            callback(connected)

    def _send_loop(self, stop_event: threading.Event) -> None:
        """Background loop that sends positions and polls robot status."""
        last_status_time = 0.0

        while not stop_event.is_set():
            loop_start = time.time()

            if loop_start - last_status_time >= ROBOT_STATUS_UPDATE_INTERVAL:
                self.refresh_robot_status()
                last_status_time = loop_start

            self.send_servo_positions()

            # Sleep to maintain send interval
            elapsed = time.time() - loop_start
            sleep_time = self.send_interval - elapsed
            if sleep_time > 0:
                stop_event.wait(sleep_time)

    # ============================================================================== #
    # PUBLIC API
    # ============================================================================== #

    def max_value_for(self, servo_id: int) -> int:
        return self.servo_max_values.get(servo_id, MAX_SERVO_VALUE)

    def update_formula(self, servo_id: int, formula: str) -> bool:
        """
        Commit a formula for a servo.

        Blank formulas are accepted and leave the servo without a formula.
        Invalid formulas are rejected and the previous formula is kept.

        Returns:
            True if the formula was stored, False if it was rejected.
        """
        if not is_blank(formula) and not validate(formula):
            logger.warning(
                f"Rejected formula for servo {servo_id}: {get_error_message(formula)}"
            )
            return False

        with self._lock:
            self._formulas[int(servo_id)] = formula
        logger.debug(f"Formula for servo {servo_id} set to '{formula}'")
        return True

    def get_formula_error(self, formula: str) -> str | None:
        """Get the error message for an invalid formula, or None if valid."""
        return get_error_message(formula)

    def get_formulas(self) -> dict[int, str]:
        with self._lock:
            return dict(self._formulas)

    def set_formulas(self, formulas: dict[int | str, str]) -> None:
        """Replace the whole formula registry."""
        with self._lock:
            self._formulas = {int(ch): formula for ch, formula in formulas.items()}

    def process_landmarks(
        self, landmarks: Sequence[Landmark] | None
    ) -> dict[int, int]:
        """
        Evaluate every formula against one landmark frame.

        Servos whose formula fails keep their previous calculated position.

        Args:
            landmarks: Landmarks of the tracked hand, or None when no hand is visible

        Returns:
            Copy of the calculated positions by servo id.
        """
        if landmarks is None:
            return self.calculated_positions

        with self._lock:
            formulas = dict(self._formulas)

        updates: dict[int, int] = {}
        for servo_id, formula in formulas.items():
            if is_blank(formula):
                continue
            try:
                updates[servo_id] = evaluate_formula(
                    formula,
                    landmarks,
                    min_value=MIN_SERVO_VALUE,
                    max_value=self.max_value_for(servo_id),
                )
            except FormulaError as e:
                # Keep the previous calculated position
                logger.debug(f"Error evaluating formula for servo {servo_id}: {e}")

        with self._lock:
            self._calculated_positions.update(updates)
            positions = dict(self._calculated_positions)

        for callback in self._calculated_callbacks:
            callback(positions)
        return positions

    def collect_positions_to_send(self) -> list[ServoPosition]:
        """
        Collect positions that changed more than the threshold since last sent.

        Marks the collected positions as sent.
        """
        to_send: list[ServoPosition] = []
        with self._lock:
            for servo_id, position in sorted(self._calculated_positions.items()):
                last_sent = self._last_sent_positions.get(servo_id, 0)
                if abs(position - last_sent) <= self.min_change_threshold:
                    continue
                to_send.append(ServoPosition(id=servo_id, position=position))
                self._last_sent_positions[servo_id] = position
        return to_send

    def send_servo_positions(self) -> bool:
        """
        Send changed positions to the robot.

        Returns:
            True if positions were sent, False if there was nothing to send,
            no connection, or the request failed.
        """
        if not self.robot_ip or not self._connected:
            return False

        positions = self.collect_positions_to_send()
        if not positions:
            return False

        try:
            self._client.send_positions(positions)
        except RobotConnectionError as e:
            logger.error(f"Error sending servo positions: {e}")
            self._set_connected(False)
            return False

        sent = self.last_sent_positions
        for callback in self._sent_callbacks:
            callback(sent)
        return True

    def refresh_robot_status(self) -> Any:
        """
        Poll robot status; updates the connection state.

        Returns:
            Decoded status payload, or None if the robot could not be reached.
        """
        if not self.robot_ip:
            return None

        try:
            status = self._client.get_status()
        except RobotConnectionError as e:
            if self._connected:
                logger.error(f"Error getting robot status: {e}")
            self._set_connected(False)
            return None

        self._set_connected(True)
        for callback in self._status_callbacks:
            callback(status)
        return status

    def set_servo_limits(self, limits: list[dict[str, Any]]) -> None:
        """
        Send servo limits to the robot.

        Raises:
            RobotConnectionError: If not connected or the request fails.
        """
        if not self.robot_ip or not self._connected:
            raise RobotConnectionError("Not connected to robot")

        try:
            self._client.set_servo_limits(limits)
        except RobotConnectionError as e:
            logger.error(f"Error setting servo limits: {e}")
            raise
        logger.info("Servo limits updated successfully")

    def update_robot_ip(self, robot_ip: str) -> None:
        """Point at a different robot; the connection must be re-established."""
        self._client.robot_ip = robot_ip
        self._set_connected(False)
        logger.info(f"Robot IP set to '{robot_ip}'")

    def update_min_change_threshold(self, threshold: float) -> None:
        self.min_change_threshold = threshold

    def update_send_interval(self, interval: float) -> None:
        """Set seconds between sends; takes effect on the next loop iteration."""
        if interval <= 0:
            raise ValueError("Send interval must be positive")
        self.send_interval = interval

    def start(self) -> None:
        """Start the background send loop."""
        if self._running:
            return

        self._running = True
        # One event per loop; a stopped loop never sees a later start()
        self._stop_event = threading.Event()
        self._send_thread = threading.Thread(
            target=self._send_loop, args=(self._stop_event,), daemon=True
        )
        self._send_thread.start()
        logger.info(f"Send loop started, interval {self.send_interval}s")

    def stop(self) -> None:
        """Stop the background send loop."""
        self._running = False
        self._stop_event.set()
        if self._send_thread:
            self._send_thread.join(timeout=1.0)
            self._send_thread = None
        logger.info("Servo control stopped")

    def on_calculated_positions_update(
        self, callback: Callable[[dict[int, int]], None]
    ) -> None:
        self._calculated_callbacks.append(callback)

    def on_sent_positions_update(
        self, callback: Callable[[dict[int, int]], None]
    ) -> None:
        self._sent_callbacks.append(callback)

    def on_robot_status_update(self, callback: Callable[[Any], None]) -> None:
        self._status_callbacks.append(callback)

    def on_connection_status_change(self, callback: Callable[[bool], None]) -> None:
        self._connection_callbacks.append(callback)

    @property
    def robot_ip(self) -> str:
        return self._client.robot_ip

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def is_running(self) -> bool:
        """Check if the send loop is running."""
        return self._running

    @property
    def calculated_positions(self) -> dict[int, int]:
        with self._lock:
            return dict(self._calculated_positions)

    @property
    def last_sent_positions(self) -> dict[int, int]:
        with self._lock:
            return dict(self._last_sent_positions)
