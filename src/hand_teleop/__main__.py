"""
Entry point for hand teleoperation tools.

Usage:
    python -m hand_teleop [command]
    # or after install:
    hand-teleop [command]

Commands:
    validate      - Check formulas for syntax errors
    evaluate      - Evaluate a formula against one recorded landmark frame
    check-config  - Validate every formula in a config file
    replay        - Stream recorded landmark frames through the servo formulas
"""

import argparse
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from hand_teleop.control.config import get_servo_definitions, load_config
from hand_teleop.control.servo_control import ServoControl
from hand_teleop.formula import FormulaError, evaluate_formula, get_error_message
from hand_teleop.shared.constants import (
    DEFAULT_CONFIG_PATH,
    MAX_SERVO_VALUE,
    MIN_SERVO_VALUE,
)
from hand_teleop.shared.types import Landmark, TeleopConfig

logger = logging.getLogger(__name__)

_frame_adapter = TypeAdapter(list[Landmark] | None)
_frames_adapter = TypeAdapter(list[list[Landmark] | None])


def load_frame(path: str) -> list[Landmark] | None:
    """Load one landmark frame (a JSON list of landmarks, or null)."""
    return _frame_adapter.validate_json(Path(path).read_text())


def load_frames(path: str) -> list[list[Landmark] | None]:
    """Load recorded frames (a JSON list of frames, null meaning no hand)."""
    return _frames_adapter.validate_json(Path(path).read_text())


def cmd_validate(args) -> int:
    """Print OK or the error message for each formula."""
    failed = 0
    for formula in args.formulas:
        message = get_error_message(formula)
        if message is None:
            print(f"OK     {formula}")
        else:
            failed += 1
            print(f"ERROR  {formula!r}: {message}")
    return 1 if failed else 0


def cmd_evaluate(args) -> int:
    """Evaluate a single formula against one frame."""
    try:
        landmarks = load_frame(args.landmarks) if args.landmarks else None
    except (OSError, ValidationError) as e:
        logger.error(f"Could not load landmarks from {args.landmarks}: {e}")
        return 1

    max_value = args.max_value
    if max_value is None:
        max_value = (
            TeleopConfig().max_value_for(args.servo)
            if args.servo is not None
            else MAX_SERVO_VALUE
        )

    try:
        position = evaluate_formula(
            args.formula, landmarks, min_value=MIN_SERVO_VALUE, max_value=max_value
        )
    except FormulaError as e:
        print(f"Formula error: {e}")
        return 1

    print(position)
    return 0


def cmd_check_config(args) -> int:
    """Validate every formula in a config file."""
    config = load_config(args.config)
    failed = 0

    for servo in get_servo_definitions(config):
        formula = config.get_formula(servo.id)
        if formula is None or not formula.strip():
            status = "-"
        else:
            message = get_error_message(formula)
            if message is None:
                status = f"OK     {formula}"
            else:
                failed += 1
                status = f"ERROR  {formula!r}: {message}"
        print(f"{servo.id:>2} {servo.name:<15} (max {servo.max_value:>4})  {status}")

    return 1 if failed else 0


def cmd_replay(args) -> int:
    """Feed recorded frames through ServoControl."""
    config = load_config(args.config)
    try:
        frames = load_frames(args.frames)
    except (OSError, ValidationError) as e:
        logger.error(f"Could not load frames from {args.frames}: {e}")
        return 1

    control = ServoControl.from_config(config)
    if args.robot_ip is not None:
        control.update_robot_ip(args.robot_ip)

    if not args.dry_run:
        if control.refresh_robot_status() is None:
            logger.error(f"Robot at '{control.robot_ip}' is not reachable")
            return 1

    interval = args.frame_interval
    for index, frame in enumerate(frames):
        positions = control.process_landmarks(frame)
        if args.dry_run:
            to_send = control.collect_positions_to_send()
            changes = ", ".join(f"{p.id}={p.position}" for p in to_send)
            print(f"frame {index}: {changes or '(no change)'}")
        else:
            control.send_servo_positions()
            logger.debug(f"frame {index}: {positions}")
        if interval > 0:
            time.sleep(interval)

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for hand teleoperation tools."""
    parser = argparse.ArgumentParser(
        description="Hand Teleoperation Formula Tools",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog="""
Examples:
    hand-teleop validate "map(distance(4,8), 0, 0.1, 0, 1023)"
    hand-teleop evaluate "rotationY(0,5,17)" --landmarks frame.json --servo 11
    hand-teleop check-config --config robot-hand-config.json
    hand-teleop replay frames.json --config robot-hand-config.json --dry-run
        """,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check formulas for syntax errors",
    )
    validate_parser.add_argument("formulas", nargs="+", help="Formulas to validate")
    validate_parser.set_defaults(func=cmd_validate)

    # Evaluate command
    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Evaluate a formula against one landmark frame",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    evaluate_parser.add_argument("formula", help="Formula to evaluate")
    evaluate_parser.add_argument(
        "--landmarks",
        "-l",
        default=None,
        help="JSON file holding a list of 21 landmarks",
    )
    evaluate_parser.add_argument(
        "--servo",
        "-s",
        type=int,
        default=None,
        help="Servo id, selects the servo's max value",
    )
    evaluate_parser.add_argument(
        "--max-value",
        type=int,
        default=None,
        help="Override the upper clamp bound",
    )
    evaluate_parser.set_defaults(func=cmd_evaluate)

    # Check config command
    check_parser = subparsers.add_parser(
        "check-config",
        help="Validate every formula in a config file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    check_parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Config file to check",
    )
    check_parser.set_defaults(func=cmd_check_config)

    # Replay command
    replay_parser = subparsers.add_parser(
        "replay",
        help="Stream recorded landmark frames through the servo formulas",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    replay_parser.add_argument("frames", help="JSON file holding a list of frames")
    replay_parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Config file with formulas and robot settings",
    )
    replay_parser.add_argument(
        "--robot-ip",
        default=None,
        help="Override the robot address from the config",
    )
    replay_parser.add_argument(
        "--frame-interval",
        type=float,
        default=0.0,
        help="Seconds to wait between frames",
    )
    replay_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print positions instead of sending them",
    )
    replay_parser.set_defaults(func=cmd_replay)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
