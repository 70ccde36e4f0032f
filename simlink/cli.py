"""Command-line entry point for driving a simulation engine.

Exit status is 0 on success, 1 when the engine reports failure and 2 when the
engine cannot be reached.
"""

import argparse
import json
import logging
from typing import Callable, List, Optional

from simlink.client import SimulatorClient
from simlink.config import SimLinkConfig
from simlink.errors import PackageNotFoundError, SimLinkError
from simlink.logging_config import configure_logging
from simlink.types import INVALID_HANDLE

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNREACHABLE = 2

ClientFactory = Callable[[SimLinkConfig], SimulatorClient]


def _target(value: str):
    """Numeric targets are handles, anything else is an object name."""
    try:
        return int(value)
    except ValueError:
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simlink",
        description="Control a remote simulation engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the simulation and wait until the engine reports it running
  simlink start --wait 5

  # Move an object by name, then print its pose
  simlink move Robot 1.0 2.0 0.5
  simlink pose Robot

  # Load a scene shipped with a package
  simlink load-problem tag scenes/tag.ttt tapir
        """,
    )
    parser.add_argument("--base-url", default=None, help="Engine bridge URL (default: from env)")
    parser.add_argument("--timeout", type=float, default=None, help="Per-call timeout in seconds")
    parser.add_argument(
        "--strict", action="store_true", help="Do not send requests for unknown object names"
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: SIMLINK_LOG_LEVEL or INFO)")

    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Start or unpause the simulation")
    start.add_argument("--wait", type=float, default=0.0, metavar="SECONDS",
                       help="Wait up to SECONDS for the running state")
    stop = sub.add_parser("stop", help="Stop the simulation")
    stop.add_argument("--wait", type=float, default=0.0, metavar="SECONDS",
                      help="Wait up to SECONDS for the stopped state")
    sub.add_parser("status", help="Print the observed simulation state")

    resolve = sub.add_parser("resolve", help="Print the handle of an object")
    resolve.add_argument("name")

    move = sub.add_parser("move", help="Move an object (handle or name) in world coordinates")
    move.add_argument("target", type=_target)
    move.add_argument("x", type=float)
    move.add_argument("y", type=float)
    move.add_argument("z", type=float)

    copy = sub.add_parser("copy", help="Duplicate an object and print the new handle")
    copy.add_argument("target", type=_target)

    pose = sub.add_parser("pose", help="Print the world pose of an object")
    pose.add_argument("target", type=_target)

    load = sub.add_parser("load", help="Load a scene from an absolute path")
    load.add_argument("path")

    load_problem = sub.add_parser("load-problem", help="Load <package>/problems/<problem>/<path>")
    load_problem.add_argument("problem")
    load_problem.add_argument("relative_path")
    load_problem.add_argument("package")

    return parser


def config_from_args(args: argparse.Namespace) -> SimLinkConfig:
    config = SimLinkConfig.from_env()
    if args.base_url:
        config.base_url = args.base_url
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.strict:
        config.handle_policy = "strict"
    config.validate()
    return config


def _handle_for(client: SimulatorClient, target) -> int:
    if isinstance(target, str):
        return client.resolve(target)
    return target


def run_command(client: SimulatorClient, args: argparse.Namespace) -> int:
    """Execute one sub-command against ``client`` and return the exit status."""
    command = args.command

    if command in ("start", "stop"):
        ok = client.start() if command == "start" else client.stop()
        if ok and args.wait > 0:
            wait = client.wait_until_running if command == "start" else client.wait_until_stopped
            ok = wait(timeout=args.wait)
        print("ok" if ok else "failed")
        return EXIT_OK if ok else EXIT_FAILED

    if command == "status":
        print(client.state().value)
        return EXIT_OK

    if command == "resolve":
        handle = client.resolve(args.name)
        print(handle)
        return EXIT_OK if handle != INVALID_HANDLE else EXIT_FAILED

    if command == "move":
        ok = client.move_object(args.target, args.x, args.y, args.z)
        print("ok" if ok else "failed")
        return EXIT_OK if ok else EXIT_FAILED

    if command == "copy":
        new_handle = client.copy_object(_handle_for(client, args.target))
        print(new_handle)
        return EXIT_OK if new_handle != INVALID_HANDLE else EXIT_FAILED

    if command == "pose":
        pose = client.get_pose(_handle_for(client, args.target))
        if pose is None:
            print("failed")
            return EXIT_FAILED
        print(json.dumps(pose.to_dict(), indent=2))
        return EXIT_OK

    if command == "load":
        ok = client.load_scene(args.path)
    else:
        ok = client.load_problem_scene(args.problem, args.relative_path, args.package)
    print("ok" if ok else "failed")
    return EXIT_OK if ok else EXIT_FAILED


def main(argv: Optional[List[str]] = None, client_factory: Optional[ClientFactory] = None) -> int:
    """Parse command-line arguments and run one engine command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(level=args.log_level)
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    factory = client_factory or SimulatorClient.from_config
    try:
        with factory(config) as client:
            return run_command(client, args)
    except PackageNotFoundError as e:
        logger.error("%s", e)
        return EXIT_FAILED
    except SimLinkError as e:
        logger.error("Engine unreachable: %s", e)
        return EXIT_UNREACHABLE
