import argparse
import logging
import sys
import threading
from typing import TextIO

from compose_monitor.config import (
    DEFAULT_TICKS,
    ConfigError,
    MonitorConfig,
    build_config,
)
from compose_monitor.deploy import DEFAULT_BINARY, run_compose
from compose_monitor.engine import ContainerEngine
from compose_monitor.errors import ComposeMonitorError, DeploymentError
from compose_monitor.loader import load_manifest
from compose_monitor.model import expected_names
from compose_monitor.monitor import (
    DEFAULT_INTERVAL,
    monitor_containers,
    wait_until_ready,
)
from compose_monitor.output import FORMATS, output_result

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compose-monitor",
        description="Deploy a compose project and report the status of its containers",
    )

    parser.add_argument(
        "--compose-file", required=True, help="Path to the compose manifest"
    )
    parser.add_argument(
        "--monitor-duration",
        type=int,
        default=DEFAULT_TICKS,
        help=f"Number of samples, one per --interval (default {DEFAULT_TICKS})",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL,
        help="Seconds to wait after each sample",
    )
    parser.add_argument(
        "--format",
        choices=list(FORMATS),
        default="json",
        help="Report format (json, yaml, text)",
    )
    parser.add_argument(
        "--wait-ready",
        type=float,
        default=0.0,
        metavar="SECONDS",
        help="Wait up to SECONDS for all named containers before sampling",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Retries per failed engine query (default: fail fast)",
    )
    parser.add_argument(
        "--fail-on-deploy-error",
        action="store_true",
        help="Abort when the compose command exits non-zero",
    )
    parser.add_argument("--compose-binary", default=DEFAULT_BINARY)
    parser.add_argument("--verbose", action="store_true")

    parser.add_argument(
        "compose_args",
        nargs=argparse.REMAINDER,
        help="Arguments forwarded to `docker compose` (e.g. up -d)",
    )
    return parser


def run(
    config: MonitorConfig,
    engine: ContainerEngine | None = None,
    stream: TextIO | None = None,
    stop: threading.Event | None = None,
) -> None:
    manifest = load_manifest(config.compose_file)
    for name, svc in manifest.services.items():
        logger.debug(
            f"Service {name}: image={svc.image} container_name={svc.container_name}"
        )

    expected = expected_names(manifest)
    logger.info(f"Container names to monitor: {sorted(expected)}")

    returncode = run_compose(
        config.compose_file, config.compose_args, binary=config.compose_binary
    )
    if returncode != 0 and config.fail_on_deploy_error:
        raise DeploymentError(
            f"{config.compose_binary} compose exited with code {returncode}", returncode
        )

    if engine is None:
        engine = ContainerEngine.from_env()

    if config.wait_ready > 0:
        wait_until_ready(
            engine,
            expected,
            timeout=config.wait_ready,
            interval=config.interval,
            retries=config.retries,
        )

    log = monitor_containers(
        engine,
        expected,
        config.ticks,
        interval=config.interval,
        retries=config.retries,
        stop=stop,
    )
    logger.info(f"Collected {len(log)} observations over {config.ticks} ticks")

    output_result(log, config.fmt, stream)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ConfigError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug(f"Configuration: {config}")

    try:
        run(config)
    except ComposeMonitorError as e:
        logger.error(f"error: {e.message}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.error("interrupted, no report written")
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
