import logging
import subprocess
from collections.abc import Sequence

from compose_monitor.errors import InvocationError

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "docker"
DEFAULT_SUBCOMMAND = "compose"


def build_command(
    manifest_path: str,
    args: Sequence[str],
    binary: str = DEFAULT_BINARY,
    subcommand: str = DEFAULT_SUBCOMMAND,
) -> list[str]:
    return [binary, subcommand, "-f", manifest_path, *args]


def run_compose(
    manifest_path: str,
    args: Sequence[str],
    binary: str = DEFAULT_BINARY,
    subcommand: str = DEFAULT_SUBCOMMAND,
) -> int:
    """
    Run the orchestration command and wait for it.

    stdout/stderr are inherited so the user sees compose's own output.
    The exit code is returned as-is; deciding whether it is fatal is
    left to the caller.
    """
    cmd = build_command(manifest_path, args, binary=binary, subcommand=subcommand)
    logger.info(f"Running {subcommand} with args: {list(args)}")
    logger.debug(f"Command line: {cmd}")

    try:
        completed = subprocess.run(cmd, check=False)
    except OSError as e:
        raise InvocationError(
            f"cannot run {binary}: {e}", {"command": cmd}
        ) from e

    if completed.returncode != 0:
        logger.warning(f"{binary} {subcommand} exited with code {completed.returncode}")
    else:
        logger.info(f"{binary} {subcommand} finished")
    return completed.returncode
