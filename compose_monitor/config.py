from dataclasses import dataclass, field

from compose_monitor.deploy import DEFAULT_BINARY
from compose_monitor.monitor import DEFAULT_INTERVAL
from compose_monitor.output import FORMATS

DEFAULT_TICKS = 10


class ConfigError(ValueError):
    pass


@dataclass
class MonitorConfig:
    """
    Everything one run needs, resolved from the command line.
    """

    compose_file: str
    compose_args: list[str] = field(default_factory=list)
    ticks: int = DEFAULT_TICKS
    interval: float = DEFAULT_INTERVAL
    fmt: str = "json"
    wait_ready: float = 0.0
    retries: int = 0
    fail_on_deploy_error: bool = False
    compose_binary: str = DEFAULT_BINARY
    verbose: bool = False

    def __post_init__(self):
        if not self.compose_file:
            raise ConfigError("compose file path must not be empty")
        if self.ticks < 0:
            raise ConfigError(f"monitor duration must be >= 0, got {self.ticks}")
        if self.interval < 0:
            raise ConfigError(f"interval must be >= 0, got {self.interval}")
        if self.wait_ready < 0:
            raise ConfigError(f"wait-ready timeout must be >= 0, got {self.wait_ready}")
        if self.retries < 0:
            raise ConfigError(f"retries must be >= 0, got {self.retries}")
        if self.fmt not in FORMATS:
            raise ConfigError(f"format must be one of {FORMATS}, got '{self.fmt}'")


def _strip_separator(args: list[str]) -> list[str]:
    # argparse.REMAINDER keeps a leading "--" the user typed to end our options
    if args and args[0] == "--":
        return args[1:]
    return args


def build_config(args) -> MonitorConfig:
    return MonitorConfig(
        compose_file=args.compose_file,
        compose_args=_strip_separator(list(args.compose_args or [])),
        ticks=args.monitor_duration,
        interval=args.interval,
        fmt=args.format,
        wait_ready=args.wait_ready,
        retries=args.retries,
        fail_on_deploy_error=args.fail_on_deploy_error,
        compose_binary=args.compose_binary,
        verbose=args.verbose,
    )
