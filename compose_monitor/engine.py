import logging
from typing import Any

import docker
import requests
from docker.errors import DockerException

from compose_monitor.errors import EngineQueryError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("Id", "Image", "Names", "Status")


def validate_container(entry: Any) -> dict[str, Any]:
    if not isinstance(entry, dict):
        raise EngineQueryError(
            f"engine returned a non-mapping container entry: {entry!r}"
        )

    missing = [f for f in REQUIRED_FIELDS if f not in entry]
    if missing:
        raise EngineQueryError(
            f"engine container entry missing fields {missing}",
            {"entry": entry},
        )

    for key in ("Id", "Image", "Status"):
        if not isinstance(entry[key], str):
            raise EngineQueryError(f"engine container field '{key}' must be a string")

    names = entry["Names"]
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise EngineQueryError(
            "engine container field 'Names' must be a list of strings"
        )

    return entry


class ContainerEngine:
    """
    Thin wrapper over the low-level Docker API `containers` listing.

    `api` is anything with a `containers(all=...)` method returning the
    raw JSON list, normally `docker.APIClient`.
    """

    def __init__(self, api: Any):
        self.api = api

    @classmethod
    def from_env(cls) -> "ContainerEngine":
        try:
            client = docker.from_env()
        except DockerException as e:
            raise EngineQueryError(f"cannot connect to container engine: {e}") from e
        return cls(client.api)

    def list_containers(self) -> list[dict[str, Any]]:
        """
        One list-containers call, no filters pushed to the engine.
        Entries come back in engine order.
        """
        try:
            raw = self.api.containers(all=False)
        except (DockerException, requests.exceptions.RequestException) as e:
            raise EngineQueryError(f"container engine query failed: {e}") from e

        if not isinstance(raw, list):
            raise EngineQueryError(
                f"engine returned {type(raw).__name__}, expected a list"
            )

        containers = [validate_container(c) for c in raw]
        logger.debug(f"Engine reported {len(containers)} containers")
        return containers
