from dataclasses import dataclass, field
from typing import Optional

# ----------------------------
# Manifest model
# ----------------------------

NAME_SEPARATOR = "/"


@dataclass(frozen=True)
class ServiceDeclaration:
    """
    One entry under `services:` in a compose manifest.
    """

    image: str
    container_name: Optional[str] = None


@dataclass
class ServiceManifest:
    """
    Services in document order, keyed by service name.
    """

    services: dict[str, ServiceDeclaration] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.services)

    def container_names(self) -> list[str]:
        return [
            svc.container_name
            for svc in self.services.values()
            if svc.container_name is not None
        ]


# ----------------------------
# Name utilities
# ----------------------------


def normalize_name(name: str) -> str:
    # The engine reports names as "/web"; compose declares "web".
    return name.lstrip(NAME_SEPARATOR)


def expected_names(manifest: ServiceManifest) -> frozenset[str]:
    """
    Names to watch for. Services without an explicit container_name are
    skipped, never inferred from the image or the service key.
    """
    return frozenset(manifest.container_names())
