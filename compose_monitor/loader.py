import logging
from typing import Any

import yaml

from compose_monitor.errors import ManifestFormatError, ManifestReadError
from compose_monitor.model import ServiceDeclaration, ServiceManifest

logger = logging.getLogger(__name__)

# ----------------------------
# Compose manifest loader
# ----------------------------


def build_service(name: str, spec: Any, source: str) -> ServiceDeclaration:
    if not isinstance(spec, dict):
        raise ManifestFormatError(
            f"{source}: service '{name}' must be a mapping",
            {"service": name},
        )

    image = spec.get("image")
    if image is None:
        raise ManifestFormatError(
            f"{source}: service '{name}' missing required field 'image'",
            {"service": name},
        )
    if not isinstance(image, str):
        raise ManifestFormatError(
            f"{source}: service '{name}'.image must be a string",
            {"service": name},
        )

    # container_name: null is the same as leaving it out
    container_name = spec.get("container_name")
    if container_name is not None and not isinstance(container_name, str):
        raise ManifestFormatError(
            f"{source}: service '{name}'.container_name must be a string",
            {"service": name},
        )

    return ServiceDeclaration(image=image, container_name=container_name)


def parse_manifest(text: str, source: str = "<string>") -> ServiceManifest:
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestFormatError(f"{source}: invalid YAML: {e}") from e

    if not isinstance(doc, dict):
        raise ManifestFormatError(f"{source}: manifest must be a mapping")

    services = doc.get("services")
    if services is None:
        raise ManifestFormatError(f"{source}: manifest has no 'services' section")
    if not isinstance(services, dict):
        raise ManifestFormatError(f"{source}: 'services' must be a mapping")

    manifest = ServiceManifest()
    for name, spec in services.items():
        manifest.services[str(name)] = build_service(str(name), spec, source)

    logger.debug(f"Parsed {len(manifest)} services from {source}")
    return manifest


def load_manifest(path: str) -> ServiceManifest:
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(
            f"cannot read manifest {path}: {e}", {"path": path}
        ) from e

    return parse_manifest(text, source=path)
