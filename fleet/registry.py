"""External vehicle registry collaborators."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from .snapshot import RegistrySnapshot

logger = logging.getLogger(__name__)


class Registry:
    """Source of registry snapshots. Session handling is the implementation's concern."""

    def fetch_snapshot(self, vehicle_id: str) -> Optional[RegistrySnapshot]:
        raise NotImplementedError


class FileRegistry(Registry):
    """
    Registry payloads saved as <dir>/<vehicle_id>.yaml or .json.

    Used for offline imports and tests; the payload uses the registry's
    camelCase field names.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def fetch_snapshot(self, vehicle_id: str) -> Optional[RegistrySnapshot]:
        for suffix in (".yaml", ".yml", ".json"):
            path = self.directory / f"{vehicle_id}{suffix}"
            if path.exists():
                logger.info("Loading registry snapshot for %s from %s", vehicle_id, path)
                return load_snapshot(path)
        logger.info("No registry snapshot for %s in %s", vehicle_id, self.directory)
        return None


def load_snapshot(filename: Union[str, Path]) -> RegistrySnapshot:
    """Read a registry payload file (YAML or JSON) into a snapshot."""
    with open(filename, "r") as fp:
        if str(filename).endswith(".json"):
            data = json.load(fp)
        else:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
    return RegistrySnapshot.from_dict(data)
