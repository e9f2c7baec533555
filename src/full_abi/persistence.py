"""Persistence of ABI artifacts as JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from .errors import PersistenceError
from .models import ContractAbi, dump_abi

logger = logging.getLogger(__name__)


class Persistence:
    def save(self, document: Union[ContractAbi, List[Any]], label: str) -> None:
        raise NotImplementedError


class JsonFilePersistence(Persistence):
    """Write each artifact to `<output_dir>/<label>.json`."""

    def __init__(self, output_dir: Union[str, Path] = "."):
        self.output_dir = Path(output_dir)

    def path_for(self, label: str) -> Path:
        return self.output_dir / f"{label}.json"

    def save(self, document: Union[ContractAbi, List[Any]], label: str) -> None:
        """
        Save an ABI document.

        Args:
            document: Parsed ABI (tuple of entries) or a plain JSON-able list
            label: Artifact name, used as the file stem

        Raises:
            PersistenceError: if the file cannot be written
        """
        if isinstance(document, tuple):
            document = dump_abi(document)

        path = self.path_for(label)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
        except (OSError, TypeError) as e:
            raise PersistenceError(label, f"Failed to save {label} to {path}: {e}") from e

        logger.info(f"ABI saved to {path}")
