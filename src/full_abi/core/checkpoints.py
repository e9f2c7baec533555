"""Persistence checkpoints: failures are logged, never fatal."""

import logging
from typing import List

from ..errors import PersistenceError
from ..models import ContractAbi

logger = logging.getLogger(__name__)


class AssemblerCheckpointMixin:
    def _checkpoint(self, document: ContractAbi, label: str, warnings: List[str]) -> bool:
        """
        Hand an ABI artifact to the persistence collaborator.

        Args:
            document: ABI to save
            label: Artifact name (baseAbi, fullAbi, or a module label)
            warnings: Run warnings; a failed save is appended here

        Returns:
            True if the artifact was saved
        """
        try:
            self.persistence.save(document, label)
        except (PersistenceError, OSError) as e:
            logger.error(f"✗ Could not persist {label}: {e}")
            warnings.append(f"Could not persist {label}: {e}")
            return False
        return True
