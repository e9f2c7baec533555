"""
ABI Merger for modular deployments.

Collects the events declared by every discovered submodule and appends the
ones the base contract does not already declare, keeping the base ABI intact.
"""

import logging
from typing import List, Sequence

from .abi import ABI, event_signature
from .models import AbiEntry, ContractAbi, MergeResult, MergeStats, ModuleRecord

logger = logging.getLogger(__name__)


class AbiMerger:
    """Merges submodule events into a base ABI."""

    def extract_events(self, modules: Sequence[ModuleRecord]) -> List[AbiEntry]:
        """Candidate events of every module, concatenated in discovery order."""
        candidates = []
        for module in modules:
            candidates.extend(ABI(module.abi).events())
        return candidates

    def deduplicate(self, events: Sequence[AbiEntry]) -> List[AbiEntry]:
        """
        Stable deduplication by event signature: the first occurrence wins.

        Events without a name cannot be keyed and are dropped.
        """
        seen = set()
        unique = []
        for event in events:
            signature = event_signature(event)
            if signature is None:
                logger.debug("Skipped unnamed event entry")
                continue
            if signature in seen:
                logger.debug(f"Skipped duplicate event: {signature.text}")
                continue
            seen.add(signature)
            unique.append(event)
        return unique

    def merge(self, base_abi: ContractAbi, modules: Sequence[ModuleRecord]) -> MergeResult:
        """
        Produce the full ABI.

        Args:
            base_abi: ABI of the main (implementation) contract
            modules: Discovered modules, ordered by discovery index

        Returns:
            MergeResult whose full_abi is the base ABI followed by every new
            event, in first-discovered order
        """
        stats = MergeStats(base_entries=len(base_abi))
        base_signatures = ABI(base_abi).event_signatures()
        stats.base_events = len(base_signatures)

        candidates = self.extract_events(modules)
        stats.candidate_events = len(candidates)
        unique = self.deduplicate(candidates)
        stats.duplicate_events = len(candidates) - len(unique)

        added = []
        for event in unique:
            signature = event_signature(event)
            if signature in base_signatures:
                logger.debug(f"Event already declared by base contract: {signature.text}")
                continue
            logger.debug(f"Added new event: {signature.text} (topic {signature.topic})")
            added.append(event)
        stats.added_events = len(added)

        full_abi = tuple(base_abi) + tuple(added)

        logger.info("=" * 60)
        logger.info("ABI Merge Summary:")
        logger.info(f"  Modules merged: {len(modules)}")
        logger.info(f"  Base entries: {stats.base_entries} ({stats.base_events} events)")
        logger.info(f"  Candidate events: {stats.candidate_events}")
        logger.info(f"  Duplicates skipped: {stats.duplicate_events}")
        logger.info(f"  New events added: {stats.added_events}")
        logger.info("=" * 60)

        return MergeResult(full_abi=full_abi, added_events=tuple(added), stats=stats)
