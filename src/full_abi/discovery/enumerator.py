"""Index-based module enumeration."""

import logging
import time
from typing import List, Optional, Sequence, Tuple, Union

from ..clients.base import AbiSource, ChainProbe
from ..errors import AbiNotFound, CallDecodeError, CallReverted, ChainProbeError
from ..models import (
    AbiEntry,
    EnumerationResult,
    ModuleRecord,
    Network,
    ProbeStop,
    ProbeSuccess,
    StopReason,
)
from .fetching import fetch_module_abis
from .shared import is_zero_address, to_module_address

logger = logging.getLogger(__name__)

ProbeOutcome = Union[ProbeSuccess, ProbeStop]


class ModuleEnumerator:
    """
    Probe `accessor(0)`, `accessor(1)`, ... until the first failing call.

    Probes are strictly sequential: whether index i+1 is probed depends on the
    outcome of index i. A zero address is a placeholder slot and does not end
    the enumeration.
    """

    def __init__(
        self,
        chain_probe: ChainProbe,
        abi_source: AbiSource,
        max_workers: int = 4,
        max_probe_retries: int = 2,
        retry_delay: float = 0.7,
        max_probes: Optional[int] = 1000,
    ):
        """
        Args:
            chain_probe: Probe used for accessor calls
            abi_source: Source for module ABIs
            max_workers: Concurrent module ABI fetches once probing is done
            max_probe_retries: Extra attempts for a probe that failed with a transport error
            retry_delay: Base delay for linear backoff between probe attempts
            max_probes: Safety cap on probed indices (None for no cap)
        """
        self.chain_probe = chain_probe
        self.abi_source = abi_source
        self.max_workers = max_workers
        self.max_probe_retries = max(0, max_probe_retries)
        self.retry_delay = retry_delay
        self.max_probes = max_probes

    def probe(self, address: str, accessor: AbiEntry, index: int) -> ProbeOutcome:
        attempt = 0
        while True:
            try:
                value = self.chain_probe.call(address, accessor, accessor.name, [index])
                break
            except CallReverted as e:
                return ProbeStop(index, StopReason.REVERTED, str(e))
            except CallDecodeError as e:
                return ProbeStop(index, StopReason.DECODE_ERROR, str(e))
            except ChainProbeError as e:
                if attempt >= self.max_probe_retries:
                    return ProbeStop(index, StopReason.TRANSPORT_ERROR, str(e))
                attempt += 1
                logger.warning(f"Probe {accessor.name}({index}) attempt {attempt} failed, retrying... ({e})")
                time.sleep(self.retry_delay * attempt)

        module_address = to_module_address(value)
        if module_address is None:
            return ProbeStop(index, StopReason.DECODE_ERROR, f"accessor returned a non-address value: {value!r}")
        return ProbeSuccess(index, module_address)

    def probe_addresses(self, address: str, accessor: AbiEntry) -> Tuple[List[ProbeSuccess], Optional[int], ProbeStop]:
        """
        Run the probing phase.

        Returns:
            (non-placeholder hits in index order, highest successful index or None, terminating stop)
        """
        hits: List[ProbeSuccess] = []
        last_index: Optional[int] = None
        index = 0

        while True:
            if self.max_probes is not None and index >= self.max_probes:
                stop = ProbeStop(index, StopReason.LIMIT_REACHED, f"probe limit of {self.max_probes} reached")
                break

            outcome = self.probe(address, accessor, index)
            if isinstance(outcome, ProbeStop):
                stop = outcome
                break

            last_index = index
            if is_zero_address(outcome.address):
                logger.info(f"  [{index}] placeholder (zero address), skipping")
            else:
                logger.info(f"  [{index}] ✓ module at {outcome.address}")
                hits.append(outcome)
            index += 1

        logger.info(f"Probing stopped at index {stop.index} ({stop.reason.value}): {stop.detail}")
        return hits, last_index, stop

    def _build_records(
        self,
        hits: Sequence[ProbeSuccess],
        network: Network,
        stop: ProbeStop,
    ) -> Tuple[List[ModuleRecord], ProbeStop]:
        outcomes = fetch_module_abis(
            self.abi_source,
            [(hit.index, hit.address) for hit in hits],
            network,
            self.max_workers,
        )

        records = []
        for hit, outcome in zip(hits, outcomes):
            if outcome.error is not None:
                # A missing module ABI ends discovery at that index.
                reason = StopReason.ABI_UNAVAILABLE if isinstance(outcome.error, AbiNotFound) else StopReason.TRANSPORT_ERROR
                dropped = len(hits) - len(records)
                logger.warning(
                    f"✗ ABI fetch failed for module {hit.index} at {hit.address}, "
                    f"ending discovery there ({dropped} module(s) dropped): {outcome.error}"
                )
                return records, ProbeStop(hit.index, reason, str(outcome.error))
            records.append(ModuleRecord(hit.index, hit.address, outcome.abi, f"module_{hit.index}"))

        return records, stop

    def enumerate(self, address: str, accessor: AbiEntry, network: Network) -> EnumerationResult:
        """
        Discover every module reachable through the accessor.

        Args:
            address: Contract the accessor is called on
            accessor: Validated accessor ABI entry
            network: Network the contract lives on

        Returns:
            EnumerationResult with records ordered by index
        """
        logger.info(f"Enumerating modules via {accessor.name}(index) on {address}...")
        hits, last_index, stop = self.probe_addresses(address, accessor)
        records, stop = self._build_records(hits, network, stop)
        logger.info(f"Discovered {len(records)} module(s)")
        return EnumerationResult(records=tuple(records), last_index=last_index, stop=stop)
