"""Pipeline orchestrator: resolve, fetch, discover, merge, persist."""

import logging
from typing import Union

from web3 import Web3

from ..clients.constants import resolve_network
from ..discovery import DiscoveryContext
from ..errors import InvalidAddressError
from ..models import AssemblyResult, Network

logger = logging.getLogger(__name__)


class AssemblerPipelineMixin:
    def assemble(self, address: str, network: Union[str, Network]) -> AssemblyResult:
        """
        Build the full ABI of a modular deployment.

        Steps:
        1. Validate network and address (no network activity before this)
        2. Resolve the address holding the base ABI (proxy variant only)
        3. Fetch and persist the base ABI
        4. Check the accessor/getter precondition
        5. Discover modules and persist each module ABI
        6. Merge events and persist the full ABI

        Args:
            address: Main contract address
            network: Network identifier, e.g. "mainnet", or a resolved
                Network, used as-is so an RPC override is kept

        Returns:
            AssemblyResult

        Raises:
            ConfigurationError, ResolutionError, AbiSourceError: on any
            failure of the mandatory base-resolution phase
        """
        if isinstance(network, Network):
            resolved_network = network
        else:
            resolved_network = resolve_network(network)
        if not Web3.is_address(address or ""):
            raise InvalidAddressError(address)
        address = Web3.to_checksum_address(address)

        return self._run(address, resolved_network)

    def _run(self, address: str, network: Network) -> AssemblyResult:
        logger.info(f"Starting full ABI assembly for {address} on {network.name} ({self.source.name})")
        warnings = []

        context = DiscoveryContext(
            address=address,
            network=network,
            chain_probe=self.chain_probe,
            abi_source=self.abi_source,
            max_workers=self.max_workers,
        )

        # Step 1: Resolve the contract whose ABI describes the main surface
        abi_address = self.source.resolve_abi_address(context)
        if abi_address != address:
            logger.info(f"Using implementation ABI from {abi_address}")

        # Step 2: Fetch base contract ABI
        base_abi = self.abi_source.fetch(abi_address, network)
        self._checkpoint(base_abi, self.BASE_ABI_LABEL, warnings)

        # Step 3: Ensure the base ABI exposes the module accessor/getters
        plan = self.source.prepare(base_abi)

        # Step 4: Discover submodules and their ABIs
        discovery = self.source.discover(context, plan)
        warnings.extend(discovery.warnings)
        for record in discovery.records:
            self._checkpoint(record.abi, record.label, warnings)

        # Step 5: Merge base ABI with module events
        merged = self.merger.merge(base_abi, discovery.records)
        self._checkpoint(merged.full_abi, self.FULL_ABI_LABEL, warnings)

        logger.info(
            f"✓ Full ABI assembled: {len(merged.full_abi)} entries, "
            f"{len(discovery.records)} module(s), {len(warnings)} warning(s)"
        )

        return AssemblyResult(
            network=network,
            address=address,
            abi_address=abi_address,
            base_abi=base_abi,
            modules=list(discovery.records),
            full_abi=merged.full_abi,
            added_events=merged.added_events,
            warnings=warnings,
        )
