"""
Module-address sources.

Each source decides how the submodules of a deployment are found:

- IndexProbeSource: probe a fixed `accessor(uint256)` until it fails
- GetterListSource: call a user-supplied list of no-argument getters
- ProxyIndexProbeSource: resolve the EIP-1967 implementation, then probe
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..abi import ABI
from ..errors import ChainProbeError, ModuleAccessorMissing, NoValidGettersError
from ..models import AbiEntry, ContractAbi, DiscoveryResult, ModuleRecord, StopReason
from .enumerator import ModuleEnumerator
from .fetching import fetch_module_abis
from .proxies import ProxyResolver
from .shared import DiscoveryContext, is_zero_address, to_module_address

logger = logging.getLogger(__name__)

DEFAULT_MODULE_ACCESSOR = "modules"


@dataclass
class DiscoveryPlan:
    """Functions validated against the base ABI, ready to be called."""
    targets: List[Tuple[str, AbiEntry]]
    warnings: List[str] = field(default_factory=list)


class ModuleAddressSource:
    """
    Abstract module-address strategy.

    Subclasses implement prepare() and discover(). The base ABI comes from
    the main address unless resolve_abi_address() is overridden.
    """

    name = "base"

    def resolve_abi_address(self, context: DiscoveryContext) -> str:
        """Address whose ABI is the base ABI. Calls still target context.address."""
        return context.address

    def prepare(self, base_abi: ContractAbi) -> DiscoveryPlan:
        """Check the base ABI exposes what discovery needs. Raises ResolutionError."""
        raise NotImplementedError

    def discover(self, context: DiscoveryContext, plan: DiscoveryPlan) -> DiscoveryResult:
        raise NotImplementedError


class IndexProbeSource(ModuleAddressSource):
    name = "index-probe"

    def __init__(
        self,
        accessor: str = DEFAULT_MODULE_ACCESSOR,
        max_probe_retries: int = 2,
        max_probes: int = 1000,
    ):
        self.accessor = accessor
        self.max_probe_retries = max_probe_retries
        self.max_probes = max_probes

    def prepare(self, base_abi: ContractAbi) -> DiscoveryPlan:
        entry = ABI(base_abi).find_module_accessor(self.accessor)
        if entry is None:
            raise ModuleAccessorMissing(self.accessor)
        logger.info(f"✓ Module accessor found: {self.accessor}({entry.inputs[0].type})")
        return DiscoveryPlan(targets=[(self.accessor, entry)])

    def discover(self, context: DiscoveryContext, plan: DiscoveryPlan) -> DiscoveryResult:
        _, accessor = plan.targets[0]
        enumerator = ModuleEnumerator(
            context.chain_probe,
            context.abi_source,
            max_workers=context.max_workers,
            max_probe_retries=self.max_probe_retries,
            max_probes=self.max_probes,
        )
        enumeration = enumerator.enumerate(context.address, accessor, context.network)

        result = DiscoveryResult(records=list(enumeration.records), warnings=list(plan.warnings))
        stop = enumeration.stop

        if enumeration.last_index is None:
            result.warnings.append(
                f"No modules found: {self.accessor}(0) failed ({stop.reason.value}): {stop.detail}"
            )
        elif stop.reason is not StopReason.REVERTED:
            result.warnings.append(
                f"Module discovery ended at index {stop.index} ({stop.reason.value}), "
                f"module set may be incomplete: {stop.detail}"
            )

        for warning in result.warnings:
            logger.warning(warning)
        return result


class ProxyIndexProbeSource(IndexProbeSource):
    name = "proxy-index-probe"

    def resolve_abi_address(self, context: DiscoveryContext) -> str:
        return ProxyResolver(context.chain_probe).resolve(context.address, context.network)


class GetterListSource(ModuleAddressSource):
    name = "getter-list"

    def __init__(self, getters: Sequence[str]):
        self.getters = [g.strip() for g in getters if g and g.strip()]

    def prepare(self, base_abi: ContractAbi) -> DiscoveryPlan:
        abi = ABI(base_abi)
        plan = DiscoveryPlan(targets=[])

        for getter in self.getters:
            entry = abi.find_getter(getter)
            if entry is None:
                warning = f"Getter function '{getter}' not found in the base contract ABI"
                logger.warning(f"Warning: {warning}")
                plan.warnings.append(warning)
                continue
            plan.targets.append((getter, entry))

        if not plan.targets:
            raise NoValidGettersError(self.getters)
        return plan

    def discover(self, context: DiscoveryContext, plan: DiscoveryPlan) -> DiscoveryResult:
        result = DiscoveryResult(warnings=list(plan.warnings))

        def skip(getter: str, reason: str) -> None:
            warning = f"Error processing getter {getter}: {reason}"
            logger.warning(warning)
            result.warnings.append(warning)

        resolved = []
        for position, (getter, entry) in enumerate(plan.targets):
            try:
                value = context.chain_probe.call(context.address, entry, getter, [])
            except ChainProbeError as e:
                skip(getter, str(e))
                continue

            module_address = to_module_address(value)
            if module_address is None:
                skip(getter, f"returned a non-address value: {value!r}")
                continue
            if is_zero_address(module_address):
                skip(getter, "returned the zero address")
                continue

            logger.info(f"  {getter}() -> {module_address}")
            resolved.append(((position, getter), module_address))

        for outcome in fetch_module_abis(context.abi_source, resolved, context.network, context.max_workers):
            position, getter = outcome.key
            if outcome.error is not None:
                skip(getter, str(outcome.error))
                continue
            result.records.append(ModuleRecord(position, outcome.address, outcome.abi, getter))
            logger.info(f"Processed submodule from getter: {getter}")

        return result
