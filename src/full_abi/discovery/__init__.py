"""Module discovery: proxy resolution, index probing and getter resolution."""

from .enumerator import ModuleEnumerator
from .fetching import FetchOutcome, fetch_module_abis
from .proxies import ProxyResolver
from .shared import DiscoveryContext, is_zero_address, to_module_address
from .sources import (
    DEFAULT_MODULE_ACCESSOR,
    DiscoveryPlan,
    GetterListSource,
    IndexProbeSource,
    ModuleAddressSource,
    ProxyIndexProbeSource,
)

__all__ = [
    "DEFAULT_MODULE_ACCESSOR",
    "DiscoveryContext",
    "DiscoveryPlan",
    "FetchOutcome",
    "GetterListSource",
    "IndexProbeSource",
    "ModuleAddressSource",
    "ModuleEnumerator",
    "ProxyIndexProbeSource",
    "ProxyResolver",
    "fetch_module_abis",
    "is_zero_address",
    "to_module_address",
]
