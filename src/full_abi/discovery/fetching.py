"""Parallel ABI fetching for modules whose addresses are already known."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from ..clients.base import AbiSource
from ..errors import AbiSourceError
from ..models import ContractAbi, Network

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    key: Any
    address: str
    abi: Optional[ContractAbi] = None
    error: Optional[AbiSourceError] = None


def fetch_module_abis(
    abi_source: AbiSource,
    targets: Sequence[Tuple[Any, str]],
    network: Network,
    max_workers: int = 4,
) -> List[FetchOutcome]:
    """
    Fetch the ABI of every target address.

    Fetches have no ordering dependency on each other, so they run in a
    thread pool. Failures are captured per target instead of raised.

    Args:
        abi_source: ABI source to fetch from
        targets: (key, address) pairs; key is returned untouched
        network: Network the modules live on
        max_workers: Upper bound on concurrent fetches

    Returns:
        One FetchOutcome per target, in the order of `targets`
    """
    if not targets:
        return []

    def fetch_one(key: Any, address: str) -> FetchOutcome:
        short_addr = address[:10] + "..."
        t0 = time.time()
        try:
            abi = abi_source.fetch(address, network)
        except AbiSourceError as e:
            logger.warning(f"  [{short_addr}] ✗ {e}")
            return FetchOutcome(key, address, error=e)
        logger.info(f"  [{short_addr}] ✓ {len(abi)} entries ({time.time() - t0:.1f}s)")
        return FetchOutcome(key, address, abi=abi)

    workers = max(1, min(max_workers, len(targets)))
    logger.info(f"Fetching {len(targets)} module ABI(s) with {workers} worker(s)...")

    results: List[Optional[FetchOutcome]] = [None] * len(targets)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(fetch_one, key, address): position
            for position, (key, address) in enumerate(targets)
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    return results
