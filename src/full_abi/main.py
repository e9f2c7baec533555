#!/usr/bin/env python3
"""
Main entry point for the full ABI fetcher.

This script orchestrates the assembly workflow:
1. Parse command-line arguments
2. Build the ABI source, chain probe and persistence collaborators
3. Discover modules and merge their events
4. Report the outcome through the exit code
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .clients import EtherscanAbiSource, Web3ChainProbe, resolve_network
from .core import AbiAssembler
from .discovery import (
    DEFAULT_MODULE_ACCESSOR,
    GetterListSource,
    IndexProbeSource,
    ModuleAddressSource,
    ProxyIndexProbeSource,
)
from .errors import FullAbiError
from .persistence import JsonFilePersistence

logger = logging.getLogger(__name__)

TRUTHY = {'1', 'true', 'yes', 'on'}


def parse_getters(value: Optional[str]) -> List[str]:
    """Split a comma-separated getter list, dropping blanks."""
    if not value:
        return []
    return [name.strip() for name in value.split(',') if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Fetch the ABI of a modular contract and merge the events of all its submodules',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (can also be set in .env file):
  CONTRACT_ADDRESS      Main contract address
  NETWORK               Network name (mainnet, sepolia, hoodi)
  GETTERS               Comma-separated list of submodule getter names (optional)
  PROXY                 Resolve the EIP-1967 implementation first (1/true/yes)
  MODULE_ACCESSOR       Index-based module accessor name (default: modules)
  ETHERSCAN_API_KEY     Etherscan API key
  RPC_URL               JSON-RPC endpoint (default: public endpoint of the network)
  OUTPUT_DIR            Directory for baseAbi.json, module ABIs and fullAbi.json (default: .)
  MAX_WORKERS           Concurrent module ABI fetches (default: 4)

Priority: Command-line arguments > Environment variables > Defaults
        """
    )
    parser.add_argument(
        '-a', '--address',
        default=os.getenv('CONTRACT_ADDRESS'),
        help='Main contract address (env: CONTRACT_ADDRESS)'
    )
    parser.add_argument(
        '-n', '--network',
        default=os.getenv('NETWORK'),
        help='Network where the contract is deployed, e.g. mainnet, sepolia (env: NETWORK)'
    )
    parser.add_argument(
        '-g', '--getters',
        default=os.getenv('GETTERS'),
        help='Comma-separated list of contract getter names (env: GETTERS, optional)'
    )
    parser.add_argument(
        '--proxy',
        action='store_true',
        default=(os.getenv('PROXY') or '').strip().lower() in TRUTHY,
        help='Treat the address as an EIP-1967 proxy and use its implementation ABI (env: PROXY)'
    )
    parser.add_argument(
        '--accessor',
        default=os.getenv('MODULE_ACCESSOR') or DEFAULT_MODULE_ACCESSOR,
        help=f'Index-based module accessor function (env: MODULE_ACCESSOR, default: {DEFAULT_MODULE_ACCESSOR})'
    )
    parser.add_argument(
        '--api-key',
        default=os.getenv('ETHERSCAN_API_KEY'),
        help='Etherscan API key (env: ETHERSCAN_API_KEY)'
    )
    parser.add_argument(
        '--rpc-url',
        default=os.getenv('RPC_URL'),
        help='JSON-RPC endpoint (env: RPC_URL, default: network public endpoint)'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=Path(os.getenv('OUTPUT_DIR') or '.'),
        help='Output directory (env: OUTPUT_DIR, default: .)'
    )
    parser.add_argument(
        '--max-workers',
        type=int,
        default=os.getenv('MAX_WORKERS') or '4',
        help='Concurrent module ABI fetches (env: MAX_WORKERS, default: 4)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        default=False,
        help='Enable debug logging, also written to fetch_full_abi.log in the output directory'
    )
    return parser


def configure_logging(debug: bool, output_dir: Path) -> None:
    handlers = [logging.StreamHandler()]
    if debug:
        output_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(output_dir / 'fetch_full_abi.log'))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def build_source(args: argparse.Namespace) -> ModuleAddressSource:
    getters = parse_getters(args.getters)
    if getters:
        return GetterListSource(getters)
    if args.proxy:
        return ProxyIndexProbeSource(accessor=args.accessor)
    return IndexProbeSource(accessor=args.accessor)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv(override=True)

    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate required arguments
    if not args.address:
        parser.error("--address is required (or set CONTRACT_ADDRESS environment variable)")
    if not args.network:
        parser.error("--network is required (or set NETWORK environment variable)")
    if not args.api_key:
        parser.error("--api-key is required (or set ETHERSCAN_API_KEY environment variable)")
    if args.getters and args.proxy:
        parser.error("--getters cannot be combined with --proxy")
    if args.getters and not parse_getters(args.getters):
        parser.error("--getters must name at least one getter")
    if args.max_workers < 1:
        parser.error("--max-workers must be at least 1")

    configure_logging(args.debug, args.output_dir)

    try:
        network = resolve_network(args.network, args.rpc_url)
        assembler = AbiAssembler(
            abi_source=EtherscanAbiSource(args.api_key),
            chain_probe=Web3ChainProbe(network.rpc_url),
            persistence=JsonFilePersistence(args.output_dir),
            source=build_source(args),
            max_workers=args.max_workers,
        )
        result = assembler.assemble(args.address, network)
    except FullAbiError as e:
        logger.error(f"❌ Error fetching full ABI: {e}")
        print(f"❌ Error fetching full ABI: {e}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        print(f"⚠️  {warning}", file=sys.stderr)

    full_abi_path = args.output_dir / f"{AbiAssembler.FULL_ABI_LABEL}.json"
    print(
        f"✅ Full ABI successfully generated and saved to {full_abi_path} "
        f"({len(result.modules)} module(s), {len(result.added_events)} event(s) added)"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
