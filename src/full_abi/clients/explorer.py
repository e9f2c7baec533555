"""Etherscan-backed ABI source."""

import json
import logging
import time
from typing import Any, Dict, Optional

import requests

from ..errors import AbiNotFound, MissingCredentialError, TransportError
from ..models import ContractAbi, Network, parse_abi
from .base import AbiSource
from .constants import ETHERSCAN_API_URL

logger = logging.getLogger(__name__)


class EtherscanAbiSource(AbiSource):
    """Fetch verified contract ABIs from the Etherscan v2 multichain API."""

    RATE_LIMIT_MARKERS = ('rate limit', 'max calls per sec')

    def __init__(
        self,
        etherscan_api_key: Optional[str],
        max_retries: int = 3,
        timeout: int = 10,
        retry_delay: float = 0.7,
    ):
        """
        Initialize the ABI source.

        Args:
            etherscan_api_key: Etherscan API key
            max_retries: Maximum attempts per ABI request
            timeout: Per-request timeout in seconds
            retry_delay: Base delay for linear backoff between attempts
        """
        if not etherscan_api_key:
            raise MissingCredentialError("ETHERSCAN_API_KEY is not set")
        self.etherscan_api_key = etherscan_api_key
        self.max_retries = max(1, max_retries)
        self.timeout = timeout
        self.retry_delay = retry_delay

    def _get_api_base_url(self, chain_id: int) -> str:
        return f"{ETHERSCAN_API_URL}?chainid={chain_id}"

    def _request(self, address: str, chain_id: int) -> Dict[str, Any]:
        params = {
            'module': 'contract',
            'action': 'getabi',
            'address': address,
            'apikey': self.etherscan_api_key
        }
        try:
            response = requests.get(self._get_api_base_url(chain_id), params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise TransportError(address, f"Failed to fetch ABI for {address}: {e}") from e
        except ValueError as e:
            raise TransportError(address, f"Invalid JSON from Etherscan for {address}: {e}") from e

        if not isinstance(data, dict):
            raise TransportError(address, f"Unexpected Etherscan response for {address}: {data!r}")
        return data

    def _is_rate_limited(self, data: Dict[str, Any]) -> bool:
        text = f"{data.get('message', '')} {data.get('result', '')}".lower()
        return any(marker in text for marker in self.RATE_LIMIT_MARKERS)

    def _parse_response(self, address: str, data: Dict[str, Any]) -> ContractAbi:
        if data.get('status') != '1':
            if self._is_rate_limited(data):
                raise TransportError(address, f"Etherscan rate limit reached: {data.get('result')}")
            raise AbiNotFound(
                address,
                f"Etherscan API error for {address}: {data.get('message', 'unknown error')} ({data.get('result')})"
            )

        try:
            raw = json.loads(data['result'])
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            return parse_abi(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise AbiNotFound(address, f"Unparseable ABI returned for {address}: {e}") from e

    def fetch(self, address: str, network: Network) -> ContractAbi:
        logger.info(f"Fetching ABI for contract: {address} on {network.name}")

        last_error = None
        for attempt in range(self.max_retries):
            try:
                abi = self._parse_response(address, self._request(address, network.chain_id))
            except TransportError as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    logger.warning(f"Attempt {attempt + 1} failed, retrying... ({e})")
                    time.sleep(self.retry_delay * (attempt + 1))
                continue

            logger.info(f"Fetched ABI with {len(abi)} entries from {address}")
            return abi

        logger.error(f"Giving up on ABI for {address} after {self.max_retries} attempts")
        raise last_error
