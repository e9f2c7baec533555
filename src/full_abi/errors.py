"""Error taxonomy for full ABI assembly."""

from typing import Optional


class FullAbiError(Exception):
    """Base class for every error raised by the assembler."""


# Configuration errors: raised before any network activity.

class ConfigurationError(FullAbiError):
    pass


class UnsupportedNetworkError(ConfigurationError):
    def __init__(self, network: str, supported):
        self.network = network
        self.supported = list(supported)
        super().__init__(
            f"Unsupported network: {network}. Available networks: {', '.join(self.supported)}"
        )


class MissingCredentialError(ConfigurationError):
    pass


class InvalidAddressError(ConfigurationError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Invalid contract address: {address!r}")


# Resolution errors: a required capability is missing, the run aborts.

class ResolutionError(FullAbiError):
    pass


class ProxyResolutionFailed(ResolutionError):
    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Could not resolve EIP-1967 implementation of {address}: {reason}")


class ModuleAccessorMissing(ResolutionError):
    def __init__(self, accessor: str):
        self.accessor = accessor
        super().__init__(
            f"Module accessor '{accessor}' not found in the base contract ABI "
            f"(expected a view function taking one integer index and returning an address)"
        )


class NoValidGettersError(ResolutionError):
    def __init__(self, getters):
        self.getters = list(getters)
        super().__init__(
            f"No valid getter functions found (tried: {', '.join(self.getters) or 'none'})"
        )


# ABI source errors.

class AbiSourceError(FullAbiError):
    def __init__(self, address: str, message: str):
        self.address = address
        super().__init__(message)


class AbiNotFound(AbiSourceError):
    pass


class TransportError(AbiSourceError):
    pass


# Chain probe errors.

class ChainProbeError(FullAbiError):
    pass


class RpcError(ChainProbeError):
    pass


class CallReverted(ChainProbeError):
    def __init__(self, message: str, data: Optional[str] = None):
        self.data = data
        super().__init__(message)


class CallDecodeError(ChainProbeError):
    pass


class PersistenceError(FullAbiError):
    def __init__(self, label: str, message: str):
        self.label = label
        super().__init__(message)
