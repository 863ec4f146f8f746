"""Request/response models for mint_api."""

from .common import normalize_evm_address
from .mint import MintAccepted, MintRequest, RootInfo

__all__ = ["normalize_evm_address", "MintAccepted", "MintRequest", "RootInfo"]
