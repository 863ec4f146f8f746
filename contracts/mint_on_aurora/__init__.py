"""MintOnAurora issuance authority. The deployable module is ``.contract``."""

CONTRACT_MODULE = "contracts.mint_on_aurora.contract"

__all__ = ["CONTRACT_MODULE"]
