"""Service layer for mint_api; routers and the CLI call into these."""

from .mint import MintService, authority_summary

__all__ = ["MintService", "authority_summary"]
