"""
mint_api
========

HTTP intake for Aurora NFT mint requests plus a small admin CLI.

    POST /MintNFT  {name, img, ethAddress, description}

Requests are validated and logged; with ``MINT_BACKEND=local`` they are also
issued against a MintOnAurora authority held in a local host snapshot.
"""

from .version import __version__

__all__ = ["__version__"]
