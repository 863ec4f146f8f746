from __future__ import annotations

"""
Mint intake routes.

  - GET  /         : API banner
  - POST /MintNFT  : validate and hand a mint request to the configured backend

Thin shims over `mint_api.services.mint`; errors are raised as ApiError and
rendered as problem+json by the error middleware.
"""

from typing import Optional

from fastapi import APIRouter, Body, Request, status

from mint_api.models.mint import MintAccepted, MintRequest, RootInfo
from mint_api.services.mint import MintService

router = APIRouter(tags=["mint"])


def _service(request: Request) -> MintService:
    return request.app.state.mint_service


@router.get("/", summary="API banner", response_model=RootInfo)
def root() -> RootInfo:
    return RootInfo()


@router.post(
    "/MintNFT",
    summary="Submit an NFT mint request",
    response_model=MintAccepted,
    response_model_exclude_none=True,
    status_code=status.HTTP_202_ACCEPTED,
)
def mint_nft(request: Request, payload: Optional[MintRequest] = Body(default=None)) -> MintAccepted:
    """
    Accept ``{name, img, ethAddress, description}``. Any missing or empty
    field is a 400 "Missing required parameters.".
    """
    return _service(request).submit(payload)
