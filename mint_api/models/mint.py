from __future__ import annotations

"""
Mint intake models.

MintRequest fields are all optional at the schema level: a request with a
missing or empty field is answered with the service's own 400
"Missing required parameters." rather than a generic 422.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = ("name", "img", "ethAddress", "description")


class MintRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, description="Display name of the NFT.")
    img: Optional[str] = Field(default=None, description="Image / metadata pointer stored as the token URI.")
    ethAddress: Optional[str] = Field(default=None, description="Receiver address (0x + 40 hex).")
    description: Optional[str] = Field(default=None, description="Free-form description.")

    def missing_fields(self) -> List[str]:
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or value == "":
                missing.append(name)
        return missing


class MintAccepted(BaseModel):
    message: str = Field("NFT Mint Request Sent!", description="Human-readable acknowledgement.")
    backend: Literal["log", "local"] = Field(..., description="Backend that handled the request.")
    name: str
    ethAddress: str
    tokenId: Optional[int] = Field(default=None, description="Allocated identifier (local backend only).")
    txIndex: Optional[int] = Field(default=None, description="Host transaction index (local backend only).")
    authority: Optional[str] = Field(default=None, description="Authority address (local backend only).")


class RootInfo(BaseModel):
    message: str = "Aurora NFT Mint API Version 1"


__all__ = ["REQUIRED_FIELDS", "MintRequest", "MintAccepted", "RootInfo"]
