from __future__ import annotations

"""
Configuration loader for the mint intake service.

Reads environment variables (optionally from `.env`) via pydantic-settings and
exposes a cached `load_config()` accessor.

Environment variables:
    LOG_LEVEL          (str, default "INFO")
    HOST               (str, default "0.0.0.0")
    PORT               (int, default 3000)
    SERVICE_NAME       (str, default "mint-api")
    MINT_BACKEND       ("log" | "local", default "log")
    STATE_PATH         (path, default "./.aurora/state.json")
    AUTHORITY_ADDRESS  (0x-hex, required for the local backend)
    MINTER_ADDRESS     (0x-hex, required for the local backend)
    MINT_CLAIMABLE     (bool, default False)
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aurora_vm.context import ContextError, normalize_address, to_hex


class Settings(BaseSettings):
    # Core
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    host: str = Field("0.0.0.0", description="Bind address for the HTTP server")
    port: int = Field(3000, ge=1, le=65535, description="Bind port for the HTTP server")
    service_name: str = Field("mint-api", description="Value of the 'service' log field")

    # Minting
    mint_backend: Literal["log", "local"] = Field(
        "log", description="'log' only records requests; 'local' issues against a host snapshot"
    )
    state_path: Path = Field(Path("./.aurora/state.json"), description="Host snapshot used by the local backend")
    authority_address: Optional[str] = Field(default=None, description="Deployed MintOnAurora address")
    minter_address: Optional[str] = Field(default=None, description="Account holding the minter role")
    mint_claimable: bool = Field(False, description="Issue with a pre-approved minter operator")

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).strip().upper() if v is not None else "INFO"

    @field_validator("mint_backend", mode="before")
    @classmethod
    def _lower_backend(cls, v):
        return str(v).strip().lower() if v is not None else "log"

    @field_validator("authority_address", "minter_address", mode="before")
    @classmethod
    def _canonical_address(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        try:
            return to_hex(normalize_address(str(v).strip()))
        except ContextError as e:
            raise ValueError(e.message) from e

    def local_ready(self) -> bool:
        return self.authority_address is not None and self.minter_address is not None

    def summary(self) -> dict:
        """JSON-friendly dump for logs and `show-config`."""
        data = self.model_dump()
        data["state_path"] = str(self.state_path)
        return data


@lru_cache(maxsize=1)
def load_config() -> Settings:
    return Settings()


__all__ = ["Settings", "load_config"]
