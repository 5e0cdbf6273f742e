"""
Configuration module for the airdrop claim engine.

Centralizes settings with environment variable support and validates
deployment descriptors loaded from JSON.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from .encoding import normalize_address
from .hashing import hex32

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("AIRDROP_ENV", "dev")  # dev|stage|prod

# Default chain for commands that are not given a deployment
CHAIN_ID = int(os.getenv("AIRDROP_CHAIN_ID", "1"))

# Logging
LOG_LEVEL = os.getenv("AIRDROP_LOG_LEVEL", "WARNING")
LOG_JSON = os.getenv("AIRDROP_LOG_JSON", "1").lower() in ("1", "true", "yes")
LOG_FILE = os.getenv("AIRDROP_LOG_FILE") or None

# Paths
LEDGER_PATH = os.getenv("AIRDROP_LEDGER_PATH", "data/claims.db")
DEPLOYMENT_PATH = os.getenv("AIRDROP_DEPLOYMENT_PATH", "deployment.json")


# ============================================================
# Deployment Descriptor
# ============================================================

class Deployment(BaseModel):
    """
    Parameters an Airdrop instance was constructed with.

    Example file:
        {
            "merkle_root": "0x...",
            "signer": "0x...",
            "owner": "0x...",
            "chain_id": 1,
            "contract_address": "0x..."
        }
    """
    merkle_root: str
    signer: str
    owner: str
    chain_id: int = Field(default=CHAIN_ID, ge=0)
    contract_address: str

    @field_validator("merkle_root")
    @classmethod
    def _check_root(cls, v: str) -> str:
        return hex32(v)

    @field_validator("signer", "owner", "contract_address")
    @classmethod
    def _check_address(cls, v: str) -> str:
        return normalize_address(v)


def load_deployment(path: Optional[Union[str, Path]] = None) -> Deployment:
    """Load and validate a deployment descriptor."""
    path = path or DEPLOYMENT_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return Deployment.model_validate(data)


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("AIRDROP_DEBUG", "").lower() in ("1", "true", "yes")
