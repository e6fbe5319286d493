"""
Loyalty Ledger

This module provides:
- Program ledger: owner-gated point issuance and program deactivation
- Reward ledger: inventory-gated reward redemption with per-user counters
- Typed results for every call, with a fixed set of error kinds
"""

from .models import (
    ErrorKind,
    Result,
    LoyaltyProgram,
    Reward,
)
from .service import ProgramLedger, RewardLedger

__all__ = [
    "ErrorKind",
    "Result",
    "LoyaltyProgram",
    "Reward",
    "ProgramLedger",
    "RewardLedger",
]
