from enum import Enum
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field, ConfigDict

T = TypeVar("T")


class ErrorKind(str, Enum):
    UNAUTHORIZED = "err-unauthorized"
    NOT_FOUND = "err-not-found"
    INSUFFICIENT_INVENTORY = "err-insufficient-inventory"
    INVALID_AMOUNT = "err-invalid-amount"
    INVALID_INPUT = "err-invalid-input"


class Result(BaseModel, Generic[T]):
    """Outcome of a ledger call: either ``value`` or ``error`` is set."""

    success: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: ErrorKind) -> "Result[T]":
        return cls(success=False, error=error)


class LoyaltyProgram(BaseModel):
    id: int = Field(..., ge=1)
    name: str
    owner: str
    point_name: str
    active: bool = True

    model_config = ConfigDict(from_attributes=True)


class Reward(BaseModel):
    id: int = Field(..., ge=1)
    name: str
    description: str
    cost: int = Field(..., ge=0)
    inventory: int = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class CreateProgramRequest(BaseModel):
    name: str
    point_name: str

    model_config = ConfigDict(json_schema_extra={
        "example": {"name": "Coffee Rewards", "point_name": "Coffee Points"}
    })


class IssuePointsRequest(BaseModel):
    user: str = Field(..., description="Identity receiving the points")
    amount: int

    model_config = ConfigDict(json_schema_extra={
        "example": {"user": "ST2PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM", "amount": 100}
    })


class AddRewardRequest(BaseModel):
    name: str
    description: str = ""
    cost: int
    inventory: int

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Free Coffee",
            "description": "Get a free coffee",
            "cost": 100,
            "inventory": 50
        }
    })


class RedeemRewardRequest(BaseModel):
    amount: int


class ProgramCreatedResponse(BaseModel):
    program_id: int


class RewardCreatedResponse(BaseModel):
    reward_id: int


class PointBalance(BaseModel):
    program_id: int
    user: str
    balance: int


class UserRedemptions(BaseModel):
    user: str
    reward_id: int
    amount: int


class OperationResponse(BaseModel):
    success: bool
    message: str
