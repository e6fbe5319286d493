from fastapi import Depends, FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from .config import configure_logging, settings
from .models import (
    AddRewardRequest, CreateProgramRequest, ErrorKind, IssuePointsRequest,
    LoyaltyProgram, OperationResponse, PointBalance, ProgramCreatedResponse,
    RedeemRewardRequest, Result, Reward, RewardCreatedResponse, UserRedemptions,
)
from .service import ProgramLedger, RewardLedger

app = FastAPI(
    title=settings.app_title,
    description="Loyalty points issuance and reward redemption ledgers",
    version=settings.app_version,
    root_path=settings.root_path,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

program_ledger = ProgramLedger()
reward_ledger = RewardLedger()

_ERROR_STATUS = {
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INSUFFICIENT_INVENTORY: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
}


def get_program_ledger() -> ProgramLedger:
    return program_ledger


def get_reward_ledger() -> RewardLedger:
    return reward_ledger


def get_caller(caller: str = Header(..., alias=settings.caller_header)) -> str:
    return caller


def _unwrap(result: Result):
    if not result.success:
        raise HTTPException(status_code=_ERROR_STATUS[result.error], detail=result.error.value)
    return result.value


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "healthy", "service": "loyalty-ledger"}


@app.post("/programs", response_model=ProgramCreatedResponse, status_code=status.HTTP_201_CREATED, tags=["Programs"])
def create_program(
    request: CreateProgramRequest,
    caller: str = Depends(get_caller),
    ledger: ProgramLedger = Depends(get_program_ledger),
) -> ProgramCreatedResponse:
    program_id = _unwrap(ledger.create_program(request.name, request.point_name, caller))
    return ProgramCreatedResponse(program_id=program_id)


@app.get("/programs/{program_id}", response_model=LoyaltyProgram, tags=["Programs"])
def get_program(program_id: int, ledger: ProgramLedger = Depends(get_program_ledger)) -> LoyaltyProgram:
    return _unwrap(ledger.get_program(program_id))


@app.post("/programs/{program_id}/points", response_model=OperationResponse, tags=["Programs"])
def issue_points(
    program_id: int,
    request: IssuePointsRequest,
    caller: str = Depends(get_caller),
    ledger: ProgramLedger = Depends(get_program_ledger),
) -> OperationResponse:
    _unwrap(ledger.issue_points(program_id, request.user, request.amount, caller))
    return OperationResponse(success=True, message=f"Issued {request.amount} points to {request.user}")


@app.post("/programs/{program_id}/deactivate", response_model=OperationResponse, tags=["Programs"])
def deactivate_program(
    program_id: int,
    caller: str = Depends(get_caller),
    ledger: ProgramLedger = Depends(get_program_ledger),
) -> OperationResponse:
    _unwrap(ledger.deactivate_program(program_id, caller))
    return OperationResponse(success=True, message="Program deactivated")


@app.get("/programs/{program_id}/balances/{user:path}", response_model=PointBalance, tags=["Programs"])
def get_balance(program_id: int, user: str, ledger: ProgramLedger = Depends(get_program_ledger)) -> PointBalance:
    balance = _unwrap(ledger.get_balance(program_id, user))
    return PointBalance(program_id=program_id, user=user, balance=balance)


@app.post("/rewards", response_model=RewardCreatedResponse, status_code=status.HTTP_201_CREATED, tags=["Rewards"])
def add_reward(
    request: AddRewardRequest,
    caller: str = Depends(get_caller),
    ledger: RewardLedger = Depends(get_reward_ledger),
) -> RewardCreatedResponse:
    reward_id = _unwrap(ledger.add_reward(
        request.name, request.description, request.cost, request.inventory, caller
    ))
    return RewardCreatedResponse(reward_id=reward_id)


@app.get("/rewards/{reward_id}", response_model=Reward, tags=["Rewards"])
def get_reward(reward_id: int, ledger: RewardLedger = Depends(get_reward_ledger)) -> Reward:
    return _unwrap(ledger.get_reward(reward_id))


@app.post("/rewards/{reward_id}/redeem", response_model=OperationResponse, tags=["Rewards"])
def redeem_reward(
    reward_id: int,
    request: RedeemRewardRequest,
    caller: str = Depends(get_caller),
    ledger: RewardLedger = Depends(get_reward_ledger),
) -> OperationResponse:
    _unwrap(ledger.redeem_reward(reward_id, request.amount, caller))
    return OperationResponse(success=True, message=f"Redeemed {request.amount} of reward {reward_id}")


@app.get("/users/{user:path}/redemptions/{reward_id}", response_model=UserRedemptions, tags=["Users"])
def get_user_redemptions(
    user: str, reward_id: int, ledger: RewardLedger = Depends(get_reward_ledger)
) -> UserRedemptions:
    amount = _unwrap(ledger.get_user_redemptions(user, reward_id))
    return UserRedemptions(user=user, reward_id=reward_id, amount=amount)


if __name__ == "__main__":
    import uvicorn
    configure_logging()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
