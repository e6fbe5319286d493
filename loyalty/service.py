import logging
import threading
from typing import Optional

from .models import (
    ErrorKind,
    LoyaltyProgram,
    Result,
    Reward,
)

logger = logging.getLogger(__name__)


class LedgerServiceError(Exception):
    kind: ErrorKind

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)


class UnauthorizedError(LedgerServiceError):
    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(LedgerServiceError):
    kind = ErrorKind.NOT_FOUND


class InsufficientInventoryError(LedgerServiceError):
    kind = ErrorKind.INSUFFICIENT_INVENTORY


class InvalidAmountError(LedgerServiceError):
    kind = ErrorKind.INVALID_AMOUNT


class InvalidInputError(LedgerServiceError):
    kind = ErrorKind.INVALID_INPUT


def _is_uint(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _require_positive(amount) -> None:
    if not _is_uint(amount) or amount == 0:
        raise InvalidAmountError(f"Amount must be a positive integer, got {amount!r}")


def _require_text(**fields) -> None:
    for field_name, value in fields.items():
        if not isinstance(value, str):
            raise InvalidInputError(f"{field_name} must be a string, got {type(value).__name__}")


class ProgramStorage:
    def __init__(self):
        self.programs: dict[int, LoyaltyProgram] = {}
        self.balances: dict[tuple[int, str], int] = {}
        self.last_id = 0


class RewardStorage:
    def __init__(self):
        self.rewards: dict[int, Reward] = {}
        self.redemptions: dict[tuple[str, int], int] = {}
        self.last_id = 0


class _Ledger:
    """
    Shared scaffolding for the two ledgers.

    One re-entrant lock guards the entity map and its counter map together,
    so every check-then-update runs without interleaving. Ids that are not
    plain non-negative ints never match a stored entry.
    """

    def __init__(self, storage):
        self.storage = storage
        self._lock = threading.RLock()

    def _allocate_id(self) -> int:
        self.storage.last_id += 1
        return self.storage.last_id

    def _reject(self, operation: str, error: LedgerServiceError, **context) -> Result:
        logger.warning("%s rejected: %s (%s) %s", operation, error.kind.value, error, context)
        return Result.fail(error.kind)


class ProgramLedger(_Ledger):
    def __init__(self, storage: Optional[ProgramStorage] = None):
        super().__init__(storage or ProgramStorage())

    def create_program(self, name: str, point_name: str, caller: str) -> Result[int]:
        try:
            _require_text(name=name, point_name=point_name, caller=caller)
        except LedgerServiceError as e:
            return self._reject("create_program", e, caller=caller)

        with self._lock:
            program_id = self._allocate_id()
            self.storage.programs[program_id] = LoyaltyProgram(
                id=program_id,
                name=name,
                owner=caller,
                point_name=point_name,
            )
        logger.info("Program %d created by %s", program_id, caller)
        return Result.ok(program_id)

    def issue_points(self, program_id: int, user: str, amount: int, caller: str) -> Result[bool]:
        with self._lock:
            try:
                self._authorize(program_id, caller, require_active=True)
                _require_positive(amount)
            except LedgerServiceError as e:
                return self._reject("issue_points", e, program_id=program_id, caller=caller)

            key = (program_id, user)
            self.storage.balances[key] = self.storage.balances.get(key, 0) + amount
        logger.info("Issued %d points in program %d to %s", amount, program_id, user)
        return Result.ok(True)

    def deactivate_program(self, program_id: int, caller: str) -> Result[bool]:
        with self._lock:
            try:
                program = self._authorize(program_id, caller)
            except LedgerServiceError as e:
                return self._reject("deactivate_program", e, program_id=program_id, caller=caller)
            program.active = False
        logger.info("Program %d deactivated", program_id)
        return Result.ok(True)

    def get_program(self, program_id: int) -> Result[LoyaltyProgram]:
        with self._lock:
            program = self._lookup(program_id)
            if program is None:
                return Result.fail(ErrorKind.NOT_FOUND)
            return Result.ok(program.model_copy())

    def get_balance(self, program_id: int, user: str) -> Result[int]:
        if not _is_uint(program_id):
            return Result.ok(0)
        with self._lock:
            return Result.ok(self.storage.balances.get((program_id, user), 0))

    def _lookup(self, program_id: int) -> Optional[LoyaltyProgram]:
        if not _is_uint(program_id):
            return None
        return self.storage.programs.get(program_id)

    def _authorize(self, program_id: int, caller: str, require_active: bool = False) -> LoyaltyProgram:
        # Missing, foreign and inactive programs all look the same to the caller.
        program = self._lookup(program_id)
        if program is None or program.owner != caller:
            raise UnauthorizedError(f"Caller may not mutate program {program_id!r}")
        if require_active and not program.active:
            raise UnauthorizedError(f"Caller may not mutate program {program_id!r}")
        return program


class RewardLedger(_Ledger):
    def __init__(self, storage: Optional[RewardStorage] = None):
        super().__init__(storage or RewardStorage())

    def add_reward(
        self, name: str, description: str, cost: int, inventory: int, caller: str
    ) -> Result[int]:
        try:
            _require_text(name=name, description=description)
            if not (_is_uint(cost) and _is_uint(inventory)):
                raise InvalidAmountError(
                    f"Cost and inventory must be non-negative integers, got {cost!r} and {inventory!r}"
                )
        except LedgerServiceError as e:
            return self._reject("add_reward", e, caller=caller)

        with self._lock:
            reward_id = self._allocate_id()
            self.storage.rewards[reward_id] = Reward(
                id=reward_id,
                name=name,
                description=description,
                cost=cost,
                inventory=inventory,
            )
        logger.info("Reward %d added by %s with inventory %d", reward_id, caller, inventory)
        return Result.ok(reward_id)

    def redeem_reward(self, reward_id: int, amount: int, caller: str) -> Result[bool]:
        with self._lock:
            try:
                reward = self._lookup(reward_id)
                if reward is None:
                    raise NotFoundError(f"Reward {reward_id!r} not found")
                _require_positive(amount)
                if reward.inventory < amount:
                    raise InsufficientInventoryError(
                        f"Reward {reward_id} has {reward.inventory} left, {amount} requested"
                    )
            except LedgerServiceError as e:
                return self._reject("redeem_reward", e, reward_id=reward_id, caller=caller)

            reward.inventory -= amount
            key = (caller, reward_id)
            self.storage.redemptions[key] = self.storage.redemptions.get(key, 0) + amount
        logger.info("%s redeemed %d of reward %d", caller, amount, reward_id)
        return Result.ok(True)

    def get_reward(self, reward_id: int) -> Result[Reward]:
        with self._lock:
            reward = self._lookup(reward_id)
            if reward is None:
                return Result.fail(ErrorKind.NOT_FOUND)
            return Result.ok(reward.model_copy())

    def get_user_redemptions(self, user: str, reward_id: int) -> Result[int]:
        if not _is_uint(reward_id):
            return Result.ok(0)
        with self._lock:
            return Result.ok(self.storage.redemptions.get((user, reward_id), 0))

    def _lookup(self, reward_id: int) -> Optional[Reward]:
        if not _is_uint(reward_id):
            return None
        return self.storage.rewards.get(reward_id)
