from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Tuple

from common.amounts import sum_amounts, to_amount
from policy.types import DepositPlan


@dataclass(frozen=True)
class Deposit:
    amount: Decimal
    reference_code: str  # kept for traceability, not used by the allocation math

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_amount(self.amount))


@dataclass(frozen=True)
class AllocationRequest:
    plans: Tuple[DepositPlan, ...] = field(default_factory=tuple)
    deposits: Tuple[Deposit, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "plans", tuple(self.plans or ()))
        object.__setattr__(self, "deposits", tuple(self.deposits or ()))

    def total_deposits(self) -> Decimal:
        return total_deposits(self.deposits)


def total_deposits(deposits: Iterable[Deposit]) -> Decimal:
    return sum_amounts(d.amount for d in deposits)
