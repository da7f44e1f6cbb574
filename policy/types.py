from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Tuple, Union

from common.amounts import sum_amounts
from portfolio.allocation import PortfolioAllocation


class DepositPlanType(Enum):
    """Kinds of deposit plan; a request holds at most one of each."""

    ONE_TIME = "ONE_TIME"
    """Fulfilled once, before anything else."""

    MONTHLY = "MONTHLY"
    """Fulfilled in as many full cycles as funds allow, then partially."""

    @classmethod
    def parse(cls, value: Union["DepositPlanType", str]) -> "DepositPlanType":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown deposit plan type: {value!r}") from None


@dataclass(frozen=True)
class DepositPlan:
    type: DepositPlanType
    allocations: Tuple[PortfolioAllocation, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", DepositPlanType.parse(self.type))
        object.__setattr__(self, "allocations", tuple(self.allocations or ()))

    @property
    def total(self) -> Decimal:
        return sum_amounts(a.amount for a in self.allocations)

    @classmethod
    def of(cls, plan_type: Union[DepositPlanType, str], targets: Iterable[Tuple[str, object]]) -> "DepositPlan":
        """Build a plan from ``(portfolio_name, amount)`` pairs, keeping their order."""
        return cls(plan_type, tuple(PortfolioAllocation(name, amount) for name, amount in targets))
