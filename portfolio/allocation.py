from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Sequence, Tuple, TypeVar

from common.amounts import ZERO, Amount, round_amount, sum_amounts, to_amount

T = TypeVar("T")

AllocationResult = Dict[str, Decimal]  # portfolio name -> amount, first-touched order


@dataclass(frozen=True)
class PortfolioAllocation:
    portfolio_name: str
    amount: Decimal  # target share within a plan

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_amount(self.amount))


def split_with_remainder(
    items: Sequence[T],
    total: Decimal,
    weight: Callable[[T], Decimal],
) -> List[Tuple[T, Decimal]]:
    """Split ``total`` over ``items`` by ``weight``; the last item takes the exact residual.

    ``weight`` returns each item's fraction of ``total``. Every item but the
    last receives ``weight(item) * total``; the last receives whatever is left,
    so the parts always add up to ``total``.
    """
    parts: List[Tuple[T, Decimal]] = []
    given = ZERO
    last = len(items) - 1
    for i, item in enumerate(items):
        if i == last:
            share = total - given
        else:
            share = weight(item) * total
        parts.append((item, share))
        given += share
    return parts


class AllocationLedger:
    """Ordered accumulator of allocated amounts per portfolio."""

    def __init__(self) -> None:
        self._amounts: "OrderedDict[str, Decimal]" = OrderedDict()

    def add(self, portfolio_name: str, amount: Amount) -> None:
        self._amounts[portfolio_name] = self._amounts.get(portfolio_name, ZERO) + to_amount(amount)

    def get(self, portfolio_name: str) -> Decimal:
        return self._amounts.get(portfolio_name, ZERO)

    def names(self) -> List[str]:
        return list(self._amounts)

    def funded(self) -> List[str]:
        return [n for n, v in self._amounts.items() if v > 0]

    def total(self) -> Decimal:
        return sum_amounts(self._amounts.values())

    def __len__(self) -> int:
        return len(self._amounts)

    def __contains__(self, portfolio_name: object) -> bool:
        return portfolio_name in self._amounts

    def rounded(self, places: int = 2) -> AllocationResult:
        return OrderedDict((n, round_amount(v, places)) for n, v in self._amounts.items())
