from __future__ import annotations
from typing import Any, Dict

import pandas as pd

from accounts.account import AllocationRequest
from common.amounts import ZERO, sum_amounts
from portfolio.allocation import AllocationResult

def allocation_summary(result: AllocationResult) -> pd.DataFrame:
    """One row per portfolio, in result order, with its share of the total."""
    total = sum_amounts(result.values())
    rows = [
        {
            "portfolio": name,
            "amount": float(amount),
            "share": float(amount / total) if total > ZERO else 0.0,
        }
        for name, amount in result.items()
    ]
    return pd.DataFrame(rows, columns=["portfolio", "amount", "share"])

def deposit_summary(request: AllocationRequest) -> Dict[str, Any]:
    return {
        "deposit_count": len(request.deposits),
        "total_deposited": request.total_deposits(),
        "plan_totals": {p.type.value: p.total for p in request.plans},
    }
