from __future__ import annotations
from typing import Any, Dict

from accounts.account import AllocationRequest
from engine.deposit_allocator import AllocationOutcome
from reporting.summary import deposit_summary

def explainability_report(outcome: AllocationOutcome, request: AllocationRequest) -> Dict[str, Any]:
    """JSON-friendly view of an allocation; amounts are rendered as strings."""
    summary = deposit_summary(request)
    return {
        "summary": {
            "deposit_count": summary["deposit_count"],
            "total_deposited": str(summary["total_deposited"]),
            "plan_totals": {k: str(v) for k, v in summary["plan_totals"].items()},
        },
        "steps": [
            {
                "kind": s.kind.value,
                "plan_type": s.plan_type.value if s.plan_type else None,
                "consumed": str(s.consumed),
                "cycles": s.cycles,
            }
            for s in outcome.steps
        ],
        "allocations": {name: str(amount) for name, amount in outcome.result.items()},
        "unallocated": str(outcome.unallocated),
    }
