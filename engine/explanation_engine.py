from __future__ import annotations
from typing import Iterable, List
from engine.deposit_allocator import AllocationStep, StepKind

_LABELS = {
    StepKind.ONE_TIME: "One-time plan",
    StepKind.MONTHLY_CYCLES: "Monthly plan, full cycles",
    StepKind.MONTHLY_PARTIAL: "Monthly plan, partial cycle",
    StepKind.ONE_TIME_PARTIAL: "One-time plan, leftover pass",
    StepKind.REMAINDER: "Remainder by current share",
}

def explain_steps(steps: Iterable[AllocationStep]) -> List[str]:
    lines = []
    for s in steps:
        line = f"{_LABELS[s.kind]}: {s.consumed:,.2f}"
        if s.kind is StepKind.MONTHLY_CYCLES:
            line += f"  |  {s.cycles} cycle(s)"
        lines.append(line)
    return lines
