"""Request validation for the deposit allocator.

Checks run in a fixed order and the first violation is raised; nothing is
allocated until every check has passed.
"""
from __future__ import annotations

from typing import Optional

from accounts.account import AllocationRequest

MAX_PLANS = 2


class AllocationError(ValueError):
    """Base error for an allocation request that cannot be processed."""

    pass


class InvalidPlansError(AllocationError):
    """Plan list is empty, too long, or repeats a plan type."""

    pass


class InvalidPlanError(AllocationError):
    """A single plan is structurally invalid."""

    pass


class InvalidAllocationError(AllocationError):
    """An allocation entry has a negative amount or an empty portfolio name."""

    pass


class InvalidDepositsError(AllocationError):
    """Deposit list is empty."""

    pass


class InvalidDepositError(AllocationError):
    """A deposit has a non-positive amount or an empty reference code."""

    pass


def _blank(text: Optional[str]) -> bool:
    return not text or not str(text).strip()


def validate_request(request: AllocationRequest) -> None:
    plans = request.plans
    deposits = request.deposits

    if not plans:
        raise InvalidPlansError("At least one deposit plan is required")

    if len(plans) > MAX_PLANS:
        raise InvalidPlansError(f"Maximum {MAX_PLANS} deposit plans allowed")

    if not deposits:
        raise InvalidDepositsError("At least one deposit is required")

    plan_types = [p.type for p in plans]
    if len(set(plan_types)) != len(plan_types):
        raise InvalidPlansError("Duplicate plan types not allowed")

    if any(not p.allocations for p in plans):
        raise InvalidPlanError("Each plan must have at least one allocation")

    allocations = [a for p in plans for a in p.allocations]
    if any(a.amount < 0 for a in allocations):
        raise InvalidAllocationError("Allocation amounts cannot be negative")
    if any(_blank(a.portfolio_name) for a in allocations):
        raise InvalidAllocationError("Portfolio name cannot be empty")

    if any(d.amount <= 0 for d in deposits):
        raise InvalidDepositError("Deposit amounts must be positive")
    if any(_blank(d.reference_code) for d in deposits):
        raise InvalidDepositError("Reference code cannot be empty")
