"""Deposit allocation engine.

Splits the sum of a request's deposits across portfolios following up to two
plans:
- One-time plan: fulfilled once, proportionally scaled down on a shortfall
- Monthly plan: as many full cycles as funds allow, then one partial cycle
- One-time leftover: partial pass when no monthly plan absorbed the rest
- Remainder: spread over already-funded portfolios by their current share

Results are rounded half-up to cents once, at the very end.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from accounts.account import AllocationRequest
from common.amounts import ZERO, round_amount, working_precision
from engine.validation import validate_request
from policy.allocation_policy import AllocationPolicy
from policy.types import DepositPlan, DepositPlanType
from portfolio.allocation import AllocationLedger, AllocationResult, split_with_remainder

logger = logging.getLogger(__name__)


class StepKind(Enum):
    """Stages of the fulfillment sequence, in execution order."""

    ONE_TIME = "one_time"
    MONTHLY_CYCLES = "monthly_cycles"
    MONTHLY_PARTIAL = "monthly_partial"
    ONE_TIME_PARTIAL = "one_time_partial"
    REMAINDER = "remainder"


@dataclass(frozen=True)
class AllocationStep:
    kind: StepKind
    plan_type: Optional[DepositPlanType]
    consumed: Decimal
    cycles: int = 0


@dataclass(frozen=True)
class AllocationOutcome:
    """Rounded result plus the steps that produced it."""

    result: AllocationResult
    steps: Tuple[AllocationStep, ...]
    unallocated: Decimal  # funds no step could place, rounded like the result


def find_plan(plans: Sequence[DepositPlan], plan_type: DepositPlanType) -> Optional[DepositPlan]:
    for p in plans:
        if p.type == plan_type:
            return p
    return None


def fulfill_plan(plan: DepositPlan, available: Decimal, ledger: AllocationLedger) -> Decimal:
    """Fund ``plan`` up to its total, scaling every allocation down on a shortfall.

    Returns the amount consumed.
    """
    plan_total = plan.total
    if plan_total == 0:
        for alloc in plan.allocations:
            ledger.add(alloc.portfolio_name, ZERO)
        return ZERO

    to_allocate = min(plan_total, available)
    for alloc in plan.allocations:
        # min() caps rounding overshoot when to_allocate == plan_total
        amount = min(alloc.amount, alloc.amount / plan_total * to_allocate)
        ledger.add(alloc.portfolio_name, amount)
    return to_allocate


def fulfill_cycles(plan: DepositPlan, cycles: int, ledger: AllocationLedger) -> Decimal:
    """Apply ``cycles`` complete fulfillments of ``plan`` at once."""
    for alloc in plan.allocations:
        ledger.add(alloc.portfolio_name, alloc.amount * cycles)
    return plan.total * cycles


def fulfill_plan_partially(plan: DepositPlan, available: Decimal, ledger: AllocationLedger) -> Decimal:
    """Spread ``available`` over ``plan`` in proportion to its amounts.

    The last allocation absorbs the residual so the parts sum to ``available``.
    A zero-total plan consumes nothing.
    """
    plan_total = plan.total
    if plan_total == 0:
        return ZERO

    allocated = ZERO
    for alloc, amount in split_with_remainder(plan.allocations, available, lambda a: a.amount / plan_total):
        ledger.add(alloc.portfolio_name, amount)
        allocated += amount
    return allocated


def distribute_remainder(remaining: Decimal, ledger: AllocationLedger, minimum_amount: Decimal) -> bool:
    """Spread ``remaining`` over funded portfolios by their current share.

    Returns False when nothing is funded yet, in which case the ledger is untouched.
    """
    total_allocated = ledger.total()
    if total_allocated <= minimum_amount:
        return False

    funded = ledger.funded()
    parts = split_with_remainder(funded, remaining, lambda name: ledger.get(name) / total_allocated)
    for name, amount in parts:
        ledger.add(name, amount)
    return True


@dataclass(frozen=True)
class DepositAllocator:
    """Stateless allocator; one instance can serve concurrent callers."""

    policy: AllocationPolicy = field(default_factory=AllocationPolicy)

    def allocate(self, request: AllocationRequest) -> AllocationResult:
        return self.run(request).result

    def run(self, request: AllocationRequest) -> AllocationOutcome:
        validate_request(request)

        amounts = [d.amount for d in request.deposits]
        amounts += [a.amount for p in request.plans for a in p.allocations]
        amounts.append(self.policy.minimum_amount)
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, working_precision(amounts, self.policy.decimal_places))
            return self._fulfill(request)

    def _fulfill(self, request: AllocationRequest) -> AllocationOutcome:
        minimum = self.policy.minimum_amount
        one_time = find_plan(request.plans, DepositPlanType.ONE_TIME)
        monthly = find_plan(request.plans, DepositPlanType.MONTHLY)

        ledger = AllocationLedger()
        steps: List[AllocationStep] = []
        remaining = request.total_deposits()
        logger.debug("Allocating %s from %d deposit(s)", remaining, len(request.deposits))

        if one_time is not None:
            consumed = fulfill_plan(one_time, remaining, ledger)
            remaining -= consumed
            steps.append(AllocationStep(StepKind.ONE_TIME, DepositPlanType.ONE_TIME, consumed))
            logger.debug("One-time plan consumed %s, %s left", consumed, remaining)

        if monthly is not None and remaining > 0:
            monthly_total = monthly.total
            if monthly_total > 0:
                cycles = int(remaining // monthly_total)
                if cycles:
                    consumed = fulfill_cycles(monthly, cycles, ledger)
                    remaining -= consumed
                    steps.append(
                        AllocationStep(StepKind.MONTHLY_CYCLES, DepositPlanType.MONTHLY, consumed, cycles)
                    )
                    logger.debug("Monthly plan: %d full cycle(s) consumed %s", cycles, consumed)

                if remaining > minimum:
                    consumed = fulfill_plan_partially(monthly, remaining, ledger)
                    remaining -= consumed
                    steps.append(AllocationStep(StepKind.MONTHLY_PARTIAL, DepositPlanType.MONTHLY, consumed))
                    logger.debug("Monthly plan: partial cycle consumed %s", consumed)

        # Only reachable without a monthly plan, or with a zero-total one
        if one_time is not None and remaining > minimum:
            consumed = fulfill_plan_partially(one_time, remaining, ledger)
            remaining -= consumed
            steps.append(AllocationStep(StepKind.ONE_TIME_PARTIAL, DepositPlanType.ONE_TIME, consumed))
            logger.debug("One-time plan: leftover pass consumed %s", consumed)

        if remaining > minimum:
            if distribute_remainder(remaining, ledger, minimum):
                steps.append(AllocationStep(StepKind.REMAINDER, None, remaining))
                logger.debug("Remainder %s spread over funded portfolios", remaining)
                remaining = ZERO
            else:
                logger.warning("No funded portfolio to absorb remainder %s; left unallocated", remaining)

        places = self.policy.decimal_places
        return AllocationOutcome(
            result=ledger.rounded(places),
            steps=tuple(steps),
            unallocated=round_amount(remaining, places),
        )


def allocate_deposits(request: AllocationRequest, policy: Optional[AllocationPolicy] = None) -> AllocationResult:
    allocator = DepositAllocator(policy) if policy is not None else DepositAllocator()
    return allocator.allocate(request)
