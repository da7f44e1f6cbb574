"""Tests for allocation summaries and explanations."""
from __future__ import annotations

import json
from decimal import Decimal

import pytest

from accounts.account import AllocationRequest, Deposit
from engine.deposit_allocator import DepositAllocator
from engine.explanation_engine import explain_steps
from policy.types import DepositPlan
from reporting.explainability import explainability_report
from reporting.summary import allocation_summary, deposit_summary


def make_request() -> AllocationRequest:
    return AllocationRequest(
        plans=(
            DepositPlan.of("ONE_TIME", [("Aggressive", 2000), ("Conservative", 1000)]),
            DepositPlan.of("MONTHLY", [("Conservative", 300), ("Bonds", 200)]),
        ),
        deposits=(Deposit(4000, "REF-1"), Deposit(750, "REF-2")),
    )


def test_allocation_summary_frame():
    result = DepositAllocator().allocate(make_request())

    df = allocation_summary(result)

    assert list(df.columns) == ["portfolio", "amount", "share"]
    assert list(df["portfolio"]) == ["Aggressive", "Conservative", "Bonds"]
    assert df["amount"].sum() == pytest.approx(4750.0)
    assert df["share"].sum() == pytest.approx(1.0)
    assert df.loc[df["portfolio"] == "Bonds", "share"].iloc[0] == pytest.approx(700 / 4750)


def test_allocation_summary_all_zero():
    df = allocation_summary({"A": Decimal("0.00")})

    assert df["share"].tolist() == [0.0]


def test_deposit_summary():
    summary = deposit_summary(make_request())

    assert summary["deposit_count"] == 2
    assert summary["total_deposited"] == Decimal("4750")
    assert summary["plan_totals"] == {"ONE_TIME": Decimal("3000"), "MONTHLY": Decimal("500")}


def test_explain_steps():
    outcome = DepositAllocator().run(make_request())

    lines = explain_steps(outcome.steps)

    assert lines == [
        "One-time plan: 3,000.00",
        "Monthly plan, full cycles: 1,500.00  |  3 cycle(s)",
        "Monthly plan, partial cycle: 250.00",
    ]


def test_explainability_report_is_json_friendly():
    request = make_request()
    outcome = DepositAllocator().run(request)

    report = explainability_report(outcome, request)

    json.dumps(report)
    assert report["allocations"] == {"Aggressive": "2000.00", "Conservative": "2050.00", "Bonds": "700.00"}
    assert [s["kind"] for s in report["steps"]] == ["one_time", "monthly_cycles", "monthly_partial"]
    assert report["steps"][1]["cycles"] == 3
    assert report["summary"]["total_deposited"] == "4750"
    assert report["unallocated"] == "0.00"
