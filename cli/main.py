"""Deposit allocator CLI.

Provides commands for:
- allocate: Split a request's deposits across portfolios
- validate: Check a request without allocating
"""
from __future__ import annotations

import argparse
import json
import logging

import yaml

from common.config_loader import load_all, load_request
from engine.deposit_allocator import DepositAllocator
from engine.explanation_engine import explain_steps
from engine.validation import validate_request
from reporting.explainability import explainability_report
from reporting.summary import allocation_summary, deposit_summary


def cmd_allocate(args) -> int:
    """Handle allocate command: run the allocator and print the result."""
    try:
        cfg = load_all(args.request, args.settings)
        outcome = DepositAllocator(cfg.policy).run(cfg.request)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(explainability_report(outcome, cfg.request), indent=2))
        return 0

    summary = deposit_summary(cfg.request)
    print(f"Deposit Allocation: {summary['total_deposited']:,.2f} from {summary['deposit_count']} deposit(s)")
    print("=" * 50)

    print("\nPlans:")
    for plan_type, total in summary["plan_totals"].items():
        print(f"  {plan_type}: {total:,.2f}")

    print("\nAllocations:")
    df = allocation_summary(outcome.result)
    for row in df.itertuples(index=False):
        print(f"  {row.portfolio}: {row.amount:,.2f} ({row.share:.2%})")

    if args.explain:
        print("\nSteps:")
        for line in explain_steps(outcome.steps):
            print("  " + line)

    if outcome.unallocated > 0:
        print(f"\nWarning: {outcome.unallocated:,.2f} left unallocated")

    return 0


def cmd_validate(args) -> int:
    """Handle validate command: report the first problem in a request."""
    try:
        validate_request(load_request(args.request))
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 1
    print("OK")
    return 0


def main():
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Deposit allocator CLI: split deposits across portfolios by plan",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log each allocation step")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Allocate command
    alloc_p = sub.add_parser("allocate", help="Allocate deposits from a request file")
    alloc_p.add_argument("request", help="Request YAML with plans and deposits")
    alloc_p.add_argument("--settings", default="config/allocator.yaml", help="Allocator settings file")
    alloc_p.add_argument("--explain", action="store_true", help="Show the steps that produced the result")
    alloc_p.add_argument("--json", action="store_true", help="Print a JSON report instead of a table")
    alloc_p.set_defaults(func=cmd_allocate)

    # Validate command
    val_p = sub.add_parser("validate", help="Validate a request file")
    val_p.add_argument("request", help="Request YAML with plans and deposits")
    val_p.set_defaults(func=cmd_validate)

    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
