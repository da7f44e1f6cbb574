from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from accounts.account import AllocationRequest, Deposit
from policy.allocation_policy import AllocationPolicy
from policy.types import DepositPlan
from portfolio.allocation import PortfolioAllocation


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _entries(raw: Mapping[str, Any], key: str) -> List[Any]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _first(entry: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in entry:
            return entry[k]
    return None


def build_plan(entry: Mapping[str, Any]) -> DepositPlan:
    entry = _mapping(entry, "Plan entry")
    allocations = []
    for a in _entries(entry, "allocations"):
        a = _mapping(a, "Allocation entry")
        allocations.append(
            PortfolioAllocation(
                portfolio_name=_first(a, "portfolio", "portfolio_name") or "",
                amount=a.get("amount", 0),
            )
        )
    return DepositPlan(type=entry.get("type"), allocations=tuple(allocations))


def build_deposit(entry: Mapping[str, Any]) -> Deposit:
    entry = _mapping(entry, "Deposit entry")
    return Deposit(
        amount=entry.get("amount", 0),
        reference_code=_first(entry, "reference", "reference_code") or "",
    )


def build_request(raw: Mapping[str, Any]) -> AllocationRequest:
    """Build a request from a plain mapping; validation is left to the allocator."""
    raw = _mapping(raw, "Request")
    plans: List[DepositPlan] = [build_plan(p) for p in _entries(raw, "plans")]
    deposits: List[Deposit] = [build_deposit(d) for d in _entries(raw, "deposits")]
    return AllocationRequest(plans=tuple(plans), deposits=tuple(deposits))


def load_request(path: str | Path) -> AllocationRequest:
    return build_request(load_yaml(path))


def load_policy(path: Optional[str | Path] = None) -> AllocationPolicy:
    """Read the ``allocator`` section; a missing file means defaults."""
    if path is None:
        return AllocationPolicy()
    try:
        raw = load_yaml(path)
    except FileNotFoundError:
        return AllocationPolicy()
    raw = _mapping(raw, "Settings")
    return AllocationPolicy(dict(_mapping(raw.get("allocator") or {}, "'allocator' section")))


@dataclass(frozen=True)
class LoadedConfig:
    request: AllocationRequest
    policy: AllocationPolicy


def load_all(
    request_path: str | Path,
    settings_path: Optional[str | Path] = "config/allocator.yaml",
) -> LoadedConfig:
    return LoadedConfig(
        request=load_request(request_path),
        policy=load_policy(settings_path),
    )
