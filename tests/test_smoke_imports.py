"""Smoke tests for module imports and the command line."""
from __future__ import annotations

import json
import sys

import pytest

REQUEST_YAML = """
plans:
  - type: ONE_TIME
    allocations:
      - {portfolio: Aggressive, amount: 2000}
      - {portfolio: Conservative, amount: 1000}
  - type: MONTHLY
    allocations:
      - {portfolio: Conservative, amount: 300}
      - {portfolio: Bonds, amount: 200}
deposits:
  - {amount: 4750, reference: DEP-1}
"""


def test_imports():
    """All main modules should be importable."""
    import cli.main
    import common.amounts
    import common.config_loader
    import accounts.account
    import portfolio.allocation
    import policy.types
    import policy.allocation_policy
    import engine.validation
    import engine.deposit_allocator
    import engine.explanation_engine
    import reporting.summary
    import reporting.explainability


def run_cli(monkeypatch, *argv) -> int:
    from cli.main import main

    monkeypatch.setattr(sys, "argv", ["cli.main", *argv])
    with pytest.raises(SystemExit) as exc:
        main()
    return exc.value.code


def test_cli_main_help(monkeypatch, capsys):
    """CLI should show help without error."""
    assert run_cli(monkeypatch, "--help") == 0

    captured = capsys.readouterr()
    assert "allocate" in captured.out


def test_cli_allocate(monkeypatch, capsys, tmp_path):
    req = tmp_path / "request.yaml"
    req.write_text(REQUEST_YAML, encoding="utf-8")

    code = run_cli(monkeypatch, "allocate", str(req), "--settings", str(tmp_path / "none.yaml"), "--explain")

    out = capsys.readouterr().out
    assert code == 0
    assert "Aggressive: 2,000.00" in out
    assert "Conservative: 2,050.00" in out
    assert "Bonds: 700.00" in out
    assert "3 cycle(s)" in out


def test_cli_allocate_json(monkeypatch, capsys, tmp_path):
    req = tmp_path / "request.yaml"
    req.write_text(REQUEST_YAML, encoding="utf-8")

    code = run_cli(monkeypatch, "allocate", str(req), "--settings", str(tmp_path / "none.yaml"), "--json")

    report = json.loads(capsys.readouterr().out)
    assert code == 0
    assert report["allocations"]["Bonds"] == "700.00"


def test_cli_reports_validation_error(monkeypatch, capsys, tmp_path):
    req = tmp_path / "request.yaml"
    req.write_text("plans: []\ndeposits:\n  - {amount: 10, reference: R}\n", encoding="utf-8")

    code = run_cli(monkeypatch, "allocate", str(req), "--settings", str(tmp_path / "none.yaml"))

    assert code == 1
    assert "Error: At least one deposit plan is required" in capsys.readouterr().out


def test_cli_validate(monkeypatch, capsys, tmp_path):
    good = tmp_path / "good.yaml"
    good.write_text(REQUEST_YAML, encoding="utf-8")
    bad = tmp_path / "bad.yaml"
    bad.write_text(REQUEST_YAML.replace("amount: 4750", "amount: -1"), encoding="utf-8")

    assert run_cli(monkeypatch, "validate", str(good)) == 0
    assert "OK" in capsys.readouterr().out

    assert run_cli(monkeypatch, "validate", str(bad)) == 1
    assert "Deposit amounts must be positive" in capsys.readouterr().out


@pytest.mark.parametrize(
    "text",
    [
        "plans:\n  - type: ONE_TIME\n    allocations: [5]\ndeposits:\n  - {amount: 10, reference: R}\n",
        "plans: [ONE_TIME]\ndeposits:\n  - {amount: 10, reference: R}\n",
        "plans:\n  - type: ONE_TIME\n    allocations:\n      - {portfolio: A, amount: 1}\ndeposits: [10]\n",
    ],
)
def test_cli_reports_malformed_entries(monkeypatch, capsys, tmp_path, text):
    req = tmp_path / "request.yaml"
    req.write_text(text, encoding="utf-8")

    assert run_cli(monkeypatch, "allocate", str(req), "--settings", str(tmp_path / "none.yaml")) == 1
    assert "must be a mapping" in capsys.readouterr().out

    assert run_cli(monkeypatch, "validate", str(req)) == 1
    assert "must be a mapping" in capsys.readouterr().out
