from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sales_diff.cli.__main__ import main as cli_main
from sales_diff.logging.init import reset_logging

"""CLI runs against real workbooks: report lines, error log, .env handling."""


@pytest.fixture(autouse=True)
def _isolated(monkeypatch):
    reset_logging()
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    yield
    reset_logging()
    # load_dotenv が書いたキーを残さない
    os.environ.pop("OPENAI_API_KEY", None)


@pytest.fixture
def ledger_pair(temp_workdir: Path, write_workbook, baseline_rows, updated_rows) -> tuple[Path, Path]:
    old = write_workbook(temp_workdir / "data" / "old.xlsx", {"Sales": baseline_rows})
    new = write_workbook(temp_workdir / "data" / "new.xlsx", {"Sales": updated_rows})
    return old, new


def test_cli_full_run(ledger_pair, temp_workdir: Path, capsys):
    old, new = ledger_pair
    code = cli_main([str(old), str(new)])
    lines = capsys.readouterr().out.strip().splitlines()

    assert code == 2
    words = [l.split(" ", 2)[1] for l in lines if l.startswith("INFO ")]
    kinds = [w for w in words if w in {"MODIFIED", "ADDED", "REMOVED"}]
    assert kinds == ["MODIFIED", "MODIFIED", "ADDED", "REMOVED"]
    assert any(l.startswith("WARN new.xlsx: 1 row(s) without identifier") for l in lines)

    log_files = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(log_files) == 1
    record = json.loads(log_files[0].read_text(encoding="utf-8").splitlines()[0])
    assert (record["file"], record["sheet"], record["row"]) == ("new.xlsx", "Sales", 7)


def test_cli_reads_api_key_from_dotenv(ledger_pair, temp_workdir: Path, capsys):
    old, new = ledger_pair
    (temp_workdir / ".env").write_text("OPENAI_API_KEY=sk-test\n", encoding="utf-8")
    fake = MagicMock()
    fake.generate.return_value = "數量調整與一筆新案件"
    with patch("sales_diff.services.ai_summary.OpenAISummaryClient", return_value=fake) as ctor:
        code = cli_main([str(old), str(new), "--ai-summary"])

    out = capsys.readouterr().out
    assert code == 2
    ctor.assert_called_once_with("sk-test")
    prompt = fake.generate.call_args.args[0]
    assert "- Modified rows: 2" in prompt
    assert "[S1] aggregate/subtotal row: Qty pc from 16 to 13" in prompt
    assert fake.generate.call_args.kwargs["model"] == "gpt-4o-mini"
    assert "INFO ai summary:\n數量調整與一筆新案件" in out


def test_cli_skips_ai_summary_without_differences(ledger_pair, capsys):
    old, _ = ledger_pair
    with patch("sales_diff.cli.__main__.openai_client_factory") as factory:
        code = cli_main([str(old), str(old), "--ai-summary"])
    assert code == 0
    factory.assert_not_called()
