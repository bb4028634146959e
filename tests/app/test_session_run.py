from __future__ import annotations

import json
from pathlib import Path

import pytest

from fake_gmail import FakeGmail, FakeNotifier, FakeRule, fast_settings, message_snapshot

import inbox_autolabel.app.run as run_module
from inbox_autolabel.app.run import (
    RESULTS_FILE,
    SessionSummary,
    append_result,
    browser_config,
    handle_trigger,
    result_payload,
)
from inbox_autolabel.errors import HostOperationFailed
from inbox_autolabel.models import WorkflowOutcome, WorkflowResult, WorkflowState


def _result(outcome: WorkflowOutcome) -> WorkflowResult:
    state = WorkflowState.FAILED if outcome is WorkflowOutcome.FAILED else WorkflowState.DONE
    return WorkflowResult(state=state, outcome=outcome, sender="jane@example.com", label="Newsletter")


def test_session_summary_counts_each_outcome() -> None:
    summary = SessionSummary()
    for outcome in (
        WorkflowOutcome.CREATED,
        WorkflowOutcome.UPDATED,
        WorkflowOutcome.UPDATED,
        WorkflowOutcome.NOOP,
        WorkflowOutcome.FAILED,
    ):
        summary.record(_result(outcome))

    assert (summary.runs, summary.created, summary.updated) == (5, 1, 2)
    assert (summary.unchanged, summary.noop, summary.failed) == (0, 1, 1)


def test_result_payload_is_json_friendly() -> None:
    payload = result_payload(_result(WorkflowOutcome.CREATED))

    assert payload["state"] == "done"
    assert payload["outcome"] == "created"
    assert json.loads(json.dumps(payload)) == payload


def test_append_result_writes_one_line_per_run(tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"

    append_result(logs_dir, _result(WorkflowOutcome.CREATED))
    append_result(logs_dir, _result(WorkflowOutcome.FAILED))

    lines = (logs_dir / RESULTS_FILE).read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["outcome"] for r in records] == ["created", "failed"]
    assert all("at" in r for r in records)


def test_browser_config_follows_settings(tmp_path: Path) -> None:
    settings = fast_settings(headless=True, browser_channel="chrome")

    cfg = browser_config(settings, profile_dir=tmp_path)

    assert cfg.profile_dir == tmp_path
    assert cfg.headless is True
    assert cfg.channel == "chrome"
    assert cfg.gmail_url == settings.gmail_url


@pytest.mark.asyncio
async def test_handle_trigger_runs_workflow_on_captured_snapshot(monkeypatch) -> None:
    captured = {}

    async def fake_capture(handle, *, selectors, attribute_names, max_levels):
        captured.update(selectors=selectors, attribute_names=attribute_names, max_levels=max_levels)
        return message_snapshot()

    monkeypatch.setattr(run_module, "capture_origin", fake_capture)
    gmail = FakeGmail(location="inbox", rules=[FakeRule("7", "old@example.com", "AutoLabelMeta_Newsletter")])

    result = await handle_trigger(
        object(), ui=gmail, notifier=FakeNotifier(answers=["Newsletter"]), settings=fast_settings()
    )

    assert result.outcome is WorkflowOutcome.UPDATED
    assert captured["selectors"] == ["[email]", ".go, .gD, .g2"]
    assert captured["attribute_names"] == ["email"]
    assert captured["max_levels"] == 15


@pytest.mark.asyncio
async def test_handle_trigger_reports_no_sender_when_capture_fails(monkeypatch) -> None:
    async def failing_capture(handle, **_kwargs):
        raise HostOperationFailed("Capturing clicked element failed: element is detached")

    monkeypatch.setattr(run_module, "capture_origin", failing_capture)
    notifier = FakeNotifier(answers=["Newsletter"])

    result = await handle_trigger(object(), ui=FakeGmail(), notifier=notifier, settings=fast_settings())

    assert result.outcome is WorkflowOutcome.FAILED
    assert result.reason == "NoSenderDetected"
    assert notifier.prompts == []
