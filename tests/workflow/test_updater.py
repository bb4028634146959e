from __future__ import annotations

import pytest

from fake_gmail import FILTERS, FakeGmail, FakeRule

from inbox_autolabel.errors import ElementNotFound
from inbox_autolabel.workflow.matcher import FilterMatcher
from inbox_autolabel.workflow.updater import FilterUpdater, append_sender


def _rule(from_value: str = "old@example.com") -> FakeRule:
    return FakeRule("7", from_value, doesnt_have="AutoLabelMeta_Newsletter", label="Newsletter")


async def _row(gmail: FakeGmail, settings):
    await gmail.set_location(FILTERS)
    return await FilterMatcher(gmail, settings).find_by_label("Newsletter")


def test_append_sender() -> None:
    assert append_sender("old@example.com", "jane@example.com") == "old@example.com | jane@example.com"
    assert append_sender("  ", "jane@example.com") == "jane@example.com"


@pytest.mark.asyncio
async def test_update_appends_sender_and_saves(settings) -> None:
    gmail = FakeGmail(rules=[_rule()])

    result = await FilterUpdater(gmail, settings).update(await _row(gmail, settings), "jane@example.com")

    assert result.changed
    assert result.from_value == "old@example.com | jane@example.com"
    assert gmail.updates == [("7", "old@example.com | jane@example.com")]
    assert gmail.clicks("update") == 1


@pytest.mark.asyncio
async def test_update_twice_writes_once(settings) -> None:
    gmail = FakeGmail(rules=[_rule()])
    updater = FilterUpdater(gmail, settings)

    first = await updater.update(await _row(gmail, settings), "jane@example.com")
    second = await updater.update(await _row(gmail, settings), "jane@example.com")

    assert first.changed and not second.changed
    assert len(gmail.inputs_written) == 1
    assert len(gmail.updates) == 1
    assert gmail.clicks("cancel") == 1


@pytest.mark.asyncio
async def test_sender_already_present_without_cancel_button(settings) -> None:
    gmail = FakeGmail(rules=[_rule("a@x.io | jane@example.com")], with_cancel=False)

    result = await FilterUpdater(gmail, settings).update(await _row(gmail, settings), "jane@example.com")

    assert not result.changed
    assert gmail.inputs_written == []


@pytest.mark.asyncio
async def test_missing_update_button_fails(settings) -> None:
    gmail = FakeGmail(rules=[_rule()], with_update_button=False)

    with pytest.raises(ElementNotFound, match="Update filter"):
        await FilterUpdater(gmail, settings).update(await _row(gmail, settings), "jane@example.com")
    assert gmail.updates == []
