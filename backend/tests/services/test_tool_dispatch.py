"""Tool Dispatch: validation, routing, and error folding.

Tests cover:
    - Every catalog tool routes to its handler with the authenticated account id
    - Unknown tools -> UNKNOWN_TOOL payload (never raises)
    - Validation failures -> VALIDATION_ERROR naming the field
    - Collaborator exceptions -> TOOL_EXECUTION_ERROR with a readable message
    - Result summaries: create echoes, list totals, 200-char content preview
"""

import json

import pytest

from journal_coach.core.errors import DatabaseError
from journal_coach.services.tool_dispatch import ToolDispatcher
from journal_coach.services.tools_registry import ToolRegistry, build_tool_registry
from tests.services.fakes import FakeCategoryService, FakeGoalService, FakeJournalService

GOAL_ARGS = {"title": "Run 5k", "category": "health", "target_date": "2025-01-01"}


async def test_create_goal_success_echo(dispatcher, goals):
    outcome = await dispatcher.invoke("create_goal", GOAL_ARGS, "acct-1")
    assert outcome.is_error is False
    assert outcome.payload["success"] is True
    assert outcome.payload["goal"]["title"] == "Run 5k"
    assert outcome.payload["goal"]["status"] == "not_started"
    assert outcome.payload["message"] == 'Goal "Run 5k" created successfully'
    json.dumps(outcome.payload)


async def test_missing_category_is_tool_error(dispatcher, goals):
    args = {k: v for k, v in GOAL_ARGS.items() if k != "category"}
    outcome = await dispatcher.invoke("create_goal", args, "acct-1")
    assert outcome.is_error is True
    assert outcome.payload["success"] is False
    assert outcome.payload["error_code"] == "VALIDATION_ERROR"
    assert outcome.payload["field"] == "category"
    assert goals.calls == []


async def test_account_id_comes_from_identity_not_arguments(dispatcher, goals):
    args = {**GOAL_ARGS, "account_id": "victim"}
    await dispatcher.invoke("create_goal", args, "acct-1")
    _, account_id, data = goals.calls[0]
    assert account_id == "acct-1"
    assert "account_id" not in data


async def test_habit_requires_frequency(dispatcher):
    outcome = await dispatcher.invoke(
        "create_goal", {**GOAL_ARGS, "is_habit": "true"}, "acct-1",
    )
    assert outcome.payload["error_code"] == "VALIDATION_ERROR"
    assert outcome.payload["field"] == "habit_frequency"


async def test_habit_with_frequency_normalized(dispatcher, goals):
    outcome = await dispatcher.invoke(
        "create_goal",
        {**GOAL_ARGS, "is_habit": True, "habit_frequency": "Daily"},
        "acct-1",
    )
    assert outcome.is_error is False
    assert goals.calls[0][2]["habit_frequency"] == "daily"


async def test_unknown_tool(dispatcher):
    outcome = await dispatcher.invoke("delete_everything", {}, "acct-1")
    assert outcome.is_error is True
    assert outcome.payload["error_code"] == "UNKNOWN_TOOL"
    assert "delete_everything" in outcome.payload["message"]


async def test_collaborator_failure_becomes_execution_error(dispatcher, goals):
    goals.fail_with = DatabaseError("connection lost", "execute")
    outcome = await dispatcher.invoke("create_goal", GOAL_ARGS, "acct-1")
    assert outcome.is_error is True
    assert outcome.payload["error_code"] == "TOOL_EXECUTION_ERROR"
    assert "connection lost" in outcome.payload["message"]


async def test_unexpected_exception_becomes_execution_error(dispatcher, goals):
    goals.fail_with = KeyError("boom")
    outcome = await dispatcher.invoke("list_goals", {}, "acct-1")
    assert outcome.payload["error_code"] == "TOOL_EXECUTION_ERROR"


async def test_list_goals_defaults_and_filters(dispatcher, goals):
    await dispatcher.invoke("create_goal", GOAL_ARGS, "acct-1")
    await dispatcher.invoke(
        "create_goal", {**GOAL_ARGS, "title": "Ship v2", "category": "career"}, "acct-1",
    )
    outcome = await dispatcher.invoke("list_goals", {"category": "CAREER"}, "acct-1")
    assert outcome.payload["total"] == 1
    assert outcome.payload["goals"][0]["title"] == "Ship v2"
    assert goals.calls[-1] == ("list_goals", "acct-1", None, "career", 10)


async def test_list_goals_limit_coerced(dispatcher, goals):
    await dispatcher.invoke("list_goals", {"limit": "3"}, "acct-1")
    assert goals.calls[-1][-1] == 3


async def test_list_goals_limit_out_of_range(dispatcher):
    outcome = await dispatcher.invoke("list_goals", {"limit": 500}, "acct-1")
    assert outcome.payload["field"] == "limit"


@pytest.mark.parametrize("limit", [10**400, "1e400", -(10**400)])
async def test_list_goals_huge_limit_is_validation_error(dispatcher, goals, limit):
    outcome = await dispatcher.invoke("list_goals", {"limit": limit}, "acct-1")
    assert outcome.payload["error_code"] == "VALIDATION_ERROR"
    assert outcome.payload["field"] == "limit"
    assert goals.calls == []


async def test_journal_entry_create_and_preview(dispatcher, journal):
    long_content = "x" * 250
    created = await dispatcher.invoke(
        "create_journal_entry",
        {"title": "Long day", "content": long_content, "tags": "work"},
        "acct-1",
    )
    assert created.payload["entry"]["title"] == "Long day"
    assert journal.calls[0][2]["tags"] == ["work"]

    await dispatcher.invoke(
        "create_journal_entry", {"title": "Short", "content": "brief"}, "acct-1",
    )
    listed = await dispatcher.invoke("list_journal_entries", {}, "acct-1")
    contents = {e["title"]: e["content"] for e in listed.payload["entries"]}
    assert contents["Long day"] == "x" * 200 + "..."
    assert contents["Short"] == "brief"
    assert listed.payload["total"] == 2


async def test_get_categories_splits_default_and_custom():
    categories = FakeCategoryService(custom=[
        {"id": "c1", "name": "Side projects", "color": "#ff0", "icon": "rocket"},
    ])
    dispatcher = ToolDispatcher(
        build_tool_registry(), FakeGoalService(), FakeJournalService(), categories,
    )
    outcome = await dispatcher.invoke("get_categories", None, "acct-1")
    assert "health" in outcome.payload["default_categories"]
    assert outcome.payload["custom_categories"] == [
        {"id": "c1", "name": "Side projects", "color": "#ff0", "icon": "rocket"},
    ]


def test_registry_and_dispatch_table_must_agree():
    partial = ToolRegistry(list(build_tool_registry().list())[:2])
    with pytest.raises(ValueError):
        ToolDispatcher(partial, FakeGoalService(), FakeJournalService(), FakeCategoryService())
