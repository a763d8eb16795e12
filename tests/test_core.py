import json

import pytest

from web_task_agent.assistants import MENU, coding_agent, cooking_agent, gateway_agent
from web_task_agent.catalog import ToolContext
from web_task_agent.core import HANDOFF_SKIPPED, MAX_TURNS_ANSWER, AgentRunner, chat_with_agent, run_task
from web_task_agent.errors import BrowserLaunchError, MissingCredentialError
from web_task_agent.models import PlannerOutput, ToolCall

from .fakes import FakeElement, FakePage, FakeSession, ScriptedPlanner, answer, call


@pytest.fixture
def example_page():
    return FakePage(pages={
        "https://example.com": [
            FakeElement("a", classes="title-link", text="Example Domain"),
            FakeElement("a", text="More information...", visible=False),
        ],
    })


@pytest.mark.asyncio
async def test_navigate_then_summarize_then_answer(settings, example_page):
    planner = ScriptedPlanner([
        call("navigate_url", url="https://example.com"),
        call("get_page_content", call_id="call_2"),
        answer('页面标题元素是 <a selector=".title-link">Example Domain</a>'),
    ])
    session = FakeSession(example_page)

    result = await run_task(
        "navigate to example.com and report the page title element",
        settings=settings,
        planner=planner,
        session=session,
    )

    assert ".title-link" in result.final_answer
    assert result.action_log == ["已打开 https://example.com", "已获取页面可交互元素摘要"]
    assert result.last_agent == "Website Automation Agent"
    assert result.turns == 3
    assert session.opened and session.closed

    observation = planner.calls[2]["history"][-1]
    assert observation["role"] == "tool"
    assert observation["tool_call_id"] == "call_2"
    assert '<a selector=".title-link">Example Domain</a>' in observation["content"]
    assert "More information" not in observation["content"]


@pytest.mark.asyncio
async def test_failed_click_does_not_stop_the_loop(settings, page):
    planner = ScriptedPlanner([
        call("click_selector", selector="#does-not-exist"),
        call("click_selector", call_id="call_2", selector="#home"),
        answer("已点击首页链接"),
    ])

    result = await run_task("click home", settings=settings, planner=planner, session=FakeSession(page))

    failure = planner.calls[1]["history"][-1]["content"]
    assert "#does-not-exist" in failure and "失败" in failure
    assert result.final_answer == "已点击首页链接"
    assert len(result.action_log) == 2
    assert page.elements[0].clicks == 1


@pytest.mark.asyncio
async def test_planner_sees_catalog_and_history(settings, page):
    planner = ScriptedPlanner([call("scroll_page", direction="up", amount=500), answer("done")])

    await run_task("scroll", settings=settings, planner=planner, session=FakeSession(page))

    first = planner.calls[0]
    assert first["task"] == "scroll"
    assert "get_page_content" in first["instructions"]
    assert set(first["tools"]) == {
        "get_page_content", "click_selector", "type_in_selector",
        "navigate_url", "take_screenshot", "scroll_page",
    }
    assert first["history"] == []

    assistant, tool = planner.calls[1]["history"]
    assert assistant["tool_calls"][0]["function"]["name"] == "scroll_page"
    assert tool["content"] == "已向 up 滚动 500px"
    assert page.scrolls == [-500]


@pytest.mark.asyncio
async def test_multiple_tool_calls_in_one_turn(settings, page):
    planner = ScriptedPlanner([
        PlannerOutput(tool_calls=[
            ToolCall("a", "type_in_selector", json.dumps({"selector": "#email", "text": "me@x.com"})),
            ToolCall("b", "click_selector", json.dumps({"selector": ".btn"})),
        ]),
        answer("signed up"),
    ])

    result = await run_task("sign up", settings=settings, planner=planner, session=FakeSession(page))

    assert len(result.action_log) == 2
    assert [m.get("tool_call_id") for m in result.history[1:3]] == ["a", "b"]


@pytest.mark.asyncio
async def test_max_turns_returns_fixed_answer(settings, page):
    settings.max_turns = 2
    planner = ScriptedPlanner([call("get_page_content"), call("get_page_content", call_id="call_2")])
    session = FakeSession(page)

    result = await run_task("loop forever", settings=settings, planner=planner, session=session)

    assert result.final_answer == MAX_TURNS_ANSWER
    assert len(result.action_log) == 2
    assert session.closed


@pytest.mark.asyncio
async def test_session_closed_when_planner_raises(settings, page):
    class BrokenPlanner(ScriptedPlanner):
        async def decide(self, *args):
            raise RuntimeError("boom")

    session = FakeSession(page)
    with pytest.raises(RuntimeError):
        await run_task("x", settings=settings, planner=BrokenPlanner([]), session=session)

    assert session.closed


@pytest.mark.asyncio
async def test_missing_credential_checked_before_session(monkeypatch, page):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr("web_task_agent.config.load_dotenv", lambda: False)
    session = FakeSession(page)

    with pytest.raises(MissingCredentialError):
        await run_task("x", planner=ScriptedPlanner([]), session=session)

    assert not session.opened


@pytest.mark.asyncio
async def test_launch_failure_propagates(settings):
    class FailingSession(FakeSession):
        async def open(self):
            raise BrowserLaunchError("port 9222 in use")

    planner = ScriptedPlanner([answer("never")])
    with pytest.raises(BrowserLaunchError):
        await run_task("x", settings=settings, planner=planner, session=FailingSession(FakePage()))

    assert planner.calls == []


@pytest.mark.asyncio
async def test_runs_do_not_share_action_logs(settings, page):
    first = await run_task(
        "a", settings=settings, planner=ScriptedPlanner([call("get_page_content"), answer("1")]),
        session=FakeSession(page),
    )
    second = await run_task(
        "b", settings=settings, planner=ScriptedPlanner([answer("2")]), session=FakeSession(page),
    )

    assert len(first.action_log) == 1
    assert second.action_log == []


@pytest.mark.asyncio
async def test_cooking_agent_uses_menu_tool(settings):
    planner = ScriptedPlanner([call("get_menu"), answer("Chai costs INR 50")])

    result = await chat_with_agent("how much is chai?", settings=settings, planner=planner)

    assert planner.calls[0]["tools"] == ["get_current_time", "get_menu"]
    assert json.loads(planner.calls[1]["history"][-1]["content"]) == MENU
    assert result.action_log == ["查询菜单"]
    assert result.last_agent == "Cooking Agent"


@pytest.mark.asyncio
async def test_gateway_hands_off_to_cooking_agent(settings):
    planner = ScriptedPlanner([
        call("transfer_to_cooking_agent"),
        call("get_current_time", call_id="call_2"),
        answer("It is dinner time"),
    ])

    result = await chat_with_agent("what can I cook now?", profile=gateway_agent(), settings=settings, planner=planner)

    assert planner.calls[0]["tools"] == ["transfer_to_coding_agent", "transfer_to_cooking_agent"]
    assert planner.calls[1]["tools"] == ["get_current_time", "get_menu"]
    assert planner.calls[1]["instructions"] == cooking_agent().instructions
    assert result.last_agent == "Cooking Agent"
    assert result.action_log == ["转交给 Cooking Agent", "查询当前时间"]


@pytest.mark.asyncio
async def test_runner_without_tools_answers_directly(settings):
    planner = ScriptedPlanner([answer("Functions are reusable blocks of code.")])
    result = await AgentRunner(planner).run(coding_agent(), "what are functions in js", ToolContext(settings=settings))

    assert planner.calls[0]["tools"] == []
    assert result.final_answer.startswith("Functions")


@pytest.mark.asyncio
async def test_calls_after_a_handoff_in_the_same_turn_are_skipped(settings):
    planner = ScriptedPlanner([
        PlannerOutput(tool_calls=[
            ToolCall("h1", "transfer_to_cooking_agent", "{}"),
            ToolCall("h2", "transfer_to_coding_agent", "{}"),
        ]),
        answer("Cooking Agent here"),
    ])

    result = await chat_with_agent("hungry", profile=gateway_agent(), settings=settings, planner=planner)

    tool_messages = [m for m in result.history if m["role"] == "tool"]
    assert [m["tool_call_id"] for m in tool_messages] == ["h1", "h2"]
    assert tool_messages[1]["content"] == HANDOFF_SKIPPED
    assert result.last_agent == "Cooking Agent"
    assert result.action_log == ["转交给 Cooking Agent"]
