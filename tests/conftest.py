"""测试夹具：不需要真实浏览器或网络"""

import pytest

from web_task_agent.catalog import ToolContext
from web_task_agent.config import Settings
from web_task_agent.memory import ActionLog

from .fakes import FakeElement, FakePage, FakeSession


@pytest.fixture
def settings(tmp_path):
    return Settings(openai_api_key="sk-test", screenshot_dir=str(tmp_path), action_timeout_ms=100)


@pytest.fixture
def page():
    return FakePage([
        FakeElement("a", id="home", classes="nav-link primary", text="  Home  "),
        FakeElement("button", classes="btn btn-primary", text="Sign up"),
        FakeElement("input", id="email"),
        FakeElement("button", id="hidden-button", text="Hidden", visible=False),
    ])


@pytest.fixture
def ctx(settings, page):
    return ToolContext(settings=settings, action_log=ActionLog(), session=FakeSession(page))
