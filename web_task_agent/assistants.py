"""Agent 定义：名称 + 行为指令 + 工具集合 + 可转交对象"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List

from .catalog import EmptyParams, Tool, ToolContext, make_handoff_tool
from .controller import browser_tools


@dataclass
class AgentProfile:
    name: str
    instructions: str
    tools: List[Tool] = field(default_factory=list)
    handoffs: List["AgentProfile"] = field(default_factory=list)

    def all_tools(self) -> List[Tool]:
        """自身工具 + 每个转交对象对应的 transfer_to_* 工具"""
        return list(self.tools) + [make_handoff_tool(h.name) for h in self.handoffs]

    def reachable(self) -> Dict[str, "AgentProfile"]:
        """按名称索引自身及所有可转交到的 Agent"""
        found: Dict[str, AgentProfile] = {}
        pending = [self]
        while pending:
            profile = pending.pop()
            if profile.name in found:
                continue
            found[profile.name] = profile
            pending.extend(profile.handoffs)
        return found


# 菜单是固定数据
MENU = {
    "Drinks": {
        "Chai": "INR 50",
        "Coffee": "INR 70",
    },
    "Veg": {
        "DalMakhni": "INR 250",
        "Paneer": "INR 400",
    },
}


async def get_current_time(ctx: ToolContext, params: EmptyParams) -> str:
    now = datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")
    ctx.action_log.record("查询当前时间")
    return now


async def get_menu(ctx: ToolContext, params: EmptyParams) -> str:
    ctx.action_log.record("查询菜单")
    return json.dumps(MENU, ensure_ascii=False)


BROWSER_AGENT_INSTRUCTIONS = """你是一个面向任务的浏览器自动化 Agent，目标是在任意网站上完成用户交给你的任务。

工作流程：
1. 导航：用 navigate_url 打开网站。
2. 分析：用 get_page_content 获取页面可交互元素的摘要，这就是你"看"页面的方式。
3. 滚动（如有需要）：如果摘要里找不到需要的元素，用 scroll_page 向下或向上滚动，然后重新分析。
4. 确定选择器：从摘要中找出需要操作的元素对应的 CSS 选择器。
5. 执行：用 type_in_selector 和 click_selector 配合上一步的选择器完成操作。
6. 确认：完成用户要求的最后一步后，明确说明任务已完成，不要再询问下一步做什么。

规则：
- 点击或输入之前，总是先用 get_page_content 分析页面。
- 选择器要精确，有 id (#) 时优先使用 id。
- 工具返回失败信息时，换一个选择器或策略重试，而不是放弃。
"""


def browser_agent() -> AgentProfile:
    return AgentProfile(
        name="Website Automation Agent",
        instructions=BROWSER_AGENT_INSTRUCTIONS,
        tools=browser_tools(),
    )


def cooking_agent() -> AgentProfile:
    return AgentProfile(
        name="Cooking Agent",
        instructions=(
            "你是一个乐于助人的烹饪助手，擅长做菜。\n"
            "你帮助用户挑选菜品、提供菜谱并指导他们做饭。"
        ),
        tools=[
            Tool(name="get_current_time", description="返回当前时间。", handler=get_current_time),
            Tool(name="get_menu", description="返回餐厅的菜单及价格。", handler=get_menu),
        ],
    )


def coding_agent() -> AgentProfile:
    return AgentProfile(
        name="Coding Agent",
        instructions="你是一名编程专家助手，尤其擅长 JavaScript。",
    )


def gateway_agent() -> AgentProfile:
    return AgentProfile(
        name="Gateway Agent",
        instructions="你负责判断应该由哪个 Agent 来处理用户的问题，并转交给它。",
        handoffs=[coding_agent(), cooking_agent()],
    )


CHAT_AGENTS = {
    "cooking": cooking_agent,
    "coding": coding_agent,
    "gateway": gateway_agent,
}
