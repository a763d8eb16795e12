"""执行模块：浏览器感知与动作工具

每个工具都是一次原子操作，显式接收 ToolContext。
工具内部捕获全部异常并转成失败描述文本，无论成败都在 Action Log 中追加一条记录。
"""

import time
from pathlib import Path
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .catalog import EmptyParams, Tool, ToolContext


class NavigateParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    url: str = Field(description="要打开的完整 URL，包含 'https://'。")


class ClickParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    selector: str = Field(description="要点击元素的 CSS 选择器，例如 '#login-button'、'a.product-link'。")


class TypeParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    selector: str = Field(description="输入框的 CSS 选择器，例如 '#username'、'input[name=\"query\"]'。")
    text: str = Field(description="要输入的文字。")


class ScrollParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    direction: Literal["up", "down"]
    amount: int = Field(gt=0, description="滚动的像素数，一般取 500。")


def scroll_delta(direction: str, amount: int) -> int:
    """向下为正，向上为负"""
    return amount if direction == "down" else -amount


def _screenshot_path(directory: str) -> Path:
    """按截图时间戳（毫秒）命名，同一毫秒内重复截图时顺延"""
    folder = Path(directory)
    stamp = int(time.time() * 1000)
    path = folder / f"screenshot-{stamp}.png"
    while path.exists():
        stamp += 1
        path = folder / f"screenshot-{stamp}.png"
    return path


async def get_page_content(ctx: ToolContext, params: EmptyParams) -> str:
    try:
        summary = await ctx.perception.summarize(ctx.session.page)
    except Exception as e:
        ctx.action_log.record(f"获取页面内容失败：{e}")
        return f"获取页面内容失败：{e}"

    ctx.action_log.record("已获取页面可交互元素摘要")
    return summary


async def navigate_url(ctx: ToolContext, params: NavigateParams) -> str:
    url = params.url
    try:
        await ctx.session.page.goto(url, wait_until="domcontentloaded")
    except Exception as e:
        ctx.action_log.record(f"打开 {url} 失败")
        return f"打开 {url} 失败：{e}"

    ctx.action_log.record(f"已打开 {url}")
    return f"已打开 {url}"


async def click_selector(ctx: ToolContext, params: ClickParams) -> str:
    selector = params.selector
    try:
        await ctx.session.page.click(selector, timeout=ctx.settings.action_timeout_ms)
    except Exception as e:
        ctx.action_log.record(f'点击选择器 "{selector}" 失败')
        return f'点击选择器 "{selector}" 失败：{e}'

    ctx.action_log.record(f'已点击选择器为 "{selector}" 的元素')
    return f'已成功点击元素："{selector}"'


async def type_in_selector(ctx: ToolContext, params: TypeParams) -> str:
    selector, text = params.selector, params.text
    try:
        # fill 会先清空原有内容
        await ctx.session.page.fill(selector, text, timeout=ctx.settings.action_timeout_ms)
    except Exception as e:
        ctx.action_log.record(f'向选择器 "{selector}" 输入 "{text}" 失败')
        return f'向选择器 "{selector}" 输入失败：{e}'

    ctx.action_log.record(f'已向选择器为 "{selector}" 的元素输入 "{text}"')
    return f'已成功向元素输入文字："{selector}"'


async def scroll_page(ctx: ToolContext, params: ScrollParams) -> str:
    delta = scroll_delta(params.direction, params.amount)
    try:
        await ctx.session.page.evaluate("(dy) => window.scrollBy(0, dy)", delta)
    except Exception as e:
        ctx.action_log.record(f"向 {params.direction} 滚动 {params.amount}px 失败")
        return f"滚动页面失败：{e}"

    ctx.action_log.record(f"已向 {params.direction} 滚动 {params.amount}px")
    return f"已向 {params.direction} 滚动 {params.amount}px"


async def take_screenshot(ctx: ToolContext, params: EmptyParams) -> str:
    try:
        path = _screenshot_path(ctx.settings.screenshot_dir)
        await ctx.session.page.screenshot(path=str(path))
    except Exception as e:
        ctx.action_log.record("截图失败")
        return f"截图失败：{e}"

    ctx.action_log.record(f"截图已保存到 {path.name}")
    return f"截图已成功保存到 {path.name}"


def browser_tools() -> List[Tool]:
    """浏览器自动化 Agent 的工具集合"""
    return [
        Tool(
            name="get_page_content",
            description=(
                "获取当前页面可交互元素（链接、按钮、输入框）的精简摘要。"
                "其他工具需要的 CSS 选择器应从这里获取。"
            ),
            handler=get_page_content,
        ),
        Tool(
            name="click_selector",
            description="点击与给定 CSS 选择器匹配的第一个元素。",
            handler=click_selector,
            params=ClickParams,
        ),
        Tool(
            name="type_in_selector",
            description="清空与给定 CSS 选择器匹配的输入框并输入文字。",
            handler=type_in_selector,
            params=TypeParams,
        ),
        Tool(
            name="navigate_url",
            description="打开给定的 URL，等待 DOM 加载完成。",
            handler=navigate_url,
            params=NavigateParams,
        ),
        Tool(
            name="take_screenshot",
            description="截取当前页面视口并保存为文件。",
            handler=take_screenshot,
        ),
        Tool(
            name="scroll_page",
            description="向上或向下滚动页面，用于寻找当前视口之外的元素。",
            handler=scroll_page,
            params=ScrollParams,
        ),
    ]
