"""感知模块：把当前页面的可交互元素整理成精简的文本清单"""

import re
from typing import List, Optional

from playwright.async_api import Page

from .models import ElementDescriptor

# 固定的结构化查询：链接、按钮、输入框以及 ARIA 等价物
INTERACTIVE_SELECTOR = 'a, button, input, [role="button"], [role="link"]'

MAX_TEXT_LENGTH = 100

NO_ELEMENTS_FOUND = "页面上未检测到可交互元素。"
SUMMARY_HEADER = "以下是当前页面上的可交互元素："

_CSS_IDENT = re.compile(r"^-?[_a-zA-Z][_a-zA-Z0-9-]*$")

# 在浏览器内一次性过滤可见元素并读取基础属性；没有布局盒子的元素不返回
_COLLECT_JS = """
(elements) => elements
    .filter((el) => el.getClientRects().length > 0)
    .map((el) => ({
        tag: el.tagName.toLowerCase(),
        id: el.getAttribute('id') || '',
        className: el.getAttribute('class') || '',
        text: el.textContent || '',
    }))
"""


def infer_selector(tag: str, element_id: Optional[str], class_name: Optional[str]) -> str:
    """
    推断元素的 CSS 选择器。

    优先级：id 属性 > 第一个非空 class > 标签名。
    不是合法 CSS 标识符的 id / class 改用属性选择器，保证选择器可用。
    """
    if element_id:
        if _CSS_IDENT.match(element_id):
            return f"#{element_id}"
        return f"[id='{_escape_attr(element_id)}']"

    first_class = next((c for c in (class_name or "").split() if c), None)
    if first_class:
        if _CSS_IDENT.match(first_class):
            return f".{first_class}"
        return f"[class~='{_escape_attr(first_class)}']"

    return tag


def _escape_attr(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def visible_text(raw: Optional[str]) -> str:
    return (raw or "").strip()[:MAX_TEXT_LENGTH]


def render_summary(descriptors: List[ElementDescriptor]) -> str:
    """生成给 LLM 看的元素清单；空集合返回固定提示（不是错误）"""
    if not descriptors:
        return NO_ELEMENTS_FOUND
    lines = [d.render() for d in descriptors]
    return SUMMARY_HEADER + "\n" + "\n".join(lines)


class Perception:
    """
    感知模块：提取可见的可交互元素。

    每次调用都重新读取 DOM，不做缓存。
    """

    async def extract_elements(self, page: Page) -> List[ElementDescriptor]:
        """
        在一次 evaluate 中查询结构化元素集合并只取有布局盒子的元素，
        避免逐个元素往返浏览器；选择器推断在 Python 侧完成。
        """
        items = await page.eval_on_selector_all(INTERACTIVE_SELECTOR, _COLLECT_JS)

        return [
            ElementDescriptor(
                tag=item["tag"],
                selector=infer_selector(item["tag"], item.get("id"), item.get("className")),
                text=visible_text(item.get("text")),
            )
            for item in items
        ]

    async def summarize(self, page: Page) -> str:
        descriptors = await self.extract_elements(page)
        return render_summary(descriptors)
