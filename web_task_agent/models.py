"""数据模型定义"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ElementDescriptor:
    """单个可见可交互元素的描述"""
    tag: str
    selector: str  # 推断出的 CSS 选择器：#id > .class > tag
    text: str  # 可见文本，最多 100 字符

    def render(self) -> str:
        return f'<{self.tag} selector="{self.selector}">{self.text}</{self.tag}>'


@dataclass
class ToolCall:
    """Planner 请求执行的一次工具调用"""
    id: str
    name: str
    arguments: str  # 原始 JSON 字符串，执行前再做校验

    def to_message(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass
class PlannerOutput:
    """Planner 的结构化决策：要么调用工具，要么给出最终答案"""
    thought: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)
    final_answer: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return not self.tool_calls


@dataclass(frozen=True)
class ActionRecord:
    """Action Log 中的单条记录"""
    step_num: int
    description: str


@dataclass
class RunResult:
    """一次运行的结果"""
    final_answer: str
    action_log: List[str]
    last_agent: str
    history: List[Dict[str, Any]] = field(default_factory=list)
    turns: int = 0
