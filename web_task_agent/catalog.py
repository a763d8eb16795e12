"""工具目录：声明式参数约定 + 校验 + 执行"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from .config import Settings
from .memory import ActionLog
from .models import ToolCall
from .perception import Perception
from .session import BrowserSession


class EmptyParams(BaseModel):
    """无参数工具的参数约定"""
    model_config = ConfigDict(extra="forbid")


@dataclass
class ToolContext:
    """
    工具执行时显式传入的依赖。

    每次运行构造一份，绑定该运行自己的会话和 Action Log。
    """
    settings: Settings
    action_log: ActionLog = field(default_factory=ActionLog)
    session: Optional[BrowserSession] = None
    perception: Perception = field(default_factory=Perception)
    handoff_request: Optional[str] = None


ToolHandler = Callable[[ToolContext, Any], Awaitable[str]]


@dataclass(frozen=True)
class Tool:
    """名称 + 参数约定 + 执行步骤"""
    name: str
    description: str
    handler: ToolHandler
    params: Type[BaseModel] = EmptyParams

    def schema(self) -> Dict[str, Any]:
        """OpenAI function-tool 格式的声明"""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.params.model_json_schema(),
            },
        }

    def parse(self, raw_arguments: Optional[str]) -> BaseModel:
        """校验参数，不合法时抛出 pydantic.ValidationError"""
        return self.params.model_validate_json(raw_arguments or "{}")


def handoff_tool_name(agent_name: str) -> str:
    slug = "_".join(agent_name.lower().split())
    return f"transfer_to_{slug}"


def make_handoff_tool(agent_name: str, description: str = "") -> Tool:
    """把另一个 Agent 暴露为一个转交工具"""

    async def _handoff(ctx: ToolContext, params: EmptyParams) -> str:
        ctx.handoff_request = agent_name
        ctx.action_log.record(f"转交给 {agent_name}")
        return f"已转交给 {agent_name}"

    return Tool(
        name=handoff_tool_name(agent_name),
        description=f"把对话转交给 {agent_name}。{description}".strip(),
        handler=_handoff,
    )


class ToolCatalog:
    """
    绑定到单次运行上下文的工具集合。

    所有调用都经过 invoke：未知工具和参数违约都作为失败文本返回给 Planner，
    并在 Action Log 中记录一次被拒绝的尝试。
    """

    def __init__(self, tools: Sequence[Tool], context: ToolContext):
        self.context = context
        self._tools: Dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"工具名重复：{tool.name}")
            self._tools[tool.name] = tool

    def schemas(self) -> List[Dict[str, Any]]:
        return [tool.schema() for tool in self._tools.values()]

    async def invoke(self, call: ToolCall) -> str:
        log = self.context.action_log
        tool = self._tools.get(call.name)
        if tool is None:
            log.record(f"拒绝调用未知工具 {call.name}")
            available = ", ".join(self._tools) or "(无)"
            return f"调用失败：不存在名为 {call.name} 的工具。可用工具：{available}"

        try:
            params = tool.parse(call.arguments)
        except ValidationError as e:
            log.record(f"拒绝调用 {call.name}：参数不合法 {call.arguments}")
            return f"调用 {call.name} 失败：参数不符合约定：{e}"

        return await tool.handler(self.context, params)
