"""规划模块：决策者接口 + 基于 OpenAI 的实现"""

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from .config import Settings
from .models import PlannerOutput, ToolCall


class Planner:
    """
    决策者接口。

    输入：行为指令、用户任务、工具目录（OpenAI function-tool 格式）、之前的对话轮次；
    输出：要调用的工具，或最终答案。
    """

    async def decide(
        self,
        instructions: str,
        task: str,
        catalog: List[Dict[str, Any]],
        history: List[Dict[str, Any]],
    ) -> PlannerOutput:
        raise NotImplementedError


class OpenAIPlanner(Planner):
    """通过 Chat Completions 的 function calling 做决策"""

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float = 0.0):
        self.client = client
        self.model = model
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIPlanner":
        client = AsyncOpenAI(api_key=settings.openai_api_key, base_url=settings.base_url)
        return cls(client, settings.model)

    def build_messages(
        self, instructions: str, task: str, history: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": instructions},
            {"role": "user", "content": task},
            *history,
        ]

    async def decide(
        self,
        instructions: str,
        task: str,
        catalog: List[Dict[str, Any]],
        history: List[Dict[str, Any]],
    ) -> PlannerOutput:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": self.build_messages(instructions, task, history),
        }
        # 空工具列表会被接口拒绝
        if catalog:
            kwargs["tools"] = catalog

        print("\n[LLM] 正在调用大模型决策...")
        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            print(f"[错误] 调用 LLM 时发生异常：{e}，将终止任务。")
            return PlannerOutput(
                thought=f"发生异常：{e}",
                final_answer=f"调用大模型失败，任务未能完成：{e}",
            )

        message = response.choices[0].message
        content: Optional[str] = message.content
        calls = [
            ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments or "{}")
            for tc in (message.tool_calls or [])
        ]
        if calls:
            return PlannerOutput(thought=content, tool_calls=calls)
        return PlannerOutput(thought=content, final_answer=content or "")
