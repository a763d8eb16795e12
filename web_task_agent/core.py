"""核心：感知 → 决策 → 执行 的主循环"""

from typing import Any, Dict, List, Optional

from .assistants import AgentProfile, browser_agent, cooking_agent
from .catalog import ToolCatalog, ToolContext
from .config import DEFAULT_MAX_TURNS, Settings, load_settings
from .memory import ActionLog
from .models import RunResult
from .planner import OpenAIPlanner, Planner
from .session import BrowserSession

MAX_TURNS_ANSWER = "已达到最大决策轮数，任务未能完成。"
HANDOFF_SKIPPED = "未执行：本轮已转交给其他 Agent。"

# 控制台上观察结果的最大展示长度
OBSERVATION_PREVIEW = 300


def _preview(text: str) -> str:
    if len(text) <= OBSERVATION_PREVIEW:
        return text
    return text[:OBSERVATION_PREVIEW] + "..."


class AgentRunner:
    """
    驱动一次运行的主循环。

    每一轮把行为指令、任务、工具目录和历史对话交给 Planner：
    Planner 选择工具时执行它并把文本结果作为下一轮的观察；
    Planner 给出最终答案时结束。工具错误已在工具内部转成文本，不会中断循环。
    """

    def __init__(self, planner: Planner, max_turns: int = DEFAULT_MAX_TURNS):
        self.planner = planner
        self.max_turns = max_turns

    async def run(self, profile: AgentProfile, task: str, context: ToolContext) -> RunResult:
        agents = profile.reachable()
        active = profile
        catalog = ToolCatalog(active.all_tools(), context)
        history: List[Dict[str, Any]] = []

        print(f"\n{'=' * 60}")
        print(f"[Agent] {active.name} 收到任务：{task}")
        print(f"{'=' * 60}")

        for turn in range(1, self.max_turns + 1):
            print(f"\n{'─' * 40}")
            print(f"[Agent] 第 {turn} 轮（{active.name}）")

            decision = await self.planner.decide(active.instructions, task, catalog.schemas(), history)
            if decision.thought:
                print(f"[思考] {decision.thought}")

            if decision.is_final:
                answer = decision.final_answer or ""
                history.append({"role": "assistant", "content": answer})
                print(f"\n[Agent] ✅ 最终答案：{answer}")
                return RunResult(
                    final_answer=answer,
                    action_log=context.action_log.steps(),
                    last_agent=active.name,
                    history=history,
                    turns=turn,
                )

            history.append({
                "role": "assistant",
                "content": decision.thought,
                "tool_calls": [call.to_message() for call in decision.tool_calls],
            })

            handed_off = False
            for call in decision.tool_calls:
                # 转交之后本轮剩余的调用属于旧 Agent，不再执行，但每个调用仍需一条 tool 消息
                if handed_off:
                    history.append({"role": "tool", "tool_call_id": call.id, "content": HANDOFF_SKIPPED})
                    continue

                print(f"[动作] {call.name}({call.arguments})")
                observation = await catalog.invoke(call)
                print(f"[观察] {_preview(observation)}")
                history.append({"role": "tool", "tool_call_id": call.id, "content": observation})

                if context.handoff_request:
                    active = agents[context.handoff_request]
                    context.handoff_request = None
                    catalog = ToolCatalog(active.all_tools(), context)
                    handed_off = True
                    print(f"[Agent] 已转交给 {active.name}")

        print(f"\n[警告] 已达到最大决策轮数 {self.max_turns}，强制结束。")
        return RunResult(
            final_answer=MAX_TURNS_ANSWER,
            action_log=context.action_log.steps(),
            last_agent=active.name,
            history=history,
            turns=self.max_turns,
        )


def _print_action_log(result: RunResult) -> None:
    print("\n--- Action Log ---")
    if not result.action_log:
        print("(无记录)")
    for i, step in enumerate(result.action_log, start=1):
        print(f"Step {i}: {step}")


async def run_task(
    task_text: str,
    settings: Optional[Settings] = None,
    planner: Optional[Planner] = None,
    session: Optional[BrowserSession] = None,
    profile: Optional[AgentProfile] = None,
) -> RunResult:
    """
    入口：在新的浏览器会话中完成一个自然语言任务。

    凭据检查和浏览器启动失败会直接抛出（StartupError）；
    其余错误都以文本形式交给 Planner，运行结束后始终关闭会话。
    每次运行使用自己的会话、工具目录和 Action Log。
    """
    if settings is None:
        settings = load_settings()
    if planner is None:
        planner = OpenAIPlanner.from_settings(settings)
    if session is None:
        session = BrowserSession(settings)

    context = ToolContext(settings=settings, action_log=ActionLog(), session=session)

    async with session:
        runner = AgentRunner(planner, settings.max_turns)
        result = await runner.run(profile or browser_agent(), task_text, context)

    _print_action_log(result)
    return result


async def chat_with_agent(
    query: str,
    profile: Optional[AgentProfile] = None,
    settings: Optional[Settings] = None,
    planner: Optional[Planner] = None,
) -> RunResult:
    """不启动浏览器，直接与某个 Agent 对话（默认烹饪助手）"""
    if settings is None:
        settings = load_settings()
    if planner is None:
        planner = OpenAIPlanner.from_settings(settings)

    context = ToolContext(settings=settings, action_log=ActionLog())
    runner = AgentRunner(planner, settings.max_turns)
    result = await runner.run(profile or cooking_agent(), query, context)

    _print_action_log(result)
    return result
