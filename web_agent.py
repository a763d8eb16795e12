"""
Web Task Agent - 基于 Playwright + OpenAI 的任务型网页自动化智能体

运行流程：
  提交任务 → Planner 根据工具目录选择工具 → 工具在浏览器页面上执行 →
  文本结果作为观察返回给 Planner → 直到 Planner 给出最终答案。

依赖安装：
    pip install -e .
    playwright install chromium

运行示例：
    python web_agent.py "打开 https://example.com 并告诉我页面上有哪些链接"
    python web_agent.py --agent cooking "菜单上有什么饮料？"
"""

import argparse
import asyncio
import sys

from web_task_agent import chat_with_agent, run_task
from web_task_agent.assistants import CHAT_AGENTS
from web_task_agent.errors import StartupError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="任务型网页自动化智能体")
    parser.add_argument("task", help="自然语言任务")
    parser.add_argument(
        "--agent",
        choices=sorted(CHAT_AGENTS),
        default=None,
        help="不启动浏览器，改为与指定 Agent 对话",
    )
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        if args.agent:
            result = await chat_with_agent(args.task, profile=CHAT_AGENTS[args.agent]())
        else:
            result = await run_task(args.task)
    except StartupError as e:
        print(f"[错误] {e}", file=sys.stderr)
        return 1

    print("\n--- Final Output ---")
    print(result.final_answer)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
