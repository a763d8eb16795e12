"""Web Task Agent 包

包含各个模块：
- config: 配置读取
- errors: 启动阶段的错误
- models: 数据模型
- session: 浏览器会话
- perception: 感知模块
- controller: 浏览器工具
- catalog: 工具目录
- memory: Action Log
- planner: 规划模块
- assistants: Agent 定义
- core: 主循环与入口
"""

from .assistants import AgentProfile, browser_agent, coding_agent, cooking_agent, gateway_agent
from .catalog import Tool, ToolCatalog, ToolContext
from .config import Settings, load_settings
from .core import AgentRunner, chat_with_agent, run_task
from .errors import BrowserLaunchError, ConfigError, MissingCredentialError, StartupError
from .memory import ActionLog
from .models import ActionRecord, ElementDescriptor, PlannerOutput, RunResult, ToolCall
from .perception import Perception
from .planner import OpenAIPlanner, Planner
from .session import BrowserSession

__all__ = [
    "ActionLog",
    "ActionRecord",
    "AgentProfile",
    "AgentRunner",
    "BrowserLaunchError",
    "BrowserSession",
    "ConfigError",
    "ElementDescriptor",
    "MissingCredentialError",
    "OpenAIPlanner",
    "Perception",
    "Planner",
    "PlannerOutput",
    "RunResult",
    "Settings",
    "StartupError",
    "Tool",
    "ToolCall",
    "ToolCatalog",
    "ToolContext",
    "browser_agent",
    "chat_with_agent",
    "coding_agent",
    "cooking_agent",
    "gateway_agent",
    "load_settings",
    "run_task",
]
