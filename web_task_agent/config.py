"""配置模块：从环境变量 / .env 读取运行参数"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError, MissingCredentialError

DEFAULT_MODEL = "gpt-4o"
DEFAULT_CDP_PORT = 9222
DEFAULT_ACTION_TIMEOUT_MS = 10000
DEFAULT_MAX_TURNS = 20

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass
class Settings:
    """一次运行所需的全部配置"""
    openai_api_key: str
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    cdp_port: int = DEFAULT_CDP_PORT
    headless: bool = False
    action_timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS
    max_turns: int = DEFAULT_MAX_TURNS
    screenshot_dir: str = "."


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"环境变量 {name} 必须是整数，当前值：{raw!r}")
    if value <= 0:
        raise ConfigError(f"环境变量 {name} 必须大于 0，当前值：{value}")
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"环境变量 {name} 必须是布尔值，当前值：{raw!r}")


def load_settings(dotenv: bool = True) -> Settings:
    """
    读取配置。必须在打开任何浏览器会话之前调用。

    OPENAI_API_KEY 缺失时抛出 MissingCredentialError，避免静默失败。
    """
    if dotenv:
        load_dotenv()

    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise MissingCredentialError(
            "请设置环境变量 OPENAI_API_KEY，例如：export OPENAI_API_KEY='sk-...'（或写入 .env 文件）"
        )

    return Settings(
        openai_api_key=api_key,
        model=os.environ.get("OPENAI_MODEL") or DEFAULT_MODEL,
        base_url=os.environ.get("OPENAI_BASE_URL") or None,
        cdp_port=_int_env("BROWSER_CDP_PORT", DEFAULT_CDP_PORT),
        headless=_bool_env("BROWSER_HEADLESS", False),
        action_timeout_ms=_int_env("BROWSER_ACTION_TIMEOUT_MS", DEFAULT_ACTION_TIMEOUT_MS),
        max_turns=_int_env("AGENT_MAX_TURNS", DEFAULT_MAX_TURNS),
        screenshot_dir=os.environ.get("SCREENSHOT_DIR") or ".",
    )
