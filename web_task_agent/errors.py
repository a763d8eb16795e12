"""启动阶段的致命错误

只有这些异常会穿过 run_task 的边界；循环内的工具错误一律转为文本结果。
"""


class StartupError(Exception):
    """会话建立之前发生的不可恢复错误"""


class ConfigError(StartupError):
    """环境变量取值非法"""


class MissingCredentialError(ConfigError):
    """缺少决策服务（OpenAI）的凭据"""


class BrowserLaunchError(StartupError):
    """浏览器启动失败（端口被占用、可执行文件缺失等）"""
