"""浏览器会话管理：唯一的浏览器实例 + 唯一的页面"""

from typing import Optional

from playwright.async_api import Browser, CDPSession, Page, Playwright, async_playwright

from .config import Settings
from .errors import BrowserLaunchError


class BrowserSession:
    """
    持有一个浏览器进程和一个活动页面。

    所有工具都通过同一个 page 句柄读写页面；会话由单次运行独占，
    运行结束（正常完成或致命错误）时关闭。
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None
        self.cdp: Optional[CDPSession] = None

    @property
    def is_open(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("浏览器会话尚未打开")
        return self._page

    @property
    def debugging_endpoint(self) -> str:
        return f"http://127.0.0.1:{self.settings.cdp_port}"

    async def open(self) -> "BrowserSession":
        """
        启动浏览器（默认有界面）并开启远程调试端口，创建一个新页面，
        同时在该页面上绑定 CDP 客户端以观察页面生命周期。

        CDP 客户端走 Playwright 自己的连接通道；调试端口只对外暴露，
        供外部调试工具（DevTools 等）连接同一个浏览器。
        页面不设置全局默认超时：导航沿用 Playwright 的默认值，
        点击和输入由工具自己传入 action_timeout_ms。

        启动失败时抛出 BrowserLaunchError，这是唯一不会转为工具文本结果的错误。
        """
        if self.is_open:
            return self

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=[f"--remote-debugging-port={self.settings.cdp_port}"],
            )
            self._page = await self._browser.new_page()
            self.cdp = await self._page.context.new_cdp_session(self._page)
            await self.cdp.send("Page.enable")
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"浏览器启动失败：{e}") from e

        print(f"[Agent] 浏览器已启动，调试端口：{self.debugging_endpoint}")
        return self

    async def close(self) -> None:
        """关闭 CDP 客户端、浏览器和 Playwright 驱动，释放全部资源"""
        cdp, browser, playwright = self.cdp, self._browser, self._playwright
        self.cdp = None
        self._page = None
        self._browser = None
        self._playwright = None

        try:
            if cdp is not None:
                try:
                    await cdp.detach()
                except Exception as e:
                    print(f"[警告] CDP 客户端断开失败：{e}")
            if browser is not None:
                await browser.close()
                print("[Agent] 浏览器已关闭")
        finally:
            if playwright is not None:
                await playwright.stop()

    async def __aenter__(self) -> "BrowserSession":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
