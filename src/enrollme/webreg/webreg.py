import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any

from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright
import requests

from enrollme.config import Config
from enrollme.error import AuthenticationError
from enrollme.error import PageUnresponsiveError
from enrollme.webreg import selectors
from enrollme.webreg.path import Path


class WebReg:
    def __init__(self, config: Config):
        self.config = config

    async def start(self):
        """Start the browser"""
        self.playwright = await async_playwright().start()

        match self.config.browser:
            case "chromium":
                browser = self.playwright.chromium
            case "firefox":
                browser = self.playwright.firefox
            case "webkit":
                browser = self.playwright.webkit
            case _:
                logger.error(f"Unsupported browser: {self.config.browser}. Defaulting to Chromium.")
                browser = self.playwright.chromium

        launch_kwargs: dict[str, Any] = {"headless": self.config.headless}
        self.browser = await browser.launch(**launch_kwargs)
        self.page = await self.browser.new_page()

    async def close(self):
        """Close the browser"""
        # NOTE: self.browser and self.playwright is created at self.start(), not self.__init__(),
        # thus there is no guarantee it is initialized yet.
        if hasattr(self, "browser"):
            await self.browser.close()
        if hasattr(self, "playwright"):
            await self.playwright.stop()

    async def authenticate(self, username: str, password: str):
        """Logs in through UCSD SSO and waits for the Duo 2FA approval.

        Raises:
            AuthenticationError: The password was rejected, or Duo was not approved in time.
        """
        await self.page.goto(Path.START)
        await self.page.fill(selectors.SSO_USERNAME, username)
        await self.page.fill(selectors.SSO_PASSWORD, password)
        await self.page.press(selectors.SSO_PASSWORD, "Enter")
        await self.page.wait_for_load_state()

        if await self.page.query_selector(selectors.LOGIN_ERROR):
            raise AuthenticationError("Invalid Password. Try Again.")

        logger.info("Please authenticate this session with Duo 2FA.")
        if self.config.auth_discord_webhook_url:
            await self._notify_duo_prompt()

        try:
            await self.page.wait_for_url(
                lambda url: "start" in url, timeout=self.config.duo_timeout * 1000
            )
        except PlaywrightTimeoutError as e:
            raise AuthenticationError("Failed to authenticate. Try again.") from e

        await self.wait_for_selector(selectors.START_GO_BUTTON, timeout_ms=5000)
        logger.success("Logged in successfully.")

    async def open_advanced_search(self):
        """Goes from the start page to the Advanced Search panel."""
        await self.page.click(selectors.START_GO_BUTTON)
        await asyncio.sleep(1)
        await self.page.click(selectors.ADVANCED_SEARCH)

    async def wait_for_selector(self, selector: str, timeout_ms: int, state: str = "attached"):
        """Blocks until `selector` reaches `state`.

        Raises:
            PageUnresponsiveError: The state was not reached within `timeout_ms`.
        """
        try:
            await self.page.wait_for_selector(selector, state=state, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise PageUnresponsiveError(
                f"Timed out after {timeout_ms}ms waiting for {selector} to be {state}."
            ) from e

    async def wait_until(
        self,
        predicate: Callable[[], Awaitable[bool]],
        timeout_ms: int,
        description: str = "condition",
        poll_ms: int = 100,
    ):
        """Polls `predicate` until it holds.

        Raises:
            PageUnresponsiveError: `predicate` never held within `timeout_ms`.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000
        while True:
            if await predicate():
                return
            if loop.time() >= deadline:
                raise PageUnresponsiveError(f"Timed out after {timeout_ms}ms waiting for {description}.")
            await asyncio.sleep(poll_ms / 1000)

    async def _notify_duo_prompt(self):
        """Pings the auth webhook so the user knows a Duo push is waiting."""
        message = "EnrollMe is waiting for you to approve the Duo push."
        if self.config.user_id:
            message = f"<@{self.config.user_id}> {message}"

        try:
            data = {"username": "EnrollMe Auth", "content": message}
            response = await asyncio.to_thread(
                requests.post,
                self.config.auth_discord_webhook_url,
                data=data,
                timeout=10,
            )
            response.raise_for_status()
            logger.info("Duo prompt sent to webhook.")
        except requests.RequestException as e:
            logger.error(f"Failed to notify via webhook: {e}")
