import asyncio

from loguru import logger
from playwright.async_api import ElementHandle
from playwright.async_api import Error as PlaywrightError

from enrollme.error import EnrollMeError
from enrollme.model import normalize_course_label
from enrollme.webreg import selectors
from enrollme.webreg.webreg import WebReg


class SearchService:
    """Service for the WebReg Advanced Search panel.

    Encapsulates the markup of the search form, the result table, and the
    per-section enroll buttons behind semantic operations, so the enrollment
    loop never deals with selectors directly.
    """

    def __init__(self, webreg: WebReg) -> None:
        self.webreg = webreg

    async def reset(self):
        """Clears the search form."""
        await self.webreg.page.click(selectors.SEARCH_RESET)

    async def search(self, section: str, timeout_ms: int):
        """Searches for `section` and waits for the result table to finish loading.

        Raises:
            PageUnresponsiveError: The loading spinner did not go away within `timeout_ms`.
        """
        await self.webreg.page.fill(selectors.SEARCH_SECTION_ID, section)
        await self.webreg.page.press(selectors.SEARCH_SECTION_ID, "Enter")
        await self.webreg.wait_for_selector(
            selectors.LOADING_SPINNER, timeout_ms=timeout_ms, state="detached"
        )
        # The table is rendered slightly after the spinner goes away
        await asyncio.sleep(0.05)

    async def open_result(self) -> str | None:
        """Expands the result row and returns its course label (e.g. "CSE 110").

        Returns:
            str | None: None if the search had no results.
        """
        header = await self.webreg.page.query_selector(selectors.RESULT_HEADER)
        if header is None:
            return None

        await header.click()
        cell = await header.query_selector(selectors.RESULT_LABEL_CELL)
        if cell is None:
            return ""
        return normalize_course_label(await cell.inner_text())

    async def find_enroll_button(self, section: str) -> ElementHandle | None:
        return await self.webreg.page.query_selector(selectors.enroll_button(section))

    async def is_disabled(self, button: ElementHandle) -> bool:
        return await button.get_attribute("aria-disabled") == "true"

    async def finish_enrollment(self, send_email: bool, timeout_ms: int) -> bool:
        """Handles the dialog WebReg shows after a confirmed enrollment.

        Asks WebReg to send the confirmation email when `send_email` is set. This
        is best-effort: any failure falls back to closing the dialog.

        Returns:
            bool: True if the confirmation email was sent.
        """
        await asyncio.sleep(0.5)
        # The dialog stays in the DOM once shown, so only a visible one counts
        if not await self.webreg.page.is_visible(selectors.DIALOG_AFTER_ACTION):
            return False

        if send_email:
            try:
                await self.webreg.page.click(selectors.DIALOG_AFTER_ACTION_EMAIL, timeout=timeout_ms)
                await self.webreg.wait_for_selector(selectors.DIALOG_MSG_CLOSE, timeout_ms=timeout_ms)
                await self.webreg.page.click(selectors.DIALOG_MSG_CLOSE, timeout=timeout_ms)
                logger.info("Confirmation Email Sent.")
                return True
            except (PlaywrightError, EnrollMeError) as e:
                logger.warning(f"Could not send confirmation email: {e}")

        try:
            await self.webreg.page.click(selectors.DIALOG_AFTER_ACTION_CLOSE, timeout=timeout_ms)
        except PlaywrightError as e:
            logger.debug(f"Could not close the after-action dialog: {e}")
        return False
