from playwright.async_api import ElementHandle

from enrollme.error import InternalError
from enrollme.webreg import selectors
from enrollme.webreg.webreg import WebReg


class PopupInspector:
    """Reads the jQuery UI dialogs WebReg shows after an action.

    WebReg keeps its dialogs in the DOM at all times and only toggles their
    inline style, so a dialog counts as active only when its style marks it as
    displayed. Nothing is cached; every query re-reads the live page.
    """

    def __init__(self, webreg: WebReg) -> None:
        self.webreg = webreg

    async def find_active_modal(self) -> ElementHandle | None:
        """Returns the first visible dialog, or None if no dialog is blocking the page."""
        for dialog in await self.webreg.page.query_selector_all(selectors.DIALOG):
            style = await dialog.get_attribute("style") or ""
            if selectors.DIALOG_VISIBLE_STYLE in style:
                return dialog
        return None

    async def has_action(self, modal: ElementHandle, label: str) -> ElementHandle | None:
        """Returns the dialog button whose visible text is exactly `label`."""
        for button in await modal.query_selector_all(selectors.DIALOG_BUTTON_TEXT):
            if (await button.inner_text()).strip() == label:
                return button
        return None

    async def wait_for_modal(self, timeout_ms: int) -> ElementHandle:
        """Blocks until a dialog becomes visible and returns it.

        Raises:
            PageUnresponsiveError: No dialog showed up within `timeout_ms`.
        """
        found: ElementHandle | None = None

        async def is_visible() -> bool:
            nonlocal found
            found = await self.find_active_modal()
            return found is not None

        await self.webreg.wait_until(is_visible, timeout_ms, "a dialog to appear")
        if found is None:
            raise InternalError("Dialog wait returned without a visible dialog.")
        return found

    async def dismiss(self, modal: ElementHandle | None = None) -> bool:
        """Clicks the close button of `modal` (or of the active dialog).

        Returns:
            bool: False if there was no dialog, or the dialog has no close button.
        """
        if modal is None:
            modal = await self.find_active_modal()
        if modal is None:
            return False

        for selector in selectors.DIALOG_CLOSE_BUTTONS:
            button = await modal.query_selector(selector)
            if button:
                await button.click()
                return True
        return False
