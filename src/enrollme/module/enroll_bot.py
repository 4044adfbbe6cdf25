import asyncio
from collections.abc import AsyncIterator
from collections.abc import Iterable
from dataclasses import replace

from loguru import logger

from enrollme.config import Config
from enrollme.model import EnrollmentSession
from enrollme.model import Outcome
from enrollme.model import OutcomeKind
from enrollme.module.notifier import send_enrollment_summary
from enrollme.service.popup_inspector import PopupInspector
from enrollme.service.search_service import SearchService
from enrollme.webreg import selectors
from enrollme.webreg.webreg import WebReg


class EnrollBot:
    """Keeps trying to enroll in a list of sections until they are all taken or the cap is hit.

    Each pass goes through the requested sections in order. Sections that could
    not be enrolled in (not open yet, waitlist only, ...) are retried on the next
    pass. Only a timed out wait on WebReg aborts the run.
    """

    def __init__(self, webreg: WebReg, conf: Config | None = None):
        self.conf = conf or Config()
        self.webreg = webreg
        self.popups = PopupInspector(webreg)
        self.search = SearchService(webreg)

    async def start(self, username: str, password: str, sections: Iterable[str], cap: int):
        """Logs in, runs the enrollment loop, and closes the browser.

        Raises:
            AuthenticationError: Login or Duo approval failed. The loop never ran.
            PageUnresponsiveError: WebReg stopped responding mid-run.
        """
        try:
            await self.webreg.start()
            await self.webreg.authenticate(username, password)
            await self.webreg.open_advanced_search()

            enrolled, outcomes = await self.run(sections, cap)

            if self.conf.enroll_discord_webhook_url:
                await send_enrollment_summary(self.conf.enroll_discord_webhook_url, outcomes, enrolled)
        finally:
            await self.webreg.close()

    async def run(self, sections: Iterable[str], cap: int) -> tuple[list[str], list[Outcome]]:
        """Drives the loop to completion.

        Returns:
            tuple[list[str], list[Outcome]]: The enrolled sections in enrollment order,
                and every outcome in the order it happened.
        """
        session = EnrollmentSession(list(sections), cap)
        outcomes = [outcome async for outcome in self.attempts(session)]

        logger.success(f"Successfully Enrolled In {len(session.enrolled)} Classes.")
        logger.info(f"Classes: {', '.join(session.enrolled)}")
        return list(session.enrolled), outcomes

    async def attempts(self, session: EnrollmentSession) -> AsyncIterator[Outcome]:
        """Yields one outcome per section attempt, lazily.

        Runs until every section is enrolled (or dropped when not-found retry is off),
        the cap is reached, or `max_passes` passes are done. With the default settings a
        section that never shows up is retried forever, so callers that need a bound
        should stop iterating on their own.
        """
        while not session.finished:
            if self.conf.max_passes and session.passes >= self.conf.max_passes:
                logger.warning(f"Stopping after {session.passes} passes.")
                return
            session.passes += 1

            for section in session.pending:
                # Be nice to WebReg
                await asyncio.sleep(self.conf.enroll_interval_ms / 1000)

                outcome = await self.attempt(section)
                if outcome.is_success:
                    session.record_success(section)
                    outcome = await self.finish(outcome)
                elif outcome.kind is OutcomeKind.SECTION_NOT_FOUND and not self.conf.notfound_retry:
                    logger.warning(f"Not retrying section ID {section}.")
                    session.dropped.add(section)

                yield outcome

                if session.cap_reached:
                    return

    async def attempt(self, section: str) -> Outcome:
        """Runs one search-enroll-confirm sequence for `section` and classifies the result."""
        await self.search.reset()
        await self.search.search(section, self.conf.search_timeout_ms)

        course = await self.search.open_result()
        if course is None:
            # A search for an invalid ID may pop up a system error
            await self.popups.dismiss()
            return self._report(Outcome(OutcomeKind.SECTION_NOT_FOUND, section))

        button = await self.search.find_enroll_button(section)
        if button is None:
            return self._report(Outcome(OutcomeKind.NO_ENROLL_BUTTON, section, course))

        if await self.search.is_disabled(button):
            return self._report(Outcome(OutcomeKind.BUTTON_DISABLED, section, course))

        await button.click()
        modal = await self.popups.wait_for_modal(self.conf.modal_timeout_ms)

        confirm = await self.popups.has_action(modal, selectors.CONFIRM_LABEL)
        if confirm is None:
            await self.popups.dismiss(modal)
            return self._report(Outcome(OutcomeKind.NO_CONFIRM_PERMISSION, section, course))

        await confirm.click()
        return self._report(Outcome(OutcomeKind.SUCCESS, section, course))

    async def finish(self, outcome: Outcome) -> Outcome:
        """Deals with the post-enrollment dialog. Runs after the section is recorded as enrolled."""
        email_sent = await self.search.finish_enrollment(
            self.conf.send_email, self.conf.email_timeout_ms
        )
        return replace(outcome, email_sent=email_sent)

    @staticmethod
    def _report(outcome: Outcome) -> Outcome:
        if outcome.is_success:
            logger.success(outcome.describe())
        else:
            logger.error(outcome.describe())
        return outcome
