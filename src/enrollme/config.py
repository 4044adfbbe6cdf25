import os
import re
from typing import Self

from dotenv import load_dotenv
from loguru import logger
import requests


class Config:
    """Application configuration manager.

    Handles loading and validation of environment variables and configuration settings
    for the EnrollMe application, including credentials, browser settings, enrollment
    loop tuning, and Discord integration.
    """

    _instance: Self | None = None

    def load(self):
        """Load environment variables

        The priority is .env file > environment variables
        See .env-example for the available variables
        """
        load_dotenv()

        # SSO credentials. Both can be overridden from the command line.
        self.username = os.getenv("USERNAME")
        self.password = os.getenv("PASSWORD")
        if self.username is None or self.password is None:
            logger.warning("USERNAME and PASSWORD environment variables are not set.")

        self.user_id = os.getenv("USER_ID")
        self.headless = self._is_truthy(os.getenv("HEADLESS", "true"))
        self.browser = os.getenv("BROWSER", "chromium").lower()
        self.duo_timeout = int(os.getenv("DUO_TIMEOUT", 120))

        self.auth_discord_webhook_url = os.getenv("AUTH_DISCORD_WEBHOOK_URL")
        self.enroll_discord_webhook_url = os.getenv("ENROLL_DISCORD_WEBHOOK_URL")
        if self.enroll_discord_webhook_url and not self._is_webhook_valid(
            self.enroll_discord_webhook_url
        ):
            logger.error("Invalid ENROLL_DISCORD_WEBHOOK_URL. Notifications disabled.")
            self.enroll_discord_webhook_url = None

        # Enrollment loop
        self.sections = self._split_sections(os.getenv("ENROLL_SECTIONS", ""))
        enroll_max = os.getenv("ENROLL_MAX")
        self.enroll_max = int(enroll_max) if enroll_max else None
        self.enroll_interval_ms = int(os.getenv("ENROLL_INTERVAL_MS", 500))
        self.search_timeout_ms = int(os.getenv("ENROLL_SEARCH_TIMEOUT_MS", 5000))
        self.modal_timeout_ms = int(os.getenv("ENROLL_MODAL_TIMEOUT_MS", 10000))
        self.email_timeout_ms = int(os.getenv("ENROLL_EMAIL_TIMEOUT_MS", 10000))
        self.notfound_retry = self._is_truthy(os.getenv("ENROLL_NOTFOUND_RETRY", "true"))
        self.max_passes = int(os.getenv("ENROLL_MAX_PASSES", 0))
        self.send_email = self._is_truthy(os.getenv("ENROLL_SEND_EMAIL", "true"))

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)

            cls._instance.load()
        return cls._instance

    @staticmethod
    def _is_webhook_valid(url: str) -> bool:
        try:
            resp = requests.head(url, timeout=5)
            return resp.status_code == 200
        except requests.RequestException:
            return False

    @staticmethod
    def _split_sections(value: str) -> list[str]:
        return [part for part in re.split(r"[\s,]+", value) if part]

    def _is_truthy(self, bool_value: str) -> bool:
        return bool_value.lower() in (
            "true",
            "1",
            "yes",
        )
