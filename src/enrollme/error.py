"""Custom exception hierarchy for the EnrollMe application.

This module defines the base exception class and specific error types
used throughout the application for error handling.
"""


class EnrollMeError(Exception): ...


class InternalError(EnrollMeError):
    """Error caused by failure in app logic."""


class ConfigError(EnrollMeError):
    """Error caused by invalid user configuration."""


class AuthenticationError(EnrollMeError):
    """Error caused by a failed SSO login or Duo 2FA approval."""


class PageUnresponsiveError(EnrollMeError):
    """A bounded wait on WebReg ran out of time.

    WebReg is considered unresponsive at this point. The enrollment loop does
    not recover from this error.
    """
