# errors.py
"""
Error taxonomy shared by the profile store, the generator and the workflows.

Store-level errors are raised and caught by the UI callbacks in logic/.
GenerationError never reaches the UI: the generator logs it and returns None.
"""


class WellnessHubError(Exception):
    """Base class; the message is shown to the user as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(WellnessHubError):
    """Bad credentials or an expired registration."""


class RegistrationError(WellnessHubError):
    """The email is not pre-provisioned for registration."""


class NotFoundError(WellnessHubError):
    """Unknown email or sheet name."""


class GenerationError(WellnessHubError):
    """Missing parameters, a failed API call or a malformed response."""


class ProfileMissingError(WellnessHubError):
    """A workflow was started without a session or a required profile field."""
