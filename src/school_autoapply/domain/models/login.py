"""Domain model for login attempts."""

from enum import Enum


class LoginOutcome(Enum):
    """What a heuristic login attempt did. None of these imply the login succeeded."""

    NO_CREDENTIALS = "no_credentials"  # Neither email nor username supplied
    FORM_NOT_FOUND = "form_not_found"  # No identifier or password input on the page
    SUBMITTED = "submitted"  # Submit control clicked
    ENTER_PRESSED = "enter_pressed"  # No submit control, Enter pressed in password field

    @property
    def attempted(self) -> bool:
        """Check if credentials were typed into the page."""
        return self in (LoginOutcome.SUBMITTED, LoginOutcome.ENTER_PRESSED)
