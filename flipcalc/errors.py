"""
Calculator errors.

Raised inside engine operations and turned into user-facing notices at the
engine boundary (see flipcalc.engines.base.user_action).
"""


class CalculatorError(Exception):
    """Base class for failures reported back to the user."""

    kind = "error"
    level = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingAddressError(CalculatorError):
    """A save was attempted without an address."""

    kind = "validation"
    level = "warning"

    def __init__(self, message: str = "Enter an address before saving."):
        super().__init__(message)


class RecordNotFoundError(CalculatorError):
    """No saved project exists for the requested address or id."""

    kind = "not_found"
    level = "info"


class NoMatchError(CalculatorError):
    """A cross-calculator pull found nothing to pull from."""

    kind = "no_match"
    level = "info"


class ConfirmationRequiredError(CalculatorError):
    """A destructive action was requested without confirmation."""

    kind = "confirm"
    level = "warning"


class StoreUnavailableError(CalculatorError):
    """The record store could not be written."""

    kind = "store"
    level = "error"
