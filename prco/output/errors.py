"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prco.core.errors import ErrorCode
from prco.output.console import Style
from prco.services.errors import (
    ApiFailed,
    Cancelled,
    CheckoutError,
    CommandFailed,
    InvalidRequest,
    NotMergeable,
    PollTimeout,
)

if TYPE_CHECKING:
    from prco.output.console import ConsoleProtocol

__all__ = ["print_checkout_error", "checkout_error_exit_code"]


def print_checkout_error(error: CheckoutError, console: ConsoleProtocol) -> None:
    """Print checkout error to console with a hint where one helps."""
    console.error(str(error))
    match error:
        case ApiFailed(status=401 | 403):
            console.print("hint: pass --token or set GITHUB_TOKEN", Style.DIM)
        case ApiFailed(status=404):
            console.print("hint: check --repo and the PR number", Style.DIM)
        case PollTimeout():
            console.print("hint: raise --timeout to wait longer", Style.DIM)
        case CommandFailed(killed=True):
            console.print("hint: git did not exit after SIGTERM and was killed", Style.DIM)
        case _:
            pass


def checkout_error_exit_code(error: CheckoutError) -> int:
    """Get exit code for a checkout error."""
    match error:
        case InvalidRequest():
            return int(ErrorCode.USER_ERROR)
        case ApiFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case NotMergeable():
            return int(ErrorCode.NOT_MERGEABLE)
        case PollTimeout():
            return int(ErrorCode.POLL_TIMEOUT)
        case Cancelled():
            return int(ErrorCode.CANCELLED)
        case CommandFailed():
            return int(ErrorCode.COMMAND_ERROR)
