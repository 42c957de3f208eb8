"""Checkout services: mergeability polling and checkout orchestration."""

from prco.services.checkout import (
    CheckoutStrategy,
    PullRequestCheckout,
    RefPairCheckout,
    StepRunner,
    run_checkout,
)
from prco.services.errors import (
    ApiFailed,
    Cancelled,
    CheckoutError,
    CommandFailed,
    InvalidRequest,
    NotMergeable,
    PollTimeout,
)
from prco.services.model import (
    CheckoutOutcome,
    CheckoutRequest,
    PullRequestTarget,
    RefPairTarget,
)
from prco.services.poller import wait_until_mergeable

__all__ = [
    # checkout
    "CheckoutStrategy",
    "PullRequestCheckout",
    "RefPairCheckout",
    "StepRunner",
    "run_checkout",
    # errors
    "ApiFailed",
    "Cancelled",
    "CheckoutError",
    "CommandFailed",
    "InvalidRequest",
    "NotMergeable",
    "PollTimeout",
    # model
    "CheckoutOutcome",
    "CheckoutRequest",
    "PullRequestTarget",
    "RefPairTarget",
    # poller
    "wait_until_mergeable",
]
