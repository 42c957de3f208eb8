"""Error codes for CLI exit status.

Each checkout failure kind maps to one of these codes so CI scripts can
tell a PR that is not mergeable apart from a broken network or a failed
git command.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (invalid request, bad arguments)
    - 2: Config error (unreadable or invalid config file)
    - 3: Command error (git failed, timed out or was killed)
    - 4: Network error (hosting API unreachable or returned an error)
    - 5: The pull request is not mergeable
    - 6: Mergeability was still unknown when polling ran out
    - 130: Cancelled by a signal
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    COMMAND_ERROR = 3
    NETWORK_ERROR = 4
    NOT_MERGEABLE = 5
    POLL_TIMEOUT = 6
    CANCELLED = 130
