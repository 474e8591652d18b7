"""Error boundary handling for CLI commands.

Well-known failures are printed with their cause chain instead of a stack
trace, and the process exits with status 1.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import click

from updatebot.kind.updater import UpdaterError

T = TypeVar("T", bound=Callable[..., Any])


def format_error_chain(error: BaseException) -> list[str]:
    """`Error: ...` followed by one `Caused by: ...` line per chained cause."""
    lines = [f"Error: {error}"]
    seen = {id(error)}
    cause = error.__cause__ or error.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        lines.append(f"Caused by: {cause}")
        cause = cause.__cause__ or cause.__context__
    return lines


def cli_error_boundary(func: T) -> T:
    """Decorator that turns well-known exceptions into clean exit-1 errors.

    Catches:
        - OSError: filesystem and process failures (FileNotFoundError included)
        - RuntimeError: git/gh failures once retries are exhausted
        - ValueError: invalid input or configuration
        - UpdaterError: malformed manifests

    All other exceptions bubble up normally with full stack traces.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (OSError, RuntimeError, ValueError, UpdaterError) as e:
            for line in format_error_chain(e):
                click.echo(line, err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
