"""Waiting on Google Cloud long-running operations."""

from __future__ import annotations

import logging
import time
from typing import Callable

from pdum.gcp_project.types.exceptions import OperationError, OperationTimeoutError

logger = logging.getLogger(__name__)


def is_done(operation: dict) -> bool:
    """Return True when ``operation`` has reached a terminal state.

    Resource Manager and Service Usage operations report ``done: true``;
    Compute operations report ``status: "DONE"``.
    """
    return bool(operation.get("done", False)) or operation.get("status") == "DONE"


def raise_for_error(operation: dict, activity: str) -> None:
    """Raise `OperationError` if a finished operation carries an error."""
    error = operation.get("error")
    if not error:
        return

    # Compute wraps its errors in a list
    if "errors" in error:
        details = error.get("errors") or [{}]
        code = ", ".join(str(e.get("code", "Unknown")) for e in details)
        message = "; ".join(e.get("message", "Unknown error") for e in details)
    else:
        code = str(error.get("code", "Unknown"))
        message = error.get("message", "Unknown error")
    raise OperationError(activity, code, message)


def wait_for_operation(
    operation: dict,
    refresh: Callable[[dict], dict],
    *,
    activity: str,
    timeout: float = 240.0,
    polling_interval: float = 5.0,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> dict:
    """Poll an operation until it finishes.

    Parameters
    ----------
    operation : dict
        The operation returned by the API call that started it.
    refresh : Callable[[dict], dict]
        Fetches the latest version of an operation.
    activity : str
        What the operation does, used in log and error messages (e.g. ``"project to create"``).
    timeout : float, default 240.0
        Max seconds to wait.
    polling_interval : float, default 5.0
        Seconds between polls.

    Returns
    -------
    dict
        The finished operation.

    Raises
    ------
    OperationTimeoutError
        If the operation is still running after ``timeout`` seconds.
    OperationError
        If the operation finished with an error.
    """
    op_name = operation.get("name", "")
    start = clock()
    while not is_done(operation):
        if clock() - start > timeout:
            raise OperationTimeoutError(
                f"Timed out after {timeout}s waiting for {activity} (operation: {op_name})"
            )
        logger.debug("Waiting for %s (operation: %s)", activity, op_name)
        sleep(polling_interval)
        operation = refresh(operation)

    raise_for_error(operation, activity)
    return operation


__all__ = ["is_done", "raise_for_error", "wait_for_operation"]
