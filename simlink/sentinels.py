"""Conversion between engine sentinel values and CallStatus.

The engine uses two conventions and both are kept exactly:

- start, stop and set-position report failure as ``result == -1``
- load-scene reports success only as ``result == 1``
"""

from typing import Any, List, Mapping, Sequence

from simlink.errors import TransportError
from simlink.types import INVALID_HANDLE, CallStatus, ObjectHandle

FAILURE_RESULT = -1
LOAD_SUCCESS_RESULT = 1


def status_from_result(result: int) -> CallStatus:
    """Convert a -1-on-failure result code."""
    return CallStatus.FAILED if result == FAILURE_RESULT else CallStatus.OK


def status_from_load_result(result: int) -> CallStatus:
    """Convert a 1-on-success scene load result code."""
    return CallStatus.OK if result == LOAD_SUCCESS_RESULT else CallStatus.FAILED


def handle_from_response(handle: int) -> ObjectHandle:
    """Pass an engine handle through; negative values collapse to the sentinel."""
    return handle if handle >= 0 else INVALID_HANDLE


def first_new_handle(handles: Sequence[int]) -> ObjectHandle:
    """Return the first handle of a copy reply, or the sentinel for an empty reply."""
    if not handles:
        return INVALID_HANDLE
    return handle_from_response(handles[0])


def read_int(response: Mapping[str, Any], key: str, operation: str) -> int:
    """Read an integer field from a reply.

    Raises:
        TransportError: If the field is missing or not an integer
    """
    value = response.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TransportError(operation, f"reply field '{key}' must be an int, got {value!r}")
    return value


def read_int_list(response: Mapping[str, Any], key: str, operation: str) -> List[int]:
    """Read a list of integers from a reply. A missing field reads as empty."""
    values = response.get(key, [])
    if not isinstance(values, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in values
    ):
        raise TransportError(operation, f"reply field '{key}' must be a list of ints, got {values!r}")
    return values
