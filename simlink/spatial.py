"""Moving, copying and locating scene objects.

Handle-based calls never send ``INVALID_HANDLE`` to the engine. Name-based
calls resolve first and then follow the configured HandlePolicy when the
name is unknown.
"""

import logging
from enum import Enum
from typing import Optional, Union

from simlink.connection import Connection
from simlink.errors import TransportError
from simlink.handles import ObjectHandleResolver
from simlink.sentinels import first_new_handle, read_int, read_int_list, status_from_result
from simlink.transport import COPY_PASTE_OBJECTS, GET_OBJECT_POSE, SET_OBJECT_POSITION
from simlink.types import (
    INVALID_HANDLE,
    WORLD_FRAME,
    CallStatus,
    ObjectHandle,
    Pose,
    Position,
)

logger = logging.getLogger(__name__)


class HandlePolicy(Enum):
    """What name-based calls do when the name does not resolve.

    PASS_THROUGH still sends the request with ``INVALID_HANDLE`` and reports
    failure. STRICT reports failure without contacting the engine.
    """

    PASS_THROUGH = "pass_through"
    STRICT = "strict"


class SpatialManipulator:
    """Position, copy and pose operations on engine objects."""

    def __init__(
        self,
        connection: Connection,
        resolver: ObjectHandleResolver,
        policy: HandlePolicy = HandlePolicy.PASS_THROUGH,
    ):
        self._connection = connection
        self._resolver = resolver
        self.policy = policy

    def move_object(self, target: Union[ObjectHandle, str], x: float, y: float, z: float) -> bool:
        """Move an object to ``(x, y, z)`` in world coordinates.

        Args:
            target: Object handle, or object name to resolve first

        Returns:
            False iff the engine replied -1 or the handle is invalid
        """
        if isinstance(target, str):
            return self._move_named(target, x, y, z)
        if target == INVALID_HANDLE:
            logger.debug("move_object skipped for invalid handle")
            return False
        return bool(self._set_position(target, Position(x, y, z)))

    def _move_named(self, name: str, x: float, y: float, z: float) -> bool:
        handle = self._resolver.resolve(name)
        if handle != INVALID_HANDLE:
            return bool(self._set_position(handle, Position(x, y, z)))

        if self.policy is HandlePolicy.STRICT:
            logger.warning("Not moving unknown object %r", name)
            return False

        # Pass-through: the request goes out, the outcome is failure regardless of reply
        self._set_position(INVALID_HANDLE, Position(x, y, z))
        logger.warning("Moved unknown object %r with invalid handle", name)
        return False

    def _set_position(self, handle: ObjectHandle, position: Position) -> CallStatus:
        response = self._connection.set_object_position(
            {
                "handle": handle,
                "relativeToObjectHandle": WORLD_FRAME,
                "position": position.to_dict(),
            }
        )
        status = status_from_result(read_int(response, "result", SET_OBJECT_POSITION))
        if status is CallStatus.FAILED:
            logger.debug("SetObjectPosition failed for handle %d", handle)
        return status

    def copy_object(self, handle: ObjectHandle) -> ObjectHandle:
        """Duplicate an object and return the new handle, ``INVALID_HANDLE`` on failure."""
        if handle == INVALID_HANDLE:
            return INVALID_HANDLE
        response = self._connection.copy_paste_objects({"objectHandles": [handle]})
        new_handle = first_new_handle(
            read_int_list(response, "newObjectHandles", COPY_PASTE_OBJECTS)
        )
        if new_handle == INVALID_HANDLE:
            logger.warning("CopyPasteObjects returned no handle for %d", handle)
        return new_handle

    def get_pose(self, handle: ObjectHandle) -> Optional[Pose]:
        """Pose of an object in world coordinates, exactly as the engine reports it.

        Returns None for ``INVALID_HANDLE``.
        """
        if handle == INVALID_HANDLE:
            return None
        response = self._connection.get_object_pose(
            {"handle": handle, "relativeToObjectHandle": WORLD_FRAME}
        )
        pose = response.get("pose")
        if not isinstance(pose, dict):
            raise TransportError(GET_OBJECT_POSE, f"reply field 'pose' must be an object, got {pose!r}")
        try:
            return Pose.from_dict(pose)
        except (AttributeError, TypeError, ValueError) as e:
            raise TransportError(GET_OBJECT_POSE, f"malformed pose {pose!r}: {e}") from e
