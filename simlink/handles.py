"""Name to handle resolution."""

import logging

from simlink.connection import Connection
from simlink.sentinels import handle_from_response, read_int
from simlink.transport import GET_OBJECT_HANDLE
from simlink.types import INVALID_HANDLE, ObjectHandle

logger = logging.getLogger(__name__)


class ObjectHandleResolver:
    """Resolves scene object names to engine handles.

    An unknown name resolves to ``INVALID_HANDLE``; callers check the value.
    """

    def __init__(self, connection: Connection):
        self._connection = connection

    def resolve(self, name: str) -> ObjectHandle:
        response = self._connection.get_object_handle({"objectName": name})
        handle = handle_from_response(read_int(response, "handle", GET_OBJECT_HANDLE))
        if handle == INVALID_HANDLE:
            logger.debug("No object named %r", name)
        return handle
