"""Canonical value types shared by every simlink component.

Handles are plain integers owned by the simulation engine. ``INVALID_HANDLE``
is the engine's own "not found" / "operation failed" value and is kept as-is
rather than mapped onto ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

# Type aliases
ObjectHandle = int

INVALID_HANDLE: ObjectHandle = -1
WORLD_FRAME: ObjectHandle = -1  # relativeToObjectHandle value for world coordinates

# Bits of the engine's simulator state code
STATE_NOT_STOPPED_BIT = 1
STATE_PAUSED_BIT = 2
RUNNING_STATUS_CODE = 1
PAUSED_STATUS_CODE = STATE_NOT_STOPPED_BIT | STATE_PAUSED_BIT


def is_valid_handle(handle: ObjectHandle) -> bool:
    """Return True unless ``handle`` is the failure sentinel."""
    return handle != INVALID_HANDLE


class SimulationState(Enum):
    """Run state of the remote simulation as last observed."""

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"

    @classmethod
    def from_status_code(cls, code: int) -> SimulationState:
        """Interpret a simulator state notification.

        Code 1 is the only running code. Code 3 (not-stopped and paused bits
        only) is paused. Negative codes and everything else are stopped.
        """
        if code == RUNNING_STATUS_CODE:
            return cls.RUNNING
        if code == PAUSED_STATUS_CODE:
            return cls.PAUSED
        return cls.STOPPED


class CallStatus(Enum):
    """Outcome of a single remote call after sentinel conversion."""

    OK = "ok"
    FAILED = "failed"

    def __bool__(self) -> bool:
        return self is CallStatus.OK


@dataclass(frozen=True)
class Position:
    """3D position in metres."""

    x: float
    y: float
    z: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Position:
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            z=float(data.get("z", 0.0)),
        )


@dataclass(frozen=True)
class Orientation:
    """Orientation as a unit quaternion (x, y, z, w)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z, "w": self.w}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Orientation:
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            z=float(data.get("z", 0.0)),
            w=float(data.get("w", 1.0)),
        )


@dataclass(frozen=True)
class Pose:
    """Position and orientation of an object.

    Attributes:
        position: Object origin
        orientation: Object rotation
        relative_to: Handle of the reference object, ``WORLD_FRAME`` for world coordinates
        frame_id: Optional frame label reported by the engine
    """

    position: Position
    orientation: Orientation = field(default_factory=Orientation)
    relative_to: ObjectHandle = WORLD_FRAME
    frame_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the engine's nested pose layout."""
        result: Dict[str, Any] = {
            "position": self.position.to_dict(),
            "orientation": self.orientation.to_dict(),
            "relativeToObjectHandle": self.relative_to,
        }
        if self.frame_id is not None:
            result["frameId"] = self.frame_id
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Pose:
        """Create from the engine's nested pose layout.

        Accepts both a bare ``{"position", "orientation"}`` mapping and the
        stamped form that wraps it under ``"pose"``.
        """
        frame_id = data.get("frameId")
        if "pose" in data and isinstance(data["pose"], dict):
            header = data.get("header") or {}
            frame_id = frame_id or header.get("frameId")
            data = data["pose"]
        return cls(
            position=Position.from_dict(data.get("position") or {}),
            orientation=Orientation.from_dict(data.get("orientation") or {}),
            relative_to=int(data.get("relativeToObjectHandle", WORLD_FRAME)),
            frame_id=frame_id,
        )


@dataclass(frozen=True)
class SceneReference:
    """Either an absolute scene path or a (problem, relative path, package) triple."""

    full_path: Optional[str] = None
    problem_name: Optional[str] = None
    relative_path: Optional[str] = None
    package_name: Optional[str] = None

    def __post_init__(self) -> None:
        triple = (self.problem_name, self.relative_path, self.package_name)
        if self.full_path is None and any(part is None for part in triple):
            raise ValueError(
                "SceneReference needs full_path or all of problem_name, "
                "relative_path and package_name"
            )
        if self.full_path is not None and any(part is not None for part in triple):
            raise ValueError("SceneReference cannot mix full_path with a problem triple")

    def is_absolute(self) -> bool:
        return self.full_path is not None

    @classmethod
    def for_problem(cls, problem_name: str, relative_path: str, package_name: str) -> SceneReference:
        return cls(
            problem_name=problem_name,
            relative_path=relative_path,
            package_name=package_name,
        )
