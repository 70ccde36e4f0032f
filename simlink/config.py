"""simlink configuration.

Defaults describe a V-REP style engine exposing its ROS services under the
``vrep`` namespace. Every value can be overridden from the environment with a
``SIMLINK_`` prefixed variable.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

DEFAULT_BASE_URL = "http://localhost:8765"
DEFAULT_TIMEOUT = 10.0  # seconds per remote call
DEFAULT_NAMESPACE = "vrep"
DEFAULT_STATE_TOPIC = "/vrep/info"
DEFAULT_POLL_INTERVAL = 0.05  # seconds between notification polls
DEFAULT_HANDLE_POLICY = "pass_through"

HANDLE_POLICIES = ("pass_through", "strict")

ENV_PREFIX = "SIMLINK_"


@dataclass
class SimLinkConfig:
    """Configuration for SimulatorClient and its transport.

    ``package_roots`` maps package names to directories for scene lookup; it
    is read from ``SIMLINK_PACKAGE_ROOTS`` as ``name=/path,other=/path``.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    namespace: str = DEFAULT_NAMESPACE
    state_topic: str = DEFAULT_STATE_TOPIC
    poll_interval: float = DEFAULT_POLL_INTERVAL
    handle_policy: str = DEFAULT_HANDLE_POLICY
    package_roots: Dict[str, str] = field(default_factory=dict)

    def service_name(self, operation: str) -> str:
        """Full service name for an engine operation, e.g. ``vrep/simRosStartSimulation``."""
        name = f"simRos{operation}"
        if not self.namespace:
            return name
        return f"{self.namespace.strip('/')}/{name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "namespace": self.namespace,
            "state_topic": self.state_topic,
            "poll_interval": self.poll_interval,
            "handle_policy": self.handle_policy,
            "package_roots": dict(self.package_roots),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimLinkConfig":
        """Create config from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SimLinkConfig":
        """Build a config from ``SIMLINK_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (used by tests)
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        for key in ("base_url", "namespace", "state_topic", "handle_policy"):
            raw = env.get(ENV_PREFIX + key.upper())
            if raw is not None:
                data[key] = raw

        for key in ("timeout", "poll_interval"):
            raw = env.get(ENV_PREFIX + key.upper())
            if raw is not None:
                try:
                    data[key] = float(raw)
                except ValueError:
                    raise ValueError(f"{ENV_PREFIX}{key.upper()} must be a number, got {raw!r}")

        raw_roots = env.get(ENV_PREFIX + "PACKAGE_ROOTS")
        if raw_roots:
            data["package_roots"] = parse_package_roots(raw_roots)

        config = cls.from_dict(data)
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameters are invalid
        """
        if not self.base_url:
            raise ValueError("base_url must not be empty")

        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")

        if not self.state_topic:
            raise ValueError("state_topic must not be empty")

        if self.handle_policy not in HANDLE_POLICIES:
            raise ValueError(
                f"handle_policy must be one of {HANDLE_POLICIES}, got {self.handle_policy!r}"
            )


def parse_package_roots(raw: str) -> Dict[str, str]:
    """Parse ``name=/path,other=/path`` into a mapping."""
    roots: Dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, path = entry.partition("=")
        if not sep or not name.strip() or not path.strip():
            raise ValueError(f"Invalid package root entry: {entry!r}")
        roots[name.strip()] = path.strip()
    return roots
