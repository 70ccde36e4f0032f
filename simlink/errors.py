"""Exception types raised by simlink.

Remote logic failures (the -1 / non-1 sentinels) are never raised. These
exceptions cover the cases where no meaningful reply exists at all.
"""


class SimLinkError(Exception):
    """Base class for all simlink errors."""


class SimConnectionError(SimLinkError, ConnectionError):
    """An endpoint could not be bound on the transport."""

    def __init__(self, endpoint: str, reason: str = ""):
        self.endpoint = endpoint
        self.reason = reason
        message = f"Cannot bind endpoint '{endpoint}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TransportError(SimLinkError):
    """A remote call did not produce a usable reply (unreachable, timeout, malformed)."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed at the transport: {reason}")


class PackageNotFoundError(SimLinkError, LookupError):
    """The package path resolver does not know the requested package."""

    def __init__(self, package_name: str):
        self.package_name = package_name
        super().__init__(f"Package '{package_name}' could not be located")
