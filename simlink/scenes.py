"""Scene loading by absolute path or by problem directory.

Problem scenes live under ``<package root>/problems/<problem>/<relative path>``.
Finding the package root is delegated to a PackagePathResolver.
"""

import importlib.util
import logging
from typing import Dict, Mapping, Optional, Protocol

from simlink.connection import Connection
from simlink.errors import PackageNotFoundError
from simlink.sentinels import read_int, status_from_load_result
from simlink.transport import LOAD_SCENE
from simlink.types import CallStatus, SceneReference

logger = logging.getLogger(__name__)

PROBLEMS_DIR = "problems"


class PackagePathResolver(Protocol):
    """Locates the root directory of a named package."""

    def package_root(self, package_name: str) -> str:
        """Return the package directory. Raises PackageNotFoundError if unknown."""
        ...


class StaticPackageResolver:
    """Resolver backed by an explicit ``{package: directory}`` mapping."""

    def __init__(self, roots: Optional[Mapping[str, str]] = None):
        self._roots: Dict[str, str] = dict(roots or {})

    def add(self, package_name: str, root: str) -> None:
        self._roots[package_name] = root

    def package_root(self, package_name: str) -> str:
        try:
            return self._roots[package_name]
        except KeyError:
            raise PackageNotFoundError(package_name) from None


class ImportlibPackageResolver:
    """Resolver for installed Python packages, using their import location."""

    def package_root(self, package_name: str) -> str:
        try:
            spec = importlib.util.find_spec(package_name)
        except (ImportError, ValueError):
            spec = None
        if spec is None or not spec.submodule_search_locations:
            raise PackageNotFoundError(package_name)
        return list(spec.submodule_search_locations)[0]


class ChainedPackageResolver:
    """Tries each resolver in order, the first hit wins."""

    def __init__(self, *resolvers: PackagePathResolver):
        self._resolvers = resolvers

    def package_root(self, package_name: str) -> str:
        for resolver in self._resolvers:
            try:
                return resolver.package_root(package_name)
            except PackageNotFoundError:
                continue
        raise PackageNotFoundError(package_name)


def problem_scene_path(package_root: str, problem_name: str, relative_path: str) -> str:
    return package_root + "/" + PROBLEMS_DIR + "/" + problem_name + "/" + relative_path


class SceneLoader:
    """Loads scene files into the engine."""

    def __init__(self, connection: Connection, path_resolver: PackagePathResolver):
        self._connection = connection
        self._path_resolver = path_resolver

    def load(self, full_path: str) -> bool:
        """Load a scene from an absolute path. True iff the engine replied 1."""
        response = self._connection.load_scene({"fileName": full_path})
        status = status_from_load_result(read_int(response, "result", LOAD_SCENE))
        if status is CallStatus.FAILED:
            logger.warning("Engine could not load scene %s", full_path)
        else:
            logger.info("Loaded scene %s", full_path)
        return bool(status)

    def load_problem_scene(self, problem_name: str, relative_path: str, package_name: str) -> bool:
        """Load ``<package root>/problems/<problem_name>/<relative_path>``.

        Raises:
            PackageNotFoundError: If the resolver does not know ``package_name``
        """
        root = self._path_resolver.package_root(package_name).rstrip("/")
        return self.load(problem_scene_path(root, problem_name, relative_path))

    def load_reference(self, reference: SceneReference) -> bool:
        if reference.is_absolute():
            return self.load(reference.full_path)
        return self.load_problem_scene(
            reference.problem_name, reference.relative_path, reference.package_name
        )
