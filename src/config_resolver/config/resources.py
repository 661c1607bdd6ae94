"""Resource lookup for 'classpath:' and 'file:' locations."""
import logging
import posixpath
import re
from abc import ABC, abstractmethod
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Sequence, Union

from src.config_resolver.exceptions.config import ConfigLocationError


logger = logging.getLogger(__name__)

CLASSPATH_URL_PREFIX = "classpath:"
CLASSPATH_ALL_URL_PREFIX = "classpath*:"
FILE_URL_PREFIX = "file:"

_URL_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]+\*?:")


def is_url(location: str) -> bool:
    """True if the location carries a scheme prefix such as 'classpath:' or 'file:'."""
    return bool(_URL_PATTERN.match(location))


def clean_path(location: str) -> str:
    """Normalize separators and '.'/'..' segments, keeping any prefix and trailing '/'."""
    location = location.replace("\\", "/")
    prefix = ""
    match = _URL_PATTERN.match(location)
    if match:
        prefix = match.group(0)
        location = location[len(prefix):]
    if not location:
        return prefix
    trailing = location.endswith("/")
    normalized = posixpath.normpath(location)
    if normalized == ".":
        normalized = ""
    elif trailing and not normalized.endswith("/"):
        normalized += "/"
    if trailing and normalized == "":
        normalized = "./"
    return prefix + normalized


def get_filename_extension(filename: Optional[str]) -> Optional[str]:
    """Extension without the dot, or None when there is none."""
    if not filename:
        return None
    dot = filename.rfind(".")
    if dot == -1 or dot == len(filename) - 1:
        return None
    return filename[dot + 1:]


class Resource(ABC):
    """A readable configuration resource.

    Identity (equality/hash) is the canonical location, so the same file
    reached through two profile contexts is recognised as one resource.
    """

    def __init__(self, location: str):
        self.location = location

    @abstractmethod
    def exists(self) -> bool:
        ...

    @abstractmethod
    def open(self) -> BinaryIO:
        """Open the resource for binary reading. Callers close it."""
        ...

    @property
    @abstractmethod
    def filename(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def uri(self) -> str:
        ...

    @property
    def description(self) -> str:
        return f"{type(self).__name__} [{self.location}]"

    def read_text(self, encoding: str = "utf-8") -> str:
        with self.open() as stream:
            return stream.read().decode(encoding)

    def _identity(self) -> Any:
        return (type(self).__name__, self.location)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return self.description


class FileSystemResource(Resource):
    """Resource backed by a filesystem path."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(str(self.path))

    def exists(self) -> bool:
        return self.path.is_file()

    def open(self) -> BinaryIO:
        return self.path.open("rb")

    @property
    def filename(self) -> Optional[str]:
        return self.path.name or None

    @property
    def uri(self) -> str:
        return self.path.absolute().as_uri()

    def _identity(self) -> Any:
        return ("file", str(self.path.absolute()))


class ClasspathResource(Resource):
    """Resource looked up, in order, under a list of classpath roots.

    Roots are directories or importlib.resources traversables of packages.
    The first root containing the path wins.
    """

    def __init__(self, path: str, roots: Sequence[Any]):
        self.path = path.lstrip("/")
        self.roots = list(roots)
        super().__init__(CLASSPATH_URL_PREFIX + "/" + self.path)

    def _target(self) -> Optional[Any]:
        if not self.path:
            return None
        for root in self.roots:
            candidate = root.joinpath(*self.path.split("/"))
            if candidate.is_file():
                return candidate
        return None

    def exists(self) -> bool:
        return self._target() is not None

    def open(self) -> BinaryIO:
        target = self._target()
        if target is None:
            raise FileNotFoundError(f"{self.description} cannot be opened because it does not exist")
        return target.open("rb")

    @property
    def filename(self) -> Optional[str]:
        return posixpath.basename(self.path) or None

    @property
    def uri(self) -> str:
        target = self._target()
        if isinstance(target, Path):
            return target.absolute().as_uri()
        return self.location

    def _identity(self) -> Any:
        return ("classpath", self.path)


class ResourceLoader:
    """Turns location strings into resources.

    Args:
        classpath_roots: Directories searched for 'classpath:' locations
        classpath_packages: Package names whose data files are also on the classpath
        base_dir: Directory relative 'file:' locations are resolved against (default: cwd)
    """

    def __init__(
        self,
        classpath_roots: Optional[Sequence[Union[str, Path]]] = None,
        classpath_packages: Optional[Sequence[str]] = None,
        base_dir: Optional[Union[str, Path]] = None,
    ):
        self.classpath_roots: List[Any] = [Path(root) for root in classpath_roots or ()]
        for package in classpath_packages or ():
            self.classpath_roots.append(importlib_resources.files(package))
        self.base_dir = Path(base_dir) if base_dir is not None else None

        logger.debug(
            "ResourceLoader initialized",
            extra={
                "classpath_roots": [str(root) for root in self.classpath_roots],
                "base_dir": str(self.base_dir) if self.base_dir else None,
            },
        )

    def get_resource(self, location: str) -> Resource:
        if location.startswith(CLASSPATH_ALL_URL_PREFIX):
            raise ConfigLocationError(
                message="Classpath wildcard patterns cannot be used as a resource location",
                location=location,
            )
        if location.startswith(CLASSPATH_URL_PREFIX):
            return ClasspathResource(location[len(CLASSPATH_URL_PREFIX):], self.classpath_roots)
        if location.startswith(FILE_URL_PREFIX):
            return self._file_resource(location[len(FILE_URL_PREFIX):])
        if is_url(location):
            raise ConfigLocationError(
                message=f"Unsupported resource location '{location}'",
                location=location,
            )
        return self._file_resource(location)

    def _file_resource(self, path: str) -> FileSystemResource:
        # file:///abs/path -> /abs/path
        if path.startswith("//"):
            path = path[2:]
        candidate = Path(path)
        if not candidate.is_absolute() and self.base_dir is not None:
            candidate = self.base_dir / candidate
        return FileSystemResource(candidate)
