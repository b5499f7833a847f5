"""
Path and name helpers for Vault object addresses.

Every Vault object is addressed by a ``path`` (zero or more ``/`` separated
segments) and a ``name`` (the final segment). Callers frequently hand us
either a full path, or a name that already embeds part of the path, so these
helpers normalize both forms into a canonical ``(path, name)`` pair.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import ArgumentError

SEPARATOR = "/"


def name_from_path(full_path: str) -> str:
    """Return the last segment of a Vault path."""
    stripped = full_path.strip(SEPARATOR)
    index = stripped.rfind(SEPARATOR)
    if index == -1:
        return stripped
    return stripped[index + 1:]


def path_from_path(full_path: str) -> str:
    """Return everything before the last segment, or "" if there is no parent."""
    stripped = full_path.strip(SEPARATOR)
    index = stripped.rfind(SEPARATOR)
    if index == -1:
        return ""
    return stripped[:index].strip(SEPARATOR)


def name_and_path_tuple(full_path: str) -> Tuple[str, str]:
    """
    Split a full Vault path into its parts.

    Returns:
        A ``(path, name)`` tuple consistent with :func:`path_from_path` and
        :func:`name_from_path`.
    """
    stripped = full_path.strip(SEPARATOR)
    path, _, name = stripped.rpartition(SEPARATOR)
    return path.strip(SEPARATOR), name


def name_and_path_from_values(name: str, path: str = "") -> Tuple[str, str]:
    """
    Combine a name and an optional path into a canonical ``(path, name)``.

    If ``name`` contains path segments and ``path`` is empty, the segments
    become the path. If both carry path information the call is ambiguous.

    Args:
        name: A bare name, or a name prefixed by path segments
        path: Optional parent path for ``name``

    Returns:
        A ``(path, name)`` tuple with leading and trailing separators removed.

    Raises:
        ArgumentError: ``name`` embeds a path while ``path`` is also given
    """
    clean_name = name.strip(SEPARATOR)
    clean_path = (path or "").strip(SEPARATOR)

    if SEPARATOR in clean_name:
        if clean_path:
            raise ArgumentError(
                "The name parameter must not contain any path segments when the "
                f"path parameter has a value (name={name!r}, path={path!r})"
            )
        return name_and_path_tuple(clean_name)

    return clean_path, clean_name


def path_combine(*parts: Optional[str]) -> str:
    """Join the non-empty parts with the path separator."""
    return SEPARATOR.join(part for part in parts if part)


@dataclass(frozen=True)
class Address:
    """Normalized address of an object stored in Vault."""

    name: str
    path: str = ""

    @property
    def full_path(self) -> str:
        if self.path:
            return f"{self.path}{SEPARATOR}{self.name}"
        return self.name

    @classmethod
    def from_values(cls, name: str, path: str = "") -> "Address":
        path, name = name_and_path_from_values(name, path)
        return cls(name=name, path=path)

    @classmethod
    def from_full_path(cls, full_path: str) -> "Address":
        path, name = name_and_path_tuple(full_path)
        return cls(name=name, path=path)

    def __str__(self) -> str:
        return self.full_path
