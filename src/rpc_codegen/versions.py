#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Version Registry

Holds the closed set of supported RPC API versions and derives the naming
forms used by the generators:

    Version(29, 1).as_str()          -> "v29.1"
    Version(29, 1).as_module_name()  -> "v29_1"
    Version(29, 1).as_doc_version()  -> "29.1"
    Version(29, 1).as_number()       -> "29_1"
    Version(29, 1).package_version() -> "29.1.0"

A minor of 0 is omitted from every form except package_version().
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .errors import UnsupportedVersionError, VersionParseError


_TAG_RE = re.compile(r'^[vV]?(\d+)(?:\.(\d+))?$')


class SupportedMajor(Enum):
    """Closed set of API major versions the generators know about."""
    V17 = 17
    V18 = 18
    V19 = 19
    V20 = 20
    V21 = 21
    V22 = 22
    V23 = 23
    V24 = 24
    V25 = 25
    V26 = 26
    V27 = 27
    V28 = 28
    V29 = 29


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int = 0

    @classmethod
    def parse(cls, tag: str) -> "Version":
        """Parse "v29", "29", "v29.1" or "29.1"."""
        match = _TAG_RE.match(tag.strip()) if isinstance(tag, str) else None
        if not match:
            raise VersionParseError(str(tag))
        major, minor = match.groups()
        return cls(int(major), int(minor or 0))

    def _suffix(self, sep: str) -> str:
        if self.minor:
            return f"{self.major}{sep}{self.minor}"
        return str(self.major)

    def as_str(self) -> str:
        return "v" + self._suffix(".")

    def as_module_name(self) -> str:
        return "v" + self._suffix("_")

    def as_doc_version(self) -> str:
        return self._suffix(".")

    def as_number(self) -> str:
        return self._suffix("_")

    def package_version(self) -> str:
        return f"{self.major}.{self.minor}.0"

    @property
    def supported_major(self) -> SupportedMajor:
        """The registry entry for this version's major, or UnsupportedVersionError."""
        try:
            return SupportedMajor(self.major)
        except ValueError as exc:
            raise UnsupportedVersionError(self.as_str()) from exc

    def __str__(self) -> str:
        return self.as_str()


SUPPORTED_VERSIONS: Tuple[Version, ...] = tuple(Version(m.value) for m in SupportedMajor)
DEFAULT_VERSION = Version(SupportedMajor.V29.value)
_SUPPORTED_MAJORS = frozenset(m.value for m in SupportedMajor)


def resolve_version(tag: str) -> Version:
    """Parse a tag and check that its major version is supported."""
    version = Version.parse(tag)
    if version.major not in _SUPPORTED_MAJORS:
        raise UnsupportedVersionError(version.as_str())
    return version


def resolve_versions(tags: List[str]) -> List[Version]:
    """Resolve tags, dropping duplicates and returning them in ascending order."""
    return sorted({resolve_version(tag) for tag in tags})


def supported_tags() -> List[str]:
    return [v.as_str() for v in SUPPORTED_VERSIONS]
