"""
Semantic version parsing and ordering.

Versions are the primary key for installed binaries, the global version
pointer and install lock identity. Supports the full semantic versioning
grammar: major.minor.patch with optional pre-release and build metadata.

Example:
    >>> v1 = Version.parse("0.3.10")
    >>> v2 = Version.parse("v0.4.0-rc.1")
    >>> v1 < v2
    True
    >>> str(v2)
    '0.4.0-rc.1'
"""

import re
from typing import Optional, Tuple

from vyperkit.core.exceptions import InvalidVersionError

_NUMERIC = r"0|[1-9]\d*"
_IDENT = r"[0-9A-Za-z-]+"

_VERSION_RE = re.compile(
    rf"^v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?$"
)


def _identifier_key(identifier: str) -> Tuple[int, int, str]:
    # Numeric identifiers sort before alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


class Version:
    """
    Semantic version value.

    Equality includes build metadata. Ordering follows semantic version
    precedence, with build metadata as a final tiebreaker so that sorting
    is total and consistent with equality.
    """

    def __init__(
        self,
        major: int,
        minor: int,
        patch: int,
        pre: str = "",
        build: str = "",
    ):
        if major < 0 or minor < 0 or patch < 0:
            raise InvalidVersionError(
                f"Version components must be non-negative: {major}.{minor}.{patch}"
            )
        self.major = major
        self.minor = minor
        self.patch = patch
        self.pre = pre
        self.build = build

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse a version string, accepting an optional leading 'v'.

        Args:
            text: Version string such as "0.3.3" or "v0.4.0-rc.1+commit.abc"

        Returns:
            Parsed Version

        Raises:
            InvalidVersionError: If text is not a valid semantic version
        """
        if not isinstance(text, str):
            raise InvalidVersionError(f"Invalid version: {text!r}")

        match = _VERSION_RE.match(text.strip())
        if not match:
            raise InvalidVersionError(
                f"Invalid version format: {text!r}. "
                "Expected major.minor.patch[-pre][+build]"
            )

        return cls(
            int(match.group("major")),
            int(match.group("minor")),
            int(match.group("patch")),
            match.group("pre") or "",
            match.group("build") or "",
        )

    @classmethod
    def try_parse(cls, text: str) -> Optional["Version"]:
        """Parse text, returning None instead of raising on invalid input."""
        try:
            return cls.parse(text)
        except InvalidVersionError:
            return None

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    def _key(self):
        if self.pre:
            pre_key = (0, tuple(_identifier_key(p) for p in self.pre.split(".")))
        else:
            pre_key = (1, ())
        build_key = (
            tuple(_identifier_key(b) for b in self.build.split("."))
            if self.build
            else ()
        )
        return (self.major, self.minor, self.patch, pre_key, build_key)

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += f"-{self.pre}"
        if self.build:
            text += f"+{self.build}"
        return text

    def __repr__(self) -> str:
        return f"Version('{self}')"
