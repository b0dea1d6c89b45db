# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""API versions, and picking the effective version for a request."""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from versionary._deprecation import DeprecationInfo, annotate
from versionary.errors import MalformedVersion, UnsupportedVersion


# a bare major version is what url segments like /v1/ carry
VERSION_RE = re.compile(r'(\d+)(?:\.(\d+))?', re.ASCII)


@dataclass(frozen=True, order=True)
class ApiVersion:
    major: int
    minor: int = 0

    def __post_init__(self):
        if not isinstance(self.major, int) or not isinstance(self.minor, int):
            raise TypeError(
                'Version components must be integers, not {}.{}'.format(
                    type(self.major).__name__, type(self.minor).__name__))
        if self.major < 0 or self.minor < 0:
            raise ValueError('Version components must not be negative')

    @classmethod
    def parse(cls, token):
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            raise TypeError(
                'Version must be a string, not %s' % type(token).__name__)
        m = VERSION_RE.fullmatch(token)
        if m is None:
            raise MalformedVersion(token)
        major, minor = m.groups()
        return cls(int(major), int(minor or 0))

    @property
    def short(self):
        """Major only when the minor is 0, as in '1' or '1.2'."""
        if self.minor == 0:
            return str(self.major)
        return str(self)

    @property
    def group_name(self):
        return 'v' + self.short

    def __str__(self):
        return '{}.{}'.format(self.major, self.minor)


def resolve(token, default_version, supported_versions):
    """Return the effective version for a raw request token.

    :param token: The version string the client sent, or None.
    :param default_version: Used when the client sent nothing.
    :param supported_versions: Every version the client may ask for.
    :raises MalformedVersion: when the token does not parse.
    :raises UnsupportedVersion: when the version is not supported.
    """
    if token is None:
        return default_version
    version = ApiVersion.parse(token)
    if version not in supported_versions:
        raise UnsupportedVersion(version, supported_versions)
    return version


@dataclass(frozen=True)
class ResolvedRequest:
    version: ApiVersion
    binding: Any
    deprecation: DeprecationInfo


def resolve_request(table, template, method, token, now: Optional[datetime] = None):
    version = resolve(token, table.options.default_version, table.versions)
    binding = table.lookup(template, method, version)
    if now is None:
        now = datetime.now(timezone.utc)
    return ResolvedRequest(version, binding, annotate(binding, now))
