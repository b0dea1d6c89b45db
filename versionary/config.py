# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from versionary._deprecation import SunsetPolicy
from versionary._version import ApiVersion
from versionary.readers import READERS, UrlSegmentReader


def _to_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


@dataclass(frozen=True)
class VersioningOptions:
    """Service wide versioning options.

    Built once at startup and handed to the route table. Instances are
    immutable; use `replace()` to derive a variant.
    """

    default_version: ApiVersion
    version_reader: Any = field(default_factory=UrlSegmentReader)
    sunset_policies: Mapping = field(default_factory=dict, hash=False)
    report_api_versions: bool = True
    reject_expired: bool = False
    substitute_version_in_url: bool = True
    docs_prefix: Optional[str] = '/swagger'
    title: str = 'API'
    description: str = ''

    def __post_init__(self):
        object.__setattr__(
            self, 'default_version', ApiVersion.parse(self.default_version))
        policies = {}
        for version, policy in self.sunset_policies.items():
            if not isinstance(policy, SunsetPolicy):
                policy = SunsetPolicy(policy)
            policies[ApiVersion.parse(version)] = policy
        object.__setattr__(
            self, 'sunset_policies', MappingProxyType(policies))

    def replace(self, **changes):
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping, **overrides):
        """Build options from VERSIONARY_* keys of a flask style config.

        Keyword overrides win over the mapping.
        """
        kwargs = {}
        if 'VERSIONARY_DEFAULT_VERSION' in mapping:
            kwargs['default_version'] = str(
                mapping['VERSIONARY_DEFAULT_VERSION'])
        if 'VERSIONARY_VERSION_READER' in mapping:
            reader = mapping['VERSIONARY_VERSION_READER']
            if isinstance(reader, str):
                try:
                    reader = READERS[reader]()
                except KeyError:
                    raise ValueError(
                        'Unknown version reader {!r}, expected one of: {}'
                        .format(reader, ', '.join(sorted(READERS))))
            kwargs['version_reader'] = reader
        for key, name in [
                ('VERSIONARY_REPORT_API_VERSIONS', 'report_api_versions'),
                ('VERSIONARY_REJECT_EXPIRED', 'reject_expired'),
                ('VERSIONARY_SUBSTITUTE_VERSION_IN_URL',
                 'substitute_version_in_url')]:
            if key in mapping:
                kwargs[name] = _to_bool(mapping[key])
        for key, name in [
                ('VERSIONARY_DOCS_PREFIX', 'docs_prefix'),
                ('VERSIONARY_TITLE', 'title'),
                ('VERSIONARY_DESCRIPTION', 'description')]:
            if key in mapping:
                kwargs[name] = mapping[key]
        kwargs.update(overrides)
        if 'default_version' not in kwargs:
            raise ValueError('VERSIONARY_DEFAULT_VERSION is not configured')
        return cls(**kwargs)
