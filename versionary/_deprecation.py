# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""Deprecation and sunset metadata for versioned routes.

Being deprecated is a permanent documentation fact about a binding, while
being expired depends on the clock. Both are reported; refusing expired
requests is left to the host.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional


@dataclass(frozen=True)
class SunsetPolicy:
    effective: datetime
    link: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'effective', as_utc(self.effective))


@dataclass(frozen=True)
class DeprecationInfo:
    deprecated: bool = False
    sunset: Optional[datetime] = None
    expired: bool = False
    link: Optional[str] = None


def as_utc(when):
    """Naive datetimes are taken to be UTC."""
    if when is None:
        return None
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def annotate(binding, now):
    sunset = binding.sunset_at
    expired = sunset is not None and as_utc(now) >= sunset
    return DeprecationInfo(
        deprecated=binding.deprecated,
        sunset=sunset,
        expired=expired,
        link=binding.sunset_link,
    )


def http_date(when):
    return format_datetime(as_utc(when), usegmt=True)


def deprecation_headers(info):
    headers = []
    if info.deprecated:
        headers.append(('Deprecation', 'true'))
    if info.sunset is not None:
        headers.append(('Sunset', http_date(info.sunset)))
        if info.link:
            headers.append(('Link', '<{}>; rel="sunset"'.format(info.link)))
    return headers


def version_headers(supported, deprecated):
    headers = []
    if supported:
        headers.append((
            'api-supported-versions',
            ', '.join(str(v) for v in sorted(supported))))
    if deprecated:
        headers.append((
            'api-deprecated-versions',
            ', '.join(str(v) for v in sorted(deprecated))))
    return headers
