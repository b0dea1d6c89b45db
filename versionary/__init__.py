# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).


from ._deprecation import (  # NOQA
    DeprecationInfo,
    SunsetPolicy,
    annotate,
    deprecation_headers,
)
from ._routes import (  # NOQA
    RouteBinding,
    RouteTable,
    VersionSet,
)
from ._validation import DataValidationError  # NOQA
from ._version import (  # NOQA
    ApiVersion,
    ResolvedRequest,
    resolve,
    resolve_request,
)
from .config import VersioningOptions  # NOQA
from .errors import (  # NOQA
    DuplicateBinding,
    InvalidBinding,
    MalformedVersion,
    NotFound,
    SunsetExpired,
    UnsupportedVersion,
    VersionaryError,
)
from .projection import (  # NOQA
    Document,
    Operation,
    Parameter,
    project,
)


__all__ = [
    'ApiVersion',
    'DataValidationError',
    'DeprecationInfo',
    'Document',
    'DuplicateBinding',
    'InvalidBinding',
    'MalformedVersion',
    'NotFound',
    'Operation',
    'Parameter',
    'ResolvedRequest',
    'RouteBinding',
    'RouteTable',
    'SunsetExpired',
    'SunsetPolicy',
    'UnsupportedVersion',
    'VersionSet',
    'VersionaryError',
    'VersioningOptions',
    'annotate',
    'deprecation_headers',
    'project',
    'resolve',
    'resolve_request',
]
