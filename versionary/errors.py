# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""Errors raised while registering and resolving versioned routes.

Request time errors carry a `code` and an HTTP `status` so that a host
binding can turn them into distinct responses. Registration errors are
programming errors and should abort startup.
"""


class VersionaryError(Exception):
    code = 'VersionaryError'
    status = 500


class MalformedVersion(VersionaryError, ValueError):
    """The client sent a version token we cannot parse."""

    code = 'MalformedVersion'
    status = 400

    def __init__(self, token):
        self.token = token
        super().__init__(
            'Version {!r} must be in the format <major>.<minor>'.format(token))


class UnsupportedVersion(VersionaryError):
    """The client asked for a well formed version nobody registered."""

    code = 'UnsupportedVersion'
    status = 400

    def __init__(self, version, supported):
        self.version = version
        self.supported = sorted(supported)
        super().__init__(
            'API version {} is not supported, supported versions: {}'.format(
                version, ', '.join(str(v) for v in self.supported)))


class NotFound(VersionaryError):
    code = 'NotFound'
    status = 404

    def __init__(self, template, method, version):
        self.template = template
        self.method = method
        self.version = version
        super().__init__(
            'No route for {} {} at version {}'.format(
                method, template, version))


class DuplicateBinding(VersionaryError):
    code = 'DuplicateBinding'

    def __init__(self, template, method, version):
        self.template = template
        self.method = method
        self.version = version
        super().__init__(
            'Route {} {} is already registered at version {}'.format(
                method, template, version))


class InvalidBinding(VersionaryError):
    code = 'InvalidBinding'


class SunsetExpired(VersionaryError):
    """Only raised by hosts that refuse requests past a sunset date."""

    code = 'SunsetExpired'
    status = 410

    def __init__(self, binding, info):
        self.binding = binding
        self.info = info
        super().__init__(
            'API version {} of {} {} was sunset at {}'.format(
                binding.version, binding.method, binding.template,
                info.sunset.isoformat()))
