# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""The route table: which handler serves a path and method at a version."""
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

from versionary import _validation
from versionary._deprecation import as_utc
from versionary._version import ApiVersion
from versionary.errors import DuplicateBinding, InvalidBinding, NotFound
from versionary.util import (
    clean_docstring,
    get_callsite_location,
    sort_schema,
)


logger = logging.getLogger('versionary')


@dataclass(frozen=True)
class RouteBinding:
    """A handler bound to a path template and method at one version.

    Documentation metadata is declared here at registration time, nothing
    is discovered from the handler later on. The schemas are left out of
    the hash, and projection only ever hands out copies of them.
    """

    template: str
    method: str
    version: ApiVersion
    handler: Callable
    deprecated: bool = False
    sunset_at: Optional[datetime] = None
    sunset_link: Optional[str] = None
    name: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: Mapping = field(
        default_factory=lambda: MappingProxyType({}), hash=False)
    params_schema: Any = field(default=None, hash=False)
    response_schema: Any = field(default=None, hash=False)
    tags: Tuple = ()
    location: Any = field(default=None, compare=False, repr=False)

    @property
    def key(self):
        return (self.template, self.method, self.version)


class VersionSet(tuple):
    """Every registered version, ascending and without duplicates."""

    def __new__(cls, versions=()):
        return super().__new__(cls, sorted(set(versions)))

    @property
    def latest(self):
        return self[-1] if self else None

    def __repr__(self):
        return 'VersionSet([{}])'.format(', '.join(str(v) for v in self))


class RouteTable:
    """Maps (template, method, version) to a RouteBinding.

    Tables are filled in during startup, then frozen and shared between
    requests without locking. To change a live table, build a new one
    (see `copy()`) and swap it in whole.
    """

    def __init__(self, options):
        self.options = options
        self._bindings = OrderedDict()
        self._routes = OrderedDict()
        self._frozen = False
        self._versions = None

    def register(
            self,
            template,
            method,
            version,
            handler,
            deprecated=False,
            sunset_at=None,
            name=None,
            summary=None,
            description=None,
            parameters=None,
            params_schema=None,
            response_schema=None,
            tags=(),
            location=None):
        if self._frozen:
            raise InvalidBinding(
                'Cannot register {} {}: route table is frozen'.format(
                    method, template))
        if not isinstance(template, str) or not template.startswith('/'):
            raise InvalidBinding(
                'Route template must start with /, got {!r}'.format(template))
        if not isinstance(method, str) or not method.isalpha():
            raise InvalidBinding('Invalid HTTP method {!r}'.format(method))
        method = method.upper()
        version = ApiVersion.parse(version)

        key = (template, method, version)
        if key in self._bindings:
            raise DuplicateBinding(template, method, version)

        sunset_link = None
        if sunset_at is not None:
            if not deprecated:
                raise InvalidBinding(
                    '{} {} at version {} has a sunset date but is not '
                    'deprecated'.format(method, template, version))
            sunset_at = as_utc(sunset_at)
        elif deprecated and version in self.options.sunset_policies:
            policy = self.options.sunset_policies[version]
            sunset_at = policy.effective
            sunset_link = policy.link

        for schema in (params_schema, response_schema):
            if schema is not None:
                _validation.validate_schema(schema)

        if description is None and getattr(handler, '__doc__', None):
            description = clean_docstring(handler.__doc__)
        if location is None:
            location = get_callsite_location()

        binding = RouteBinding(
            template=template,
            method=method,
            version=version,
            handler=handler,
            deprecated=bool(deprecated),
            sunset_at=sunset_at,
            sunset_link=sunset_link,
            name=name or getattr(handler, '__name__', None),
            summary=summary,
            description=description,
            parameters=MappingProxyType(dict(parameters or {})),
            params_schema=sort_schema(params_schema),
            response_schema=sort_schema(response_schema),
            tags=tuple(tags),
            location=location,
        )
        self._add(binding)
        logger.debug(
            'Registered %s %s at version %s%s', method, template, version,
            ' (deprecated)' if binding.deprecated else '')
        return binding

    def _add(self, binding):
        self._bindings[binding.key] = binding
        route = (binding.template, binding.method)
        self._routes.setdefault(route, {})[binding.version] = binding

    def lookup(self, template, method, version):
        version = ApiVersion.parse(version)
        try:
            return self._bindings[(template, method.upper(), version)]
        except KeyError:
            raise NotFound(template, method.upper(), version) from None

    def list_versions(self, template, method):
        return sorted(self._routes.get((template, method.upper()), ()))

    def supported_versions(self, template, method):
        versions = self._routes.get((template, method.upper()), {})
        return sorted(v for v, b in versions.items() if not b.deprecated)

    def deprecated_versions(self, template, method):
        versions = self._routes.get((template, method.upper()), {})
        return sorted(v for v, b in versions.items() if b.deprecated)

    @property
    def versions(self):
        if self._versions is not None:
            return self._versions
        versions = VersionSet(version for _, _, version in self._bindings)
        if self._frozen:
            self._versions = versions
        return versions

    def routes(self):
        return list(self._routes)

    def bindings_at(self, version):
        return [b for b in self if b.version == version]

    def freeze(self):
        if not self._frozen:
            self._frozen = True
            self._versions = VersionSet(v for _, _, v in self._bindings)
        return self

    @property
    def frozen(self):
        return self._frozen

    def copy(self, options=None):
        table = RouteTable(self.options if options is None else options)
        for binding in self:
            table._add(binding)
        return table

    def __iter__(self):
        return iter(list(self._bindings.values()))

    def __len__(self):
        return len(self._bindings)

    def __contains__(self, key):
        return key in self._bindings
