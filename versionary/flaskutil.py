# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""versionary - serve a versioned route table from a Flask app."""
from datetime import datetime, timezone
import logging

from flask import jsonify, make_response, request

from versionary import _validation, openapi
from versionary._deprecation import deprecation_headers, version_headers
from versionary._routes import RouteTable
from versionary._version import resolve_request
from versionary.errors import InvalidBinding, SunsetExpired, VersionaryError
from versionary.projection import project
from versionary.readers import url_segment_names
from versionary.util import get_callsite_location


logger = logging.getLogger('versionary')


def utcnow():
    return datetime.now(timezone.utc)


class VersionedApi:
    """User facing API for serving versioned routes with Flask.

    Declare routes with the `route` decorator (or the method shortcuts),
    then `bind` to a flask app. The route table is frozen on bind; to
    change it later build a new table and `publish` it.
    """

    def __init__(self, name, options, table=None, clock=utcnow):
        """Create an instance of VersionedApi.

        :param name: The API name, used as the flask endpoint prefix and as
            the default tag for operations.
        :param options: A VersioningOptions instance.
        :param table: An existing RouteTable, a new one is made by default.
        :param clock: Returns the current aware datetime.
        """
        if not isinstance(name, str):
            raise TypeError(
                'name must be a string, not %s' % type(name).__name__)
        self.name = name
        self.options = options
        self.table = table if table is not None else RouteTable(options)
        self.clock = clock
        self._bound = set()
        self._apps = []

    def route(
            self,
            template,
            methods=('GET',),
            versions=(),
            deprecated_versions=(),
            sunset_at=None,
            **metadata):
        """Register the decorated handler at each of the given versions.

        Handlers listed in `deprecated_versions` are still served, but are
        marked deprecated in responses and documentation. `sunset_at` only
        applies to the deprecated versions.

        Other keyword arguments are documentation metadata, passed on to
        RouteTable.register.
        """
        if not versions and not deprecated_versions:
            raise InvalidBinding(
                'Route {} must be registered at one version at least'.format(
                    template))
        location = metadata.pop('location', None) or get_callsite_location()
        metadata.setdefault('tags', (self.name,))

        def decorator(fn):
            handler = fn
            if metadata.get('response_schema'):
                handler = _validation.wrap_response(
                    fn, metadata['response_schema'])
            for method in methods:
                for version in deprecated_versions:
                    self.table.register(
                        template, method, version, handler,
                        deprecated=True, sunset_at=sunset_at,
                        location=location, **metadata)
                for version in versions:
                    self.table.register(
                        template, method, version, handler,
                        location=location, **metadata)
            return fn

        return decorator

    def get(self, template, **kwargs):
        return self.route(
            template, methods=('GET',), location=get_callsite_location(),
            **kwargs)

    def post(self, template, **kwargs):
        return self.route(
            template, methods=('POST',), location=get_callsite_location(),
            **kwargs)

    def put(self, template, **kwargs):
        return self.route(
            template, methods=('PUT',), location=get_callsite_location(),
            **kwargs)

    def delete(self, template, **kwargs):
        return self.route(
            template, methods=('DELETE',), location=get_callsite_location(),
            **kwargs)

    def bind(self, flask_app):
        """Bind the versioned routes and docs endpoints to a flask app."""
        self.table.freeze()
        for template, method in self.table.routes():
            self._bind_route(flask_app, template, method)
        if self.options.docs_prefix is not None:
            prefix = self.options.docs_prefix.rstrip('/')
            flask_app.add_url_rule(
                prefix + '/', '{}.docs_index'.format(self.name),
                view_func=self.docs_index)
            flask_app.add_url_rule(
                prefix + '/<group>/swagger.yaml',
                '{}.docs'.format(self.name),
                view_func=self.docs)
        self._apps.append(flask_app)

    def _bind_route(self, flask_app, template, method):
        endpoint = '{}.{} {}'.format(self.name, method, template)

        def view(**kwargs):
            return self.dispatch(template, method, kwargs)

        view.__name__ = endpoint
        flask_app.add_url_rule(
            template, endpoint, view_func=view, methods=[method])
        self._bound.add((template, method))

    def publish(self, table):
        """Atomically replace the live route table.

        Requests already running keep the table they started with.
        """
        unbound = set(table.routes()) - self._bound
        if self._apps and unbound:
            raise InvalidBinding(
                'Cannot publish routes that are not bound to the app: {}'
                .format(', '.join(
                    '{} {}'.format(m, t) for t, m in sorted(unbound))))
        table.freeze()
        self.table = table
        logger.info(
            'Published route table for %s with versions %s',
            self.name, ', '.join(str(v) for v in table.versions))

    def dispatch(self, template, method, view_args):
        # one read, the table may be swapped under us
        table = self.table
        options = table.options
        token = options.version_reader.read(request)
        for name in url_segment_names(options.version_reader):
            view_args.pop(name, None)

        try:
            resolved = resolve_request(
                table, template, method, token, now=self.clock())
            info = resolved.deprecation
            if info.expired:
                if options.reject_expired:
                    raise SunsetExpired(resolved.binding, info)
                logger.warning(
                    'Serving %s %s at version %s past its sunset %s',
                    method, template, resolved.version,
                    info.sunset.isoformat())
        except VersionaryError as e:
            return self._error_response(table, template, method, e)

        logger.debug(
            'Dispatching %s %s to version %s', method, template,
            resolved.version)
        response = make_response(resolved.binding.handler(**view_args))
        for name, value in deprecation_headers(info):
            response.headers[name] = value
        self._report_versions(response, table, template, method)
        return response

    def _report_versions(self, response, table, template, method):
        if not table.options.report_api_versions:
            return
        headers = version_headers(
            table.supported_versions(template, method),
            table.deprecated_versions(template, method),
        )
        for name, value in headers:
            response.headers[name] = value

    def _error_response(self, table, template, method, error):
        body = {'error': error.code, 'message': str(error)}
        supported = getattr(error, 'supported', None)
        if supported is not None:
            body['supported_versions'] = [str(v) for v in supported]
        logger.debug('Rejected %s %s: %s', method, template, error)
        response = make_response(jsonify(body), error.status)
        self._report_versions(response, table, template, method)
        return response

    def documents(self):
        return project(self.table)

    def docs_index(self):
        urls = []
        prefix = self.options.docs_prefix.rstrip('/')
        for version in self.table.versions:
            urls.append({
                'name': version.group_name.upper(),
                'url': '{}/{}/swagger.yaml'.format(prefix, version.group_name),
                'deprecated': all(
                    b.deprecated for b in self.table.bindings_at(version)),
            })
        return jsonify(urls)

    def docs(self, group):
        for version, document in self.documents().items():
            if version.group_name == group:
                response = make_response(openapi.dump(document))
                response.mimetype = 'application/yaml'
                return response
        body = {
            'error': 'NotFound',
            'message': 'No API documentation for {}'.format(group),
        }
        return make_response(jsonify(body), 404)
