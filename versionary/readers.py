# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""Extract the raw version token from a request.

Readers only find the token; parsing and validation happen in resolve().
Each reader takes a werkzeug/flask request and returns a string or None.
"""
import re


class UrlSegmentReader:
    """Read the version from a url variable, as in /v<version>/stuff."""

    def __init__(self, name='version'):
        self.name = name

    def read(self, request):
        view_args = request.view_args or {}
        return view_args.get(self.name)

    def __repr__(self):
        return 'UrlSegmentReader({!r})'.format(self.name)


class HeaderReader:

    def __init__(self, name='api-version'):
        self.name = name

    def read(self, request):
        return request.headers.get(self.name)

    def __repr__(self):
        return 'HeaderReader({!r})'.format(self.name)


class QueryStringReader:

    def __init__(self, name='api-version'):
        self.name = name

    def read(self, request):
        return request.args.get(self.name)

    def __repr__(self):
        return 'QueryStringReader({!r})'.format(self.name)


class MediaTypeReader:
    """Read the version from vendor media types in the Accept header.

    A client asking for 'application/vnd.<vendor>.1.2+json' wants 1.2.
    """

    def __init__(self, vendor):
        self.vendor = vendor
        self._pattern = re.compile(
            r'application/vnd\.%s\.([^+;,\s]+)' % re.escape(vendor))

    def read(self, request):
        return parse_accept_headers(
            self._pattern, request.accept_mimetypes.values())

    def __repr__(self):
        return 'MediaTypeReader({!r})'.format(self.vendor)


def parse_accept_headers(pattern, header_values):
    """Return the version token from the first matching Accept value."""
    for accept_value in header_values:
        m = pattern.match(accept_value)
        if m:
            return m.group(1)
    return None


class CombinedReader:
    """Try each reader in turn, first token found wins."""

    def __init__(self, *readers):
        self.readers = readers

    def read(self, request):
        for reader in self.readers:
            token = reader.read(request)
            if token is not None:
                return token
        return None

    def __repr__(self):
        return 'CombinedReader({})'.format(
            ', '.join(repr(r) for r in self.readers))


READERS = {
    'url': UrlSegmentReader,
    'header': HeaderReader,
    'query': QueryStringReader,
}


def iter_readers(reader):
    if isinstance(reader, CombinedReader):
        for r in reader.readers:
            yield from iter_readers(r)
    else:
        yield reader


def url_segment_names(reader):
    """Names of the url variables that carry the version."""
    return {
        r.name for r in iter_readers(reader)
        if isinstance(r, UrlSegmentReader)
    }
