# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""Project a route table into one document per API version.

Documents are plain data: they say which operations exist at a version,
with their parameters and deprecation state, and leave the rendering to
openapi.py, the markdown templates or any other consumer.
"""
from collections import OrderedDict
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Any, List, Optional

from versionary._version import ApiVersion
from versionary.openapi import extract_path_parameters
from versionary.readers import (
    HeaderReader,
    QueryStringReader,
    iter_readers,
    url_segment_names,
)


logger = logging.getLogger('versionary')


@dataclass
class Parameter:
    name: str
    location: str
    required: bool = False
    description: Optional[str] = None
    schema: Any = field(default_factory=lambda: {"type": "string"})

    def serialize(self):
        return OrderedDict([
            ('name', self.name),
            ('in', self.location),
            ('required', self.required),
            ('description', self.description),
            ('schema', self.schema),
        ])


@dataclass
class Operation:
    template: str
    path: str
    method: str
    operation_id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: List[Parameter] = field(default_factory=list)
    deprecated: bool = False
    sunset: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    response_schema: Any = None

    @property
    def key(self):
        """Identifies the operation within a version, independent of path
        substitution."""
        return '{} {}'.format(self.method, self.template)


@dataclass
class Document:
    version: ApiVersion
    title: str
    description: str = ''
    deprecated: bool = False
    sunset: Optional[datetime] = None
    operations: List[Operation] = field(default_factory=list)

    @property
    def group_name(self):
        return self.version.group_name


def _version_parameters(options):
    """Parameters that carry the version outside of the url."""
    for reader in iter_readers(options.version_reader):
        if isinstance(reader, QueryStringReader):
            location = 'query'
        elif isinstance(reader, HeaderReader):
            location = 'header'
        else:
            continue
        yield Parameter(
            name=reader.name,
            location=location,
            required=False,
            description='The requested API version',
            schema={'type': 'string', 'default': str(options.default_version)},
        )


def project_binding(binding, options):
    path, path_parameters = extract_path_parameters(binding.template)
    segment_names = url_segment_names(options.version_reader)
    parameters = []
    for name, schema in path_parameters.items():
        if name in segment_names:
            if options.substitute_version_in_url:
                path = path.replace('{' + name + '}', binding.version.short)
                continue
            description = 'The requested API version'
        else:
            description = binding.parameters.get(name)
        parameters.append(Parameter(
            name=name,
            location='path',
            required=True,
            description=description,
            schema=schema,
        ))

    query_schema = binding.params_schema or {}
    required = query_schema.get('required', [])
    for name, schema in query_schema.get('properties', {}).items():
        parameters.append(Parameter(
            name=name,
            location='query',
            required=name in required,
            description=(
                binding.parameters.get(name) or schema.get('description')),
            schema=deepcopy(schema),
        ))
    parameters.extend(_version_parameters(options))

    return Operation(
        template=binding.template,
        path=path,
        method=binding.method,
        operation_id='{}-{}'.format(binding.name, binding.method.lower()),
        summary=binding.summary,
        description=binding.description,
        parameters=parameters,
        deprecated=binding.deprecated,
        sunset=binding.sunset_at,
        tags=list(binding.tags),
        response_schema=deepcopy(binding.response_schema),
    )


def describe(options, deprecated, sunset):
    text = options.description
    if deprecated:
        text += ' This API version has been deprecated.'
    if sunset is not None:
        text += ' The API will be sunset on {}.'.format(
            sunset.date().isoformat())
    return text.strip()


def project(table):
    """Return an OrderedDict of ApiVersion to Document, ascending.

    There is one document for every version in the table, including
    versions that only exist through deprecated bindings.
    """
    options = table.options
    documents = OrderedDict()
    if not len(table):
        logger.warning('Route table is empty, no documents to project.')

    for version in table.versions:
        operations = [
            project_binding(binding, options)
            for binding in table.bindings_at(version)
        ]
        deprecated = all(op.deprecated for op in operations)
        # a version with current operations has no sunset
        sunset = None
        policy = options.sunset_policies.get(version)
        sunsets = [op.sunset for op in operations if op.sunset]
        if deprecated and policy is not None:
            sunset = policy.effective
        elif deprecated and sunsets:
            sunset = min(sunsets)
        documents[version] = Document(
            version=version,
            title='{} {}'.format(options.title, version.group_name.upper()),
            description=describe(options, deprecated, sunset),
            deprecated=deprecated,
            sunset=sunset,
            operations=operations,
        )
    return documents


def _isoformat(when):
    return None if when is None else when.isoformat()


def serialize(table):
    """Serialize into JSONable dict, and associated locations data."""
    metadata = OrderedDict()
    # $ char makes this come first in sort ordering
    metadata['$versions'] = [str(v) for v in table.versions]
    locations = {}

    for version, document in project(table).items():
        operations = OrderedDict()
        metadata[str(version)] = OrderedDict([
            ('title', document.title),
            ('description', document.description),
            ('deprecated', document.deprecated),
            ('sunset', _isoformat(document.sunset)),
            ('operations', operations),
        ])
        version_locations = locations[str(version)] = {}
        for operation in document.operations:
            operations[operation.key] = OrderedDict([
                ('template', operation.template),
                ('path', operation.path),
                ('method', operation.method),
                ('operation_id', operation.operation_id),
                ('summary', operation.summary),
                ('description', operation.description),
                ('deprecated', operation.deprecated),
                ('sunset', _isoformat(operation.sunset)),
                ('tags', operation.tags),
                ('parameters', [p.serialize() for p in operation.parameters]),
                ('response_schema', operation.response_schema),
            ])
            binding = table.lookup(operation.template, operation.method, version)
            version_locations[operation.key] = binding.location

    return metadata, locations
