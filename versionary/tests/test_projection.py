# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
import json

import fixtures
import testtools

from versionary import Parameter, RouteTable, SunsetPolicy, project
from versionary.projection import serialize
from versionary.readers import HeaderReader, QueryStringReader
from versionary.tests._fixtures import SUNSET, V1, V2, V3, make_options


def stuff():
    """All the stuff."""


def one_stuff(id):
    """One piece of stuff."""


def build_table(**options):
    table = RouteTable(make_options(title='Stuff', **options))
    table.register('/v<version>/stuff', 'GET', V1, stuff, deprecated=True)
    table.register('/v<version>/stuff', 'GET', V2, stuff)
    table.register('/v<version>/stuff', 'GET', V3, stuff)
    table.register(
        '/v<version>/stuff/<int:id>', 'GET', V3, one_stuff,
        summary='Sometimes gets you stuff',
        parameters={'id': 'The id of the stuff you want'},
        params_schema={
            'type': 'object',
            'properties': {
                'verbose': {'type': 'boolean', 'description': 'More detail'},
                'fields': {'type': 'string'},
            },
            'required': ['fields'],
        },
    )
    return table


class ProjectTests(testtools.TestCase):

    def test_one_document_per_version(self):
        documents = project(build_table())
        self.assertEqual([V1, V2, V3], list(documents))
        self.assertEqual(
            [True], [op.deprecated for op in documents[V1].operations])
        self.assertEqual(
            [False], [op.deprecated for op in documents[V2].operations])
        self.assertEqual(2, len(documents[V3].operations))

    def test_deprecated_only_versions_are_projected(self):
        table = RouteTable(make_options())
        table.register('/old', 'GET', V1, stuff, deprecated=True)
        table.register('/new', 'GET', V2, stuff)
        documents = project(table)
        self.assertEqual([V1, V2], list(documents))
        self.assertTrue(documents[V1].deprecated)
        self.assertFalse(documents[V2].deprecated)

    def test_document_metadata(self):
        table = build_table(
            description='An API.',
            sunset_policies={V1: SunsetPolicy(SUNSET)},
        )
        documents = project(table)
        self.assertEqual('Stuff V1', documents[V1].title)
        self.assertEqual('v1', documents[V1].group_name)
        self.assertEqual(SUNSET, documents[V1].sunset)
        self.assertEqual(
            'An API. This API version has been deprecated. '
            'The API will be sunset on 2026-11-17.',
            documents[V1].description)
        self.assertEqual('An API.', documents[V3].description)

    def test_sunset_policy_ignored_while_version_is_current(self):
        table = RouteTable(make_options(
            description='An API.',
            sunset_policies={V2: SunsetPolicy(SUNSET)},
        ))
        table.register('/v<version>/stuff', 'GET', V2, stuff)
        document = project(table)[V2]
        self.assertFalse(document.deprecated)
        self.assertIsNone(document.sunset)
        self.assertEqual('An API.', document.description)

    def test_sunset_policy_ignored_for_partly_deprecated_version(self):
        table = RouteTable(make_options(
            sunset_policies={V2: SunsetPolicy(SUNSET)}))
        table.register('/old', 'GET', V2, stuff, deprecated=True)
        table.register('/new', 'GET', V2, stuff)
        document = project(table)[V2]
        self.assertFalse(document.deprecated)
        self.assertIsNone(document.sunset)
        # the deprecated operation keeps its own sunset
        self.assertEqual(
            [SUNSET, None], [op.sunset for op in document.operations])

    def test_schemas_are_copied_out_of_bindings(self):
        table = build_table()
        operation = project(table)[V3].operations[1]
        params = {p.name: p for p in operation.parameters}
        params['verbose'].schema['type'] = 'string'
        binding = table.lookup('/v<version>/stuff/<int:id>', 'GET', V3)
        self.assertEqual(
            'boolean', binding.params_schema['properties']['verbose']['type'])

    def test_version_is_substituted_in_paths(self):
        documents = project(build_table())
        self.assertEqual('/v1/stuff', documents[V1].operations[0].path)
        operation = documents[V3].operations[1]
        self.assertEqual('/v3/stuff/{id}', operation.path)
        self.assertNotIn('version', [p.name for p in operation.parameters])

    def test_version_stays_a_parameter_without_substitution(self):
        documents = project(build_table(substitute_version_in_url=False))
        operation = documents[V1].operations[0]
        self.assertEqual('/v{version}/stuff', operation.path)
        self.assertEqual(
            [Parameter(
                name='version',
                location='path',
                required=True,
                description='The requested API version',
                schema={'type': 'string'},
            )],
            operation.parameters)

    def test_operation_parameters(self):
        operation = project(build_table())[V3].operations[1]
        self.assertEqual('one_stuff-get', operation.operation_id)
        self.assertEqual('Sometimes gets you stuff', operation.summary)
        self.assertEqual('One piece of stuff.', operation.description)
        params = {(p.location, p.name): p for p in operation.parameters}
        self.assertEqual(
            [('path', 'id'), ('query', 'fields'), ('query', 'verbose')],
            sorted(params))
        self.assertEqual({'type': 'integer'}, params['path', 'id'].schema)
        self.assertEqual(
            'The id of the stuff you want', params['path', 'id'].description)
        self.assertTrue(params['query', 'fields'].required)
        self.assertFalse(params['query', 'verbose'].required)
        self.assertEqual('More detail', params['query', 'verbose'].description)

    def test_query_version_parameter(self):
        table = RouteTable(make_options(version_reader=QueryStringReader()))
        table.register('/stuff', 'GET', V3, stuff)
        [operation] = project(table)[V3].operations
        self.assertEqual('/stuff', operation.path)
        self.assertEqual(
            [Parameter(
                name='api-version',
                location='query',
                required=False,
                description='The requested API version',
                schema={'type': 'string', 'default': '3.0'},
            )],
            operation.parameters)

    def test_header_version_parameter(self):
        table = RouteTable(make_options(version_reader=HeaderReader('x-v')))
        table.register('/stuff', 'GET', V3, stuff)
        [operation] = project(table)[V3].operations
        [param] = operation.parameters
        self.assertEqual(('x-v', 'header'), (param.name, param.location))

    def test_empty_table(self):
        logger = self.useFixture(fixtures.FakeLogger('versionary'))
        self.assertEqual({}, project(RouteTable(make_options())))
        self.assertIn('Route table is empty', logger.output)


class SerializeTests(testtools.TestCase):

    def test_serialize(self):
        metadata, locations = serialize(build_table())
        self.assertEqual(['1.0', '2.0', '3.0'], metadata['$versions'])
        self.assertEqual(['$versions', '1.0', '2.0', '3.0'], list(metadata))

        operation = metadata['1.0']['operations']['GET /v<version>/stuff']
        self.assertTrue(operation['deprecated'])
        self.assertEqual('/v1/stuff', operation['path'])
        self.assertEqual('All the stuff.', operation['description'])
        self.assertTrue(metadata['1.0']['deprecated'])
        self.assertFalse(metadata['3.0']['deprecated'])

        self.assertEqual(
            ['GET /v<version>/stuff', 'GET /v<version>/stuff/<int:id>'],
            list(metadata['3.0']['operations']))
        location = locations['3.0']['GET /v<version>/stuff/<int:id>']
        self.assertTrue(location['filename'].endswith('test_projection.py'))

    def test_serialize_is_jsonable(self):
        table = build_table(sunset_policies={V1: SUNSET})
        metadata, _ = serialize(table)
        loaded = json.loads(json.dumps(metadata))
        self.assertEqual('2026-11-17T00:00:00+00:00', loaded['1.0']['sunset'])
        self.assertEqual(
            '2026-11-17T00:00:00+00:00',
            loaded['1.0']['operations']['GET /v<version>/stuff']['sunset'])
