# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
import io

import testtools
import yaml

from versionary import Parameter, RouteTable, project
from versionary import openapi
from versionary.tests._fixtures import SUNSET, V1, V3, make_options


class ToDictTests(testtools.TestCase):

    def operation(self, **kwargs):
        kwargs.setdefault('tags', ['Stuff'])
        kwargs.setdefault('summary', None)
        kwargs.setdefault('description', 'List the stuff.')
        kwargs.setdefault('operation_id', 'stuff-get')
        kwargs.setdefault('deprecated', False)
        kwargs.setdefault('parameters', [])
        kwargs.setdefault('response_schema', None)
        return openapi.OasOperation(**kwargs)

    def test_info_is_converted_through_its_attributes(self):
        info = openapi.OasInfo(title='Stuff V1', version='1.0')
        self.assertEqual(
            {
                'description': '',
                'version': '1.0',
                'title': 'Stuff V1',
                'contact': {'name': '', 'email': 'example@example.example'},
            },
            openapi._to_dict(info))

    def test_operations_convert_themselves(self):
        operation = self.operation(
            deprecated=True,
            parameters=[
                Parameter('verbose', 'query'),
                Parameter('id', 'path', required=True),
            ])
        result = openapi._to_dict({'get': operation})['get']
        self.assertTrue(result['deprecated'])
        self.assertEqual(
            ['id', 'verbose'], [p['name'] for p in result['parameters']])
        self.assertEqual({'200': {'description': 'OK'}}, result['responses'])

    def test_current_operations_omit_deprecated(self):
        result = openapi._to_dict(self.operation())
        self.assertNotIn('deprecated', result)

    def test_paths_become_plain_dicts(self):
        root = openapi.OasRoot31()
        root.paths['/v1/stuff']['get'] = self.operation()
        result = openapi._to_dict(root)
        self.assertIs(dict, type(result['paths']))
        self.assertEqual(['get'], list(result['paths']['/v1/stuff']))
        # safe_dump refuses defaultdicts
        yaml.safe_dump(result)

    def test_lists_are_copied(self):
        tags = [{'name': 'Stuff'}]
        result = openapi._to_dict(tags)
        self.assertEqual(tags, result)
        self.assertIsNot(tags, result)


class TidyStringTests(testtools.TestCase):

    def test_docstring_becomes_one_line(self):
        self.assertEqual(
            'List the stuff. Deprecated stuff is listed last.',
            openapi.tidy_string(
                'List the stuff.\n    Deprecated stuff is listed last.\n'))

    def test_missing_description(self):
        self.assertEqual('None', openapi.tidy_string(None))


class ParameterExtractionTests(testtools.TestCase):
    def test_blank(self):
        url, parameters = openapi.extract_path_parameters("")
        assert url == "/"
        assert parameters == {}

    def test_no_parameters(self):
        url, parameters = openapi.extract_path_parameters("/stuff")
        assert url == "/stuff"
        assert parameters == {}

    def test_simple_parameter(self):
        url, parameters = openapi.extract_path_parameters("/stuff/<name>")
        assert url == "/stuff/{name}"
        assert parameters == {"name": {"type": "string"}}

    def test_typed_parameters(self):
        url, parameters = openapi.extract_path_parameters(
            "/v<version>/stuff/<int:id>/<float:x>/<uuid:u>"
        )
        assert url == "/v{version}/stuff/{id}/{x}/{u}"
        assert parameters == {
            "version": {"type": "string"},
            "id": {"type": "integer"},
            "x": {"type": "number"},
            "u": {"type": "string", "format": "uuid"},
        }

    def test_converter_arguments(self):
        url, parameters = openapi.extract_path_parameters(
            "/<string(length=2):code>"
        )
        assert url == "/{code}"
        assert parameters == {"code": {"type": "string"}}

    def test_unknown_converter_is_a_string(self):
        url, parameters = openapi.extract_path_parameters("/<custom:thing>")
        assert url == "/{thing}"
        assert parameters == {"thing": {"type": "string"}}

    def test_ignore_bad_parameter(self):
        url, parameters = openapi.extract_path_parameters("/<a:b:c>")
        assert url == "/<a:b:c>"
        assert parameters == {}


def stuff():
    """All the
    stuff."""
    return []


class DumpTests(testtools.TestCase):

    def setUp(self):
        super().setUp()
        table = RouteTable(make_options(
            title='Stuff', sunset_policies={V1: SUNSET}))
        table.register(
            '/v<version>/stuff', 'GET', V1, stuff, deprecated=True,
            tags=['Stuff'])
        table.register(
            '/v<version>/stuff', 'GET', V3, stuff, tags=['Stuff'],
            summary='List stuff',
            response_schema={'type': 'array', 'items': {'type': 'object'}})
        table.register(
            '/v<version>/stuff/<int:id>', 'GET', V3, stuff,
            parameters={'id': 'The id'})
        table.register('/v<version>/stuff', 'POST', V3, stuff)
        self.documents = project(table)

    def test_deprecated_document(self):
        oas = yaml.safe_load(openapi.dump(self.documents[V1]))
        self.assertEqual('3.1.0', oas['openapi'])
        self.assertEqual('1.0', oas['info']['version'])
        self.assertEqual('Stuff V1', oas['info']['title'])
        self.assertIn('deprecated', oas['info']['description'])
        self.assertEqual(['/v1/stuff'], list(oas['paths']))
        operation = oas['paths']['/v1/stuff']['get']
        self.assertTrue(operation['deprecated'])
        self.assertEqual('All the stuff.', operation['description'])
        self.assertEqual('stuff-get', operation['operationId'])
        self.assertEqual([{'name': 'Stuff'}], oas['tags'])

    def test_current_document(self):
        oas = yaml.safe_load(openapi.dump(self.documents[V3]))
        self.assertEqual(
            ['/v3/stuff', '/v3/stuff/{id}'], sorted(oas['paths']))
        self.assertEqual(['get', 'post'], sorted(oas['paths']['/v3/stuff']))

        listing = oas['paths']['/v3/stuff']['get']
        self.assertNotIn('deprecated', listing)
        self.assertEqual('List stuff', listing['summary'])
        self.assertEqual(
            {'application/json': {
                'schema': {'type': 'array', 'items': {'type': 'object'}}}},
            listing['responses']['200']['content'])

        one = oas['paths']['/v3/stuff/{id}']['get']
        self.assertEqual(
            [{
                'name': 'id',
                'in': 'path',
                'required': True,
                'description': 'The id',
                'schema': {'type': 'integer'},
            }],
            one['parameters'])
        self.assertEqual(
            {'200': {'description': 'OK'}}, one['responses'])

    def test_dump_to_stream(self):
        stream = io.StringIO()
        openapi.dump(self.documents[V3], stream)
        self.assertEqual('3.0', yaml.safe_load(stream.getvalue())['info']['version'])

    def test_roots_do_not_share_state(self):
        first = openapi.OasRoot31()
        first.info.title = 'first'
        first.paths['/a']['get'] = None
        second = openapi.OasRoot31()
        self.assertEqual('', second.info.title)
        self.assertEqual({}, second.paths)
