# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
import os
import runpy

import testtools
import yaml


EXAMPLE = os.path.join(
    os.path.dirname(__file__), '..', '..', 'examples', 'stuff_api.py')


class StuffExampleTests(testtools.TestCase):

    def make_client(self, lucky=True):
        namespace = runpy.run_path(EXAMPLE, run_name='stuff_api')
        app = namespace['create_app'](lucky=lambda: lucky)
        app.config['TESTING'] = True
        return app.test_client()

    def test_deprecated_version(self):
        resp = self.make_client().get('/v1/stuff')
        self.assertEqual(200, resp.status_code)
        self.assertEqual(2, len(resp.get_json()))
        self.assertEqual('true', resp.headers['Deprecation'])
        self.assertEqual('Fri, 01 Jan 2027 00:00:00 GMT', resp.headers['Sunset'])
        self.assertEqual(
            '<https://example.com/stuff/sunset>; rel="sunset"',
            resp.headers['Link'])
        self.assertEqual('2.0, 3.0', resp.headers['api-supported-versions'])
        self.assertEqual('1.0', resp.headers['api-deprecated-versions'])

    def test_current_version(self):
        resp = self.make_client().get('/v2/stuff')
        self.assertEqual(200, resp.status_code)
        self.assertNotIn('Deprecation', resp.headers)
        self.assertNotIn(
            'something_v3_specific', resp.get_json()[0])

    def test_v3_payload(self):
        resp = self.make_client().get('/v3/stuff')
        self.assertEqual('1v3', resp.get_json()[0]['something_v3_specific'])

    def test_deprecated_only_route(self):
        client = self.make_client()
        self.assertEqual(200, client.get('/v1/stuff/deprecated').status_code)
        resp = client.get('/v2/stuff/deprecated')
        self.assertEqual(404, resp.status_code)
        self.assertEqual('NotFound', resp.get_json()['error'])

    def test_lucky_lookup(self):
        resp = self.make_client(lucky=True).get('/v3/stuff/7')
        self.assertEqual(200, resp.status_code)
        self.assertEqual(7, resp.get_json()['id'])

    def test_unlucky_lookup(self):
        resp = self.make_client(lucky=False).get('/v3/stuff/7')
        self.assertEqual(404, resp.status_code)

    def test_unsupported_version(self):
        resp = self.make_client().get('/v4/stuff')
        self.assertEqual(400, resp.status_code)
        self.assertEqual(
            ['1.0', '2.0', '3.0'], resp.get_json()['supported_versions'])

    def test_docs(self):
        client = self.make_client()
        index = client.get('/swagger/').get_json()
        self.assertEqual(
            [
                {'name': 'V1', 'url': '/swagger/v1/swagger.yaml',
                 'deprecated': True},
                {'name': 'V2', 'url': '/swagger/v2/swagger.yaml',
                 'deprecated': False},
                {'name': 'V3', 'url': '/swagger/v3/swagger.yaml',
                 'deprecated': False},
            ],
            index)
        document = yaml.safe_load(client.get('/swagger/v1/swagger.yaml').data)
        self.assertIn('/v1/stuff/deprecated', document['paths'])
        self.assertIn('deprecated', document['info']['description'])
