"""Stuff: a small service served at three API versions.

v1 is deprecated and sunset, v2 is current, and v3 changes the stuff
payload and adds a lookup by id. Run it with:

    FLASK_APP=examples/stuff_api.py flask run
"""
from datetime import datetime, timezone
import random

from flask import Flask, abort, current_app

from versionary import ApiVersion, SunsetPolicy, VersioningOptions
from versionary.flaskutil import VersionedApi


v1 = ApiVersion(1, 0)
v2 = ApiVersion(2, 0)
v3 = ApiVersion(3, 0)

options = VersioningOptions(
    default_version=v3,
    sunset_policies={
        v1: SunsetPolicy(
            datetime(2027, 1, 1, tzinfo=timezone.utc),
            link='https://example.com/stuff/sunset',
        ),
    },
    title='Stuff',
    description='An API that hands out stuff.',
)

api = VersionedApi('Stuff', options)

STUFF_SCHEMA = {
    'type': 'array',
    'items': {
        'type': 'object',
        'properties': {
            'id': {'type': 'integer'},
            'description': {'type': 'string'},
        },
        'required': ['description', 'id'],
    },
}


@api.get('/v<version>/stuff/deprecated', deprecated_versions=[v1])
def deprecated():
    """This endpoint is deprecated, and documented as such."""
    return {'message': 'This endpoint is deprecated'}


@api.get(
    '/v<version>/stuff',
    deprecated_versions=[v1],
    versions=[v2],
    response_schema=STUFF_SCHEMA,
)
def list_stuff():
    """List all the stuff."""
    return [
        {'id': 1, 'description': 'Description 1'},
        {'id': 2, 'description': 'Description 2'},
    ]


@api.get('/v<version>/stuff', versions=[v3], name='list_stuff_v3')
def list_stuff_v3():
    """List all the stuff, with something v3 specific."""
    return [
        {'id': 1, 'description': 'Description 1 for v3',
         'something_v3_specific': '1v3'},
        {'id': 2, 'description': 'Description 2 for v3',
         'something_v3_specific': '2v3'},
    ]


@api.get(
    '/v<version>/stuff/<int:id>',
    versions=[v3],
    summary='Sometimes gets you stuff, other times, not so lucky!',
    parameters={'id': 'The id of the stuff you want'},
)
def get_stuff(id):
    """Get one piece of stuff, if you are lucky."""
    if not current_app.config['STUFF_LUCKY']():
        abort(404)
    return {
        'id': id,
        'description': 'Description {}'.format(id),
        'something_v3_specific': str(id),
    }


def coin_flip():
    return random.random() < 0.5


def create_app(lucky=coin_flip):
    """Create the app; `lucky` decides whether get_stuff finds anything."""
    app = Flask(__name__)
    app.config['STUFF_LUCKY'] = lucky
    api.bind(app)
    return app
