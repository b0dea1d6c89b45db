# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
import functools

import jsonschema


class DataValidationError(Exception):
    """Raised when a handler response fails validation."""

    def __init__(self, error_list):
        self.error_list = error_list

    def __repr__(self):
        return "DataValidationError: %s" % ", ".join(self.error_list)

    def __str__(self):
        return repr(self)


def wrap_response(fn, schema):
    """Validate what a flask view returns against `schema`.

    The view should return a list or dict, optionally as the first item
    of a (body, status, headers) tuple. Validation can be switched off
    with the VERSIONARY_VALIDATE_OUTPUT flask config key.
    """
    from flask import current_app, jsonify

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        result = fn(*args, **kwargs)
        if isinstance(result, tuple):
            resp = result[0]
        else:
            resp = result
        if not isinstance(resp, (list, dict)):
            raise ValueError(
                "Unknown response type '%s'. Supported types are list "
                "and dict." % type(resp))

        if current_app.config.get('VERSIONARY_VALIDATE_OUTPUT', True):
            error_list = validate(resp, schema)
            if error_list:
                raise DataValidationError(error_list)

        if isinstance(result, tuple):
            return (jsonify(resp), ) + result[1:]
        else:
            return jsonify(result)
    return wrapper


def validate(payload, schema):
    """Validate `payload` against `schema`, returning an error list.

    jsonschema provides lots of information in it's errors, but it can be a bit
    of work to extract all the information.
    """
    v = jsonschema.Draft4Validator(
        schema, format_checker=jsonschema.FormatChecker())
    error_list = []
    for error in v.iter_errors(payload):
        message = error.message
        location = '/' + '/'.join([str(c) for c in error.absolute_path])
        error_list.append(message + ' at ' + location)
    return error_list


def validate_schema(schema):
    """Validate that 'schema' is correct.

    This validates against the jsonschema v4 draft.

    :raises jsonschema.SchemaError: if the schema is invalid.
    """
    jsonschema.Draft4Validator.check_schema(schema)
