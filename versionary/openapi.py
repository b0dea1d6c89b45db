# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
"""
Helpers to translate projected documents to OpenAPI specifications (OAS).
"""
import json
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Tuple

import yaml


# flask url converters to openapi types
CONVERTER_TYPES = {
    "default": {"type": "string"},
    "string": {"type": "string"},
    "path": {"type": "string"},
    "any": {"type": "string"},
    "int": {"type": "integer"},
    "float": {"type": "number"},
    "uuid": {"type": "string", "format": "uuid"},
}


@dataclass
class OasOperation:
    tags: list
    summary: str
    description: str
    operation_id: str
    deprecated: bool
    parameters: list
    response_schema: Any

    def _parameters_to_openapi(self):
        # path parameters first, then the rest, each sorted by name
        ordered = sorted(
            self.parameters, key=lambda p: (p.location != "path", p.name))
        for parameter in ordered:
            result = {
                "name": parameter.name,
                "in": parameter.location,
                "required": parameter.required,
                "schema": json.loads(json.dumps(parameter.schema)),
            }
            if parameter.description:
                result["description"] = parameter.description
            yield result

    def _to_dict(self):
        result = {
            "tags": self.tags,
            "description": tidy_string(self.description) or "None.",
            "operationId": self.operation_id,
            "parameters": list(self._parameters_to_openapi()),
        }

        if self.summary:
            result["summary"] = self.summary

        if self.deprecated:
            result["deprecated"] = True

        result["responses"] = {"200": {"description": self.summary or "OK"}}
        if self.response_schema:
            result["responses"]["200"]["content"] = {
                "application/json": {
                    "schema": json.loads(json.dumps(self.response_schema))
                }
            }

        return result


@dataclass
class OasInfo:
    description: str = ""
    version: str = ""
    title: str = ""
    contact: dict = field(
        default_factory=lambda: {"name": "", "email": "example@example.example"}
    )


@dataclass
class OasRoot31:
    openapi: str = "3.1.0"
    info: OasInfo = field(default_factory=OasInfo)
    tags: list = field(default_factory=lambda: [])
    servers: list = field(default_factory=lambda: [{"url": "http://localhost"}])
    paths: dict = field(default_factory=lambda: defaultdict(dict))

    def _to_dict(self):
        return {
            "openapi": self.openapi,
            "info": _to_dict(self.info),
            "servers": _to_dict(self.servers),
            "tags": _to_dict(self.tags),
            "paths": _to_dict(self.paths),
        }


def _to_dict(source: Any):
    if hasattr(source, "_to_dict"):
        return source._to_dict()  # noqa
    elif isinstance(source, dict):
        return {key: _to_dict(value) for key, value in source.items()}
    elif type(source) == list:
        return [_to_dict(value) for value in source]
    elif hasattr(source, "__dict__"):
        return {key: _to_dict(value) for key, value in source.__dict__.items()}
    else:
        return source


def tidy_string(untidy: Any):
    tidy = str(untidy).replace("\n", " ")
    while "  " in tidy:
        tidy = tidy.replace("  ", " ")
    return tidy.strip()


def extract_path_parameters(url: str) -> Tuple[str, dict]:
    """Convert a flask url rule to an openapi path.

    Returns the path and a mapping of parameter name to json schema.
    """
    if url is None or url == "":
        url = "/"

    # it translates as open-angle, zero-or-more-not-close-angle, close-angle
    raw_parameters = re.findall(r"<[^>]*>", url)

    parameters = {}
    for raw in raw_parameters:
        p = raw[1:-1]
        c = p.count(":")

        if c == 0:
            _converter, _param = "default", p
        elif c == 1:
            [_converter, _param] = p.split(":")
        # otherwise, skip badly formed parameters
        else:
            continue

        # converter arguments, as in <string(length=2):code>
        _converter = _converter.split("(", 1)[0]
        url = url.replace(raw, "{" + _param + "}")
        # skip duplicate parameter names
        if _param in parameters:
            continue
        parameters[_param] = dict(
            CONVERTER_TYPES.get(_converter, CONVERTER_TYPES["default"])
        )

    return url, parameters


def convert_operation(operation):
    return OasOperation(
        tags=list(operation.tags),
        summary=operation.summary,
        description=tidy_string(operation.description),
        operation_id=operation.operation_id,
        deprecated=operation.deprecated,
        parameters=operation.parameters,
        response_schema=operation.response_schema,
    )


def to_openapi(document):
    """Build the OpenAPI 3.1 structure for one projected document."""
    oas = OasRoot31()
    oas.info.title = document.title
    oas.info.description = document.description
    oas.info.version = str(document.version)
    tags = set()

    for operation in document.operations:
        oas_operation = convert_operation(operation)
        tags.update(oas_operation.tags)
        oas.paths[operation.path][operation.method.lower()] = oas_operation

    for tag in sorted(tags):
        oas.tags.append({"name": tag})

    return _to_dict(oas)


def dump(document, stream=None):
    return yaml.safe_dump(
        to_openapi(document), stream, default_flow_style=False, encoding=None
    )
