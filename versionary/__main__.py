# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
import argparse
from collections import OrderedDict
from importlib import import_module
import json
import logging
import os
import runpy
import sys

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
)
import yaml

from versionary import lint, openapi
from versionary._routes import RouteTable
from versionary._version import ApiVersion
from versionary.projection import project, serialize


def tojson_filter(json_object, indent=4):
    return json.dumps(json_object, indent=indent)


TEMPLATES = Environment(
    loader=ChoiceLoader([
        FileSystemLoader('./'),
        PackageLoader('versionary', 'templates'),
    ]),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)
TEMPLATES.filters['tojson'] = tojson_filter


class ForceAction(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        if not namespace.update:
            if namespace.metadata:
                namespace.metadata.close()  # suppresses resource warning
            parser.error('--force can only be used with --update')
        else:
            namespace.force = True


def main():
    cli_args = parse_args()
    if cli_args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    sys.exit(cli_args.func(cli_args))


def parse_args(raw_args=None, parser_cls=None, stdin=None, stdout=None):
    if parser_cls is None:
        parser_cls = argparse.ArgumentParser
    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout

    parser = parser_cls(
        description='Tool for working with versioned API route tables',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        default=False,
        help='Log debug output',
    )
    subparser = parser.add_subparsers(dest='cmd')
    subparser.required = True

    target_help = (
        'module or .py file holding the API, with an optional :attribute '
        '(defaults to "api")'
    )

    versions_parser = subparser.add_parser(
        'versions', help='List the API versions of a route table')
    versions_parser.add_argument('target', help=target_help)
    versions_parser.set_defaults(func=versions_cmd)

    metadata_parser = subparser.add_parser(
        'metadata', help='Import project and print extracted metadata in JSON')
    metadata_parser.add_argument('target', help=target_help)
    metadata_parser.add_argument(
        '--output',
        nargs='?',
        type=argparse.FileType('w'),
        default=stdout,
        help='metadata output file path, uses stdout if omitted'
    )
    metadata_parser.set_defaults(func=metadata_cmd)

    openapi_parser = subparser.add_parser(
        'openapi', help='Print OpenAPI documents for each API version')
    openapi_parser.add_argument('target', help=target_help)
    openapi_parser.add_argument(
        '--version',
        dest='api_version',
        type=ApiVersion.parse,
        default=None,
        help='Only output this API version',
    )
    openapi_parser.add_argument(
        '--output',
        nargs='?',
        type=argparse.FileType('w'),
        default=stdout,
        help='output file path, uses stdout if omitted'
    )
    openapi_parser.add_argument(
        '--dir', '-d',
        default=None,
        help='write every version to <dir>/<group>/swagger.yaml',
    )
    openapi_parser.set_defaults(func=openapi_cmd)

    render_parser = subparser.add_parser(
        'render', help='Render markdown documentation for each API version'
    )
    render_parser.add_argument('target', help=target_help)
    render_parser.add_argument(
        '--name', '-n', required=True, help='Name of service')
    render_parser.add_argument(
        '--dir', '-d', default='docs', help='output directory')
    render_parser.add_argument(
        '--page-template',
        type=TEMPLATES.get_template,
        default=TEMPLATES.get_template('version_page.md.j2'),
        help='Jinja2 template to render each API version',
    )
    render_parser.add_argument(
        '--index-template',
        type=TEMPLATES.get_template,
        default=TEMPLATES.get_template('index.md.j2'),
        help='Jinja2 template to render the API index page',
    )
    render_parser.add_argument(
        '--extension', '-e',
        default='md',
        help='File extension for rendered documentation',
    )
    render_parser.set_defaults(func=render_cmd)

    lint_parser = subparser.add_parser(
        'lint', help='Compare current metadata against file metadata')
    lint_parser.add_argument(
        'metadata',
        type=argparse.FileType('r'),
    )
    lint_parser.add_argument('target', help=target_help)
    lint_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        default=False,
        help='Do not emit warnings',
    )
    lint_parser.add_argument(
        '--strict', '--pedantic',
        action='store_true',
        default=False,
        help='Even warnings count as failure',
    )
    lint_parser.add_argument(
        '--update',
        action='store_true',
        default=False,
        help='Update metadata file to new metadata if lint passes',
    )
    lint_parser.add_argument(
        '--force',
        action=ForceAction,
        nargs=0,
        default=False,
        help='Update metadata even if linting fails',
    )
    lint_parser.set_defaults(func=lint_cmd)

    return parser.parse_args(raw_args)


def add_working_dir_to_python_path():
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)


def load_namespace(path):
    """If path exists and ends in .py it is run, otherwise it is imported."""
    if os.path.exists(path) and path.endswith('.py'):
        try:
            return runpy.run_path(path)
        except Exception as e:
            raise RuntimeError('Could not run {!r}: {}'.format(path, e)) from e
    try:
        return vars(import_module(path))
    except ImportError as e:
        raise RuntimeError(
            '{!r} did not look like a filepath and could not be '
            'loaded as a module: {}'.format(path, e)
        ) from e


def load_table(target):
    """Return the route table named by a `module[:attribute]` target."""
    path, _, attr = target.partition(':')
    attr = attr or 'api'
    add_working_dir_to_python_path()
    namespace = load_namespace(path)
    try:
        obj = namespace[attr]
    except KeyError:
        raise RuntimeError('{!r} has no attribute {!r}'.format(path, attr))

    if isinstance(obj, RouteTable):
        return obj
    table = getattr(obj, 'table', None)
    if isinstance(table, RouteTable):
        return table
    raise RuntimeError(
        '{} is not a VersionedApi or RouteTable'.format(target))


def versions_cmd(cli_args, stream=sys.stdout):
    table = load_table(cli_args.target)
    for version, document in project(table).items():
        flags = []
        if document.deprecated:
            flags.append('deprecated')
        if document.sunset is not None:
            flags.append('sunset {}'.format(document.sunset.isoformat()))
        line = '{} ({})'.format(version, version.group_name)
        if flags:
            line += ': ' + ', '.join(flags)
        stream.write(line + '\n')
    return 0


def metadata_cmd(cli_args):
    current, _ = serialize(load_table(cli_args.target))
    cli_args.output.write(json.dumps(current, indent=2))


def openapi_cmd(cli_args):
    documents = project(load_table(cli_args.target))

    if cli_args.dir is not None:
        for document in documents.values():
            group_dir = os.path.join(cli_args.dir, document.group_name)
            os.makedirs(group_dir, exist_ok=True)
            path = os.path.join(group_dir, 'swagger.yaml')
            with open(path, 'w', encoding='utf8') as f:
                openapi.dump(document, f)
        return 0

    if cli_args.api_version is None:
        selected = list(documents.values())
    elif cli_args.api_version in documents:
        selected = [documents[cli_args.api_version]]
    else:
        raise RuntimeError('Unknown API version {}, known versions: {}'.format(
            cli_args.api_version, ', '.join(str(v) for v in documents)))

    cli_args.output.write('---\n'.join(openapi.dump(d) for d in selected))
    return 0


def load_metadata(stream):
    """Load JSON metadata from opened stream."""
    try:
        metadata = json.load(
            stream, object_pairs_hook=OrderedDict)
    except json.JSONDecodeError as e:
        err = RuntimeError('Error parsing {}: {}'.format(stream.name, e))
        raise err from e
    finally:
        stream.close()

    return metadata


def render_cmd(cli_args):
    root_dir = cli_args.dir
    en_dir = os.path.join(root_dir, 'en')
    if not os.path.exists(en_dir):
        os.makedirs(en_dir)
    documents = project(load_table(cli_args.target))

    for path, content in render_markdown(documents, cli_args):
        full_path = os.path.join(root_dir, path)
        with open(full_path, 'w', encoding='utf8') as f:
            f.write(content)


def render_markdown(documents, cli_args):
    navigation = [{
        'title': 'Index',
        'location': 'index.' + cli_args.extension,
    }]
    latest = None

    for version, document in documents.items():
        latest = version
        # deprecated operations go last
        operations = sorted(document.operations, key=lambda op: op.deprecated)
        page_file = '{}.{}'.format(document.group_name, cli_args.extension)
        navigation.append({
            'title': document.group_name.upper(),
            'location': page_file,
        })

        path = os.path.join('en', page_file)
        yield path, cli_args.page_template.render(
            document=document,
            operations=operations,
            version=str(version),
        )

    yield (
        os.path.join('en', 'index.' + cli_args.extension),
        cli_args.index_template.render(
            version=latest,
            service_name=cli_args.name,
            documents=list(documents.values()),
            extension=cli_args.extension,
        )
    )

    # documentation-builder requires yaml metadata files in certain locations
    yield os.path.join('en', 'metadata.yaml'), yaml.safe_dump(
        {'navigation': navigation},
        default_flow_style=False,
        encoding=None,
    )
    site_meta = {
        'site_title': '{} Documentation: version {}'.format(
            cli_args.name,
            latest,
        )
    }
    yield 'metadata.yaml', yaml.safe_dump(
        site_meta,
        default_flow_style=False,
        encoding=None,
    )


def lint_cmd(cli_args, stream=sys.stdout):
    metadata = load_metadata(cli_args.metadata)
    current, locations = serialize(load_table(cli_args.target))

    has_errors = False
    display_level = lint.WARNING
    error_level = lint.DOCUMENTATION

    if cli_args.strict:
        display_level = lint.WARNING
        error_level = lint.WARNING
    elif cli_args.quiet:
        display_level = lint.DOCUMENTATION

    for message in lint.metadata_lint(metadata, current, locations):
        if message.level >= display_level:
            stream.write('{}\n'.format(message))

        if message.level >= error_level:
            has_errors = True

    if cli_args.update:
        if not has_errors or cli_args.force:
            with open(cli_args.metadata.name, 'w') as f:
                json.dump(current, f, indent=2)

    return 1 if has_errors else 0


if __name__ == '__main__':
    main()
