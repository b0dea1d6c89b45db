# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).
from datetime import datetime
from enum import IntEnum
import os


class LintTypes(IntEnum):
    WARNING = 0
    DOCUMENTATION = 1
    ERROR = 2


# shortcuts
WARNING = LintTypes.WARNING
DOCUMENTATION = LintTypes.DOCUMENTATION
ERROR = LintTypes.ERROR


class Message():
    """A linter message to the user."""
    level = None

    def __init__(self, name, msg, *args, **kwargs):
        self.name = name
        self.location = kwargs.pop('location', None)
        self.version = kwargs.pop('version', None)
        self.operation = kwargs.pop('operation', None)
        self.msg = msg.format(*args, **kwargs)

    def __str__(self):
        if self.operation is None:
            subject = 'Version {}'.format(self.version)
        else:
            subject = 'Version {} {}'.format(self.version, self.operation)
        output = '{}: {} at {}: {}'.format(
            self.level.name.title(),
            subject,
            self.name,
            self.msg,
        )

        if self.location is None:
            return output
        else:
            return '{}:{}: {}'.format(
                os.path.relpath(self.location['filename']),
                self.location['lineno'],
                output,
            )


class LintError(Message):
    level = ERROR


class LintWarning(Message):
    level = WARNING


class LintFixit(Message):
    level = DOCUMENTATION


def _parse_date(value):
    return None if value is None else datetime.fromisoformat(value)


def metadata_lint(old, new, locations):
    """Run the linter over the new metadata, comparing to the old."""
    # ensure we don't modify the metadata
    old = old.copy()
    new = new.copy()
    old.pop('$versions', None)
    new.pop('$versions', None)

    for version, old_document in old.items():
        if version in new:
            continue
        if old_document.get('deprecated'):
            yield LintWarning(
                'version', 'deprecated version removed', version=version)
        else:
            yield LintError(
                'version',
                'version removed without being deprecated first',
                version=version,
            )

    for version, document in new.items():
        old_document = old.get(version, {'operations': {}})
        version_locations = locations.get(version, {})
        for key, old_operation in old_document['operations'].items():
            if key not in document['operations']:
                msg_type = (
                    LintWarning if old_operation.get('deprecated')
                    else LintError)
                yield msg_type(
                    'operation', 'operation removed',
                    version=version, operation=key)

        for key, operation in document['operations'].items():
            old_operation = old_document['operations'].get(key, {})
            for message in lint_operation(old_operation, operation):
                message.version = version
                message.operation = key
                if message.location is None:
                    message.location = version_locations.get(key)
                yield message


def lint_operation(old, new):
    """Lint one operation of one version."""
    is_new = not old

    # operations must have documentation if they are new
    if not new.get('description'):
        msg_type = LintError if is_new else LintWarning
        yield msg_type('description', 'missing docstring documentation')

    if new.get('deprecated') and new.get('sunset') is None:
        yield LintWarning('sunset', 'deprecated without a sunset date')

    if is_new:
        return

    if old.get('deprecated') and not new.get('deprecated'):
        yield LintWarning('deprecated', 'deprecation reverted')

    old_sunset = _parse_date(old.get('sunset'))
    new_sunset = _parse_date(new.get('sunset'))
    if old_sunset is not None:
        if new_sunset is None:
            yield LintError('sunset', 'sunset date {} removed', old['sunset'])
        elif new_sunset < old_sunset:
            yield LintError(
                'sunset',
                'sunset brought forward from {} to {}',
                old['sunset'],
                new['sunset'],
            )

    old_params = {
        (p['in'], p['name']): p for p in old.get('parameters', [])
    }
    new_params = {
        (p['in'], p['name']): p for p in new.get('parameters', [])
    }
    for (location, name) in sorted(set(old_params) - set(new_params)):
        yield LintError(
            'parameters.' + name, '{} parameter {} removed', location, name)

    for (location, name), param in sorted(new_params.items()):
        old_param = old_params.get((location, name))
        if not param['required']:
            continue
        if old_param is None or not old_param['required']:
            yield LintError(
                'parameters.' + name,
                'cannot require new {} parameter {}',
                location,
                name,
            )
