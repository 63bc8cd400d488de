import json
from importlib import resources

from .kb_layout import Key, KeyboardRow, Keyboard

DEFAULT_LAYOUT = 'default.json'
LAYOUT_PACKAGE = 'switch_scan.resources.layouts'


def keyboard_from_blueprint(blueprint: dict) -> Keyboard:
    """Build a :class:`Keyboard` from a parsed layout document."""
    row_objects = []
    for row in blueprint['rows']:
        key_objects = []
        for key in row['keys']:
            key_objects.append(
                Key(
                    key['label'],
                    key.get('action'),
                    key.get('payload'),
                )
            )
        row_objects.append(KeyboardRow(key_objects))

    return Keyboard(row_objects)


def load_keyboard(path: str | None = None) -> Keyboard:
    """Load a :class:`Keyboard` definition from ``path`` or package data."""
    if path:
        with open(path, 'r', encoding='utf-8') as file:
            blueprint = json.load(file)
    else:
        with resources.files(LAYOUT_PACKAGE).joinpath(DEFAULT_LAYOUT).open('r', encoding='utf-8') as file:
            blueprint = json.load(file)

    return keyboard_from_blueprint(blueprint)
