from __future__ import annotations

import importlib.resources
from typing import Iterable

from nearcolor.color import Color
from nearcolor.color import to_labs
from nearcolor.color_kd import Point


def _label(color: Color, name: str) -> str:
    if name:
        return f'{color.hex} {name}'
    else:
        return color.hex


def parse(lines: Iterable[str]) -> list[Point]:
    """one color per line, optionally followed by a name:

        #ff0000 red
        #1e77d3

    blank lines and lines starting with `;` are ignored.
    """
    colors = []
    names = []
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith(';'):
            continue

        color_s, *rest = line.split(None, 1)
        name = rest[0] if rest else ''
        try:
            color = Color.parse(color_s)
        except ValueError as e:
            raise ValueError(f'line {lineno}: {e}') from None

        colors.append(color)
        names.append(name)

    if not colors:
        return []

    labs = to_labs(colors)
    return [
        Point(float(l), float(a), float(b), _label(color, name))
        for (l, a, b), color, name in zip(labs, colors, names)  # noqa: E741
    ]


def load(filename: str) -> list[Point]:
    with open(filename, encoding='UTF-8') as f:
        return parse(f)


def load_default() -> list[Point]:
    contents = importlib.resources.files('nearcolor.resources').joinpath(
        'colors.txt',
    ).read_text(encoding='UTF-8')
    return parse(contents.splitlines())
