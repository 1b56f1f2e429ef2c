from __future__ import annotations

import re
from typing import NamedTuple
from typing import Sequence

import numpy as np
from skimage.color import rgb2lab

# limited number of "named" colors, anything else should be spelled in hex
NAMED_COLORS = {
    'white': '#ffffff',
    'black': '#000000',
    'red': '#ff0000',
    'green': '#008000',
    'blue': '#0000ff',
    'yellow': '#ffff00',
    'cyan': '#00ffff',
    'magenta': '#ff00ff',
    'gray': '#808080',
    'grey': '#808080',
}
HEX_RE = re.compile('#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})')


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def parse(cls, s: str) -> Color:
        if s.lower() in NAMED_COLORS:
            return cls.parse(NAMED_COLORS[s.lower()])
        elif not HEX_RE.fullmatch(s):
            raise ValueError(f'invalid color: {s!r}')

        s = s.lstrip('#')
        if len(s) == 3:
            s = f'{s[0] * 2}{s[1] * 2}{s[2] * 2}'
        return cls(r=int(s[0:2], 16), g=int(s[2:4], 16), b=int(s[4:6], 16))

    @property
    def hex(self) -> str:
        return f'#{self.r:02x}{self.g:02x}{self.b:02x}'

    def to_lab(self) -> tuple[float, float, float]:
        (l, a, b), = to_labs([self])  # noqa: E741
        return float(l), float(a), float(b)


def to_labs(colors: Sequence[Color]) -> np.ndarray:
    """sRGB (D65) -> CIE L*a*b*, one row per color"""
    rgb = np.array(colors, dtype=np.float64).reshape(1, -1, 3) / 255.0
    return rgb2lab(rgb).reshape(-1, 3)
