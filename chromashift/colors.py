# colors.py

import re
from typing import Dict, Optional

from .ansi.style import Style

_NAMES = ['black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white']

def _build_codes() -> Dict[str, str]:
    codes = {
        'default': '',
        'none': '',
        'reset': '0',
        'clear': '0',
        'bold': '1',
        'italic': '3',
        'underline': '4',
        'reverse': '7',
        'inverse': '7',
        'no_bold': '22',
        'no_italic': '23',
        'no_underline': '24',
        'no_reverse': '27',
        'no_inverse': '27',
        'fg_default': '39',
        'bg_default': '49',
        'gray': '90',
        'grey': '90',
    }
    for i, name in enumerate(_NAMES):
        codes[name] = str(30 + i)
        codes[f'on_{name}'] = str(40 + i)
        codes[f'bright_{name}'] = str(90 + i)
        codes[f'on_bright_{name}'] = str(100 + i)
    return codes

COLOR_CODES = _build_codes()

_RAW = re.compile(r'^\d+(;\d+)*$')
_HEX = re.compile(r'^(on_)?#([0-9a-f]{6})$')

def get_color_code(name: str) -> Optional[str]:
    """
    Translate one color token into SGR parameters.

    Accepts names ("bold", "on_blue", "bright_red"), raw parameters
    ("38;5;208") and hex truecolor ("#ff8800", "on_#202020").
    Returns None for unknown tokens and for raw parameters that carry no
    supported attribute or color.
    """
    name = name.strip().lower()
    if name in COLOR_CODES:
        return COLOR_CODES[name]
    if _RAW.match(name):
        return None if Style.parse(name).is_empty else name
    hex_match = _HEX.match(name)
    if hex_match:
        value = hex_match.group(2)
        r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
        return f"{48 if hex_match.group(1) else 38};2;{r};{g};{b}"
    return None
