"""Color parsing and formatting for token values.

Supports the color syntaxes tokens commonly use:
- hex colors (#rgb, #rgba, #rrggbb, #rrggbbaa)
- `rgb()` / `rgba()` with comma or space separated channels
- `hsl()` / `hsla()`
- CSS named colors plus `transparent` and `currentcolor`

Channels are kept as 0-255 ints with a 0-1 float alpha.
"""

from __future__ import annotations

import math
import re
from typing import Final, Literal

from designlint.tokens.model import ColorSpace

type RGBA = tuple[int, int, int, float]
type ColorFormat = Literal["hex", "rgb", "rgba", "hsl", "hsla", "named"]

NAMED_COLORS: Final[dict[str, str]] = {
    "aliceblue": "#f0f8ff", "antiquewhite": "#faebd7", "aqua": "#00ffff",
    "aquamarine": "#7fffd4", "azure": "#f0ffff", "beige": "#f5f5dc",
    "bisque": "#ffe4c4", "black": "#000000", "blanchedalmond": "#ffebcd",
    "blue": "#0000ff", "blueviolet": "#8a2be2", "brown": "#a52a2a",
    "burlywood": "#deb887", "cadetblue": "#5f9ea0", "chartreuse": "#7fff00",
    "chocolate": "#d2691e", "coral": "#ff7f50", "cornflowerblue": "#6495ed",
    "cornsilk": "#fff8dc", "crimson": "#dc143c", "cyan": "#00ffff",
    "darkblue": "#00008b", "darkcyan": "#008b8b", "darkgoldenrod": "#b8860b",
    "darkgray": "#a9a9a9", "darkgreen": "#006400", "darkgrey": "#a9a9a9",
    "darkkhaki": "#bdb76b", "darkmagenta": "#8b008b", "darkolivegreen": "#556b2f",
    "darkorange": "#ff8c00", "darkorchid": "#9932cc", "darkred": "#8b0000",
    "darksalmon": "#e9967a", "darkseagreen": "#8fbc8f", "darkslateblue": "#483d8b",
    "darkslategray": "#2f4f4f", "darkslategrey": "#2f4f4f", "darkturquoise": "#00ced1",
    "darkviolet": "#9400d3", "deeppink": "#ff1493", "deepskyblue": "#00bfff",
    "dimgray": "#696969", "dimgrey": "#696969", "dodgerblue": "#1e90ff",
    "firebrick": "#b22222", "floralwhite": "#fffaf0", "forestgreen": "#228b22",
    "fuchsia": "#ff00ff", "gainsboro": "#dcdcdc", "ghostwhite": "#f8f8ff",
    "gold": "#ffd700", "goldenrod": "#daa520", "gray": "#808080",
    "green": "#008000", "greenyellow": "#adff2f", "grey": "#808080",
    "honeydew": "#f0fff0", "hotpink": "#ff69b4", "indianred": "#cd5c5c",
    "indigo": "#4b0082", "ivory": "#fffff0", "khaki": "#f0e68c",
    "lavender": "#e6e6fa", "lavenderblush": "#fff0f5", "lawngreen": "#7cfc00",
    "lemonchiffon": "#fffacd", "lightblue": "#add8e6", "lightcoral": "#f08080",
    "lightcyan": "#e0ffff", "lightgoldenrodyellow": "#fafad2", "lightgray": "#d3d3d3",
    "lightgreen": "#90ee90", "lightgrey": "#d3d3d3", "lightpink": "#ffb6c1",
    "lightsalmon": "#ffa07a", "lightseagreen": "#20b2aa", "lightskyblue": "#87cefa",
    "lightslategray": "#778899", "lightslategrey": "#778899", "lightsteelblue": "#b0c4de",
    "lightyellow": "#ffffe0", "lime": "#00ff00", "limegreen": "#32cd32",
    "linen": "#faf0e6", "magenta": "#ff00ff", "maroon": "#800000",
    "mediumaquamarine": "#66cdaa", "mediumblue": "#0000cd", "mediumorchid": "#ba55d3",
    "mediumpurple": "#9370db", "mediumseagreen": "#3cb371", "mediumslateblue": "#7b68ee",
    "mediumspringgreen": "#00fa9a", "mediumturquoise": "#48d1cc", "mediumvioletred": "#c71585",
    "midnightblue": "#191970", "mintcream": "#f5fffa", "mistyrose": "#ffe4e1",
    "moccasin": "#ffe4b5", "navajowhite": "#ffdead", "navy": "#000080",
    "oldlace": "#fdf5e6", "olive": "#808000", "olivedrab": "#6b8e23",
    "orange": "#ffa500", "orangered": "#ff4500", "orchid": "#da70d6",
    "palegoldenrod": "#eee8aa", "palegreen": "#98fb98", "paleturquoise": "#afeeee",
    "palevioletred": "#db7093", "papayawhip": "#ffefd5", "peachpuff": "#ffdab9",
    "peru": "#cd853f", "pink": "#ffc0cb", "plum": "#dda0dd",
    "powderblue": "#b0e0e6", "purple": "#800080", "rebeccapurple": "#663399",
    "red": "#ff0000", "rosybrown": "#bc8f8f", "royalblue": "#4169e1",
    "saddlebrown": "#8b4513", "salmon": "#fa8072", "sandybrown": "#f4a460",
    "seagreen": "#2e8b57", "seashell": "#fff5ee", "sienna": "#a0522d",
    "silver": "#c0c0c0", "skyblue": "#87ceeb", "slateblue": "#6a5acd",
    "slategray": "#708090", "slategrey": "#708090", "snow": "#fffafa",
    "springgreen": "#00ff7f", "steelblue": "#4682b4", "tan": "#d2b48c",
    "teal": "#008080", "thistle": "#d8bfd8", "tomato": "#ff6347",
    "turquoise": "#40e0d0", "violet": "#ee82ee", "wheat": "#f5deb3",
    "white": "#ffffff", "whitesmoke": "#f5f5f5", "yellow": "#ffff00",
    "yellowgreen": "#9acd32",
}  # fmt: skip

_HEX_RE: Final = re.compile(r"^#(?:[0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)
_FUNCTION_RE: Final = re.compile(r"^(rgba?|hsla?)\(\s*(.*?)\s*\)$", re.IGNORECASE | re.DOTALL)
_NUMBER_RE: Final = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?(%|deg)?$", re.IGNORECASE)


def parse_hex(color: str) -> RGBA:
    """Parse `#rgb`, `#rgba`, `#rrggbb` or `#rrggbbaa`. Raises ValueError."""
    if not _HEX_RE.match(color):
        raise ValueError(f"`{color}` is not a hex color")
    digits = color[1:]
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return r, g, b, a


def parse_color(value: str) -> RGBA | None:
    """Parse a color string into RGBA, or None when it is not a color.

    `currentcolor` is a valid color but has no channels; callers check
    `is_color` for validity.
    """
    text = value.strip().lower()
    if text == "transparent":
        return 0, 0, 0, 0.0
    if text in NAMED_COLORS:
        return parse_hex(NAMED_COLORS[text])
    if text.startswith("#"):
        return parse_hex(text) if _HEX_RE.match(text) else None
    match = _FUNCTION_RE.match(text)
    if match is None:
        return None
    function = match.group(1)
    channels = _split_channels(match.group(2))
    if channels is None or len(channels) not in (3, 4):
        return None
    if function.startswith("rgb"):
        return _rgb_channels(channels)
    return _hsl_channels(channels)


def is_color(value: object) -> bool:
    if not isinstance(value, str):
        return False
    if value.strip().lower() == "currentcolor":
        return True
    return parse_color(value) is not None


def detect_color_format(value: str) -> ColorFormat | None:
    text = value.strip().lower()
    if text.startswith("#"):
        return "hex"
    for prefix in ("rgba", "rgb", "hsla", "hsl"):
        if text.startswith(f"{prefix}("):
            return prefix  # type: ignore[return-value]
    if text in NAMED_COLORS:
        return "named"
    return None


def format_color(rgba: RGBA, space: ColorSpace) -> str:
    r, g, b, a = rgba
    match space:
        case "hex":
            return f"#{r:02x}{g:02x}{b:02x}"
        case "rgb":
            if a < 1:
                return f"rgba({r}, {g}, {b}, {_format_number(a)})"
            return f"rgb({r}, {g}, {b})"
        case "hsl":
            hue, saturation, lightness = _rgb_to_hsl(r, g, b)
            body = f"{_format_number(hue)}, {_format_number(saturation)}%, {_format_number(lightness)}%"
            if a < 1:
                return f"hsla({body}, {_format_number(a)})"
            return f"hsl({body})"
    raise ValueError(f"Unknown color space `{space}`; expected rgb/hsl/hex.")


def convert_color(value: str, space: ColorSpace) -> str:
    """Rewrite a color into `space`; keywords without channels are kept."""
    if value.strip().lower() == "currentcolor":
        return value
    rgba = parse_color(value)
    if rgba is None:
        raise ValueError(f"`{value}` is not a color")
    return format_color(rgba, space)


def _split_channels(body: str) -> list[str] | None:
    if "," in body:
        parts = [part.strip() for part in body.split(",")]
    else:
        main, _, alpha = body.partition("/")
        parts = main.split()
        if alpha:
            parts.append(alpha.strip())
    if any(not _NUMBER_RE.match(part) for part in parts):
        return None
    return parts


def _number(part: str) -> float:
    lowered = part.lower()
    if lowered.endswith("%"):
        return float(lowered[:-1])
    if lowered.endswith("deg"):
        return float(lowered[:-3])
    return float(lowered)


def _alpha(part: str) -> float | None:
    value = _number(part) / 100 if part.endswith("%") else _number(part)
    if not 0 <= value <= 1:
        return None
    return value


def _rgb_channels(channels: list[str]) -> RGBA | None:
    rgb: list[int] = []
    for part in channels[:3]:
        value = _number(part) * 2.55 if part.endswith("%") else _number(part)
        if not 0 <= value <= 255:
            return None
        rgb.append(round(value))
    alpha = _alpha(channels[3]) if len(channels) == 4 else 1.0
    if alpha is None:
        return None
    return rgb[0], rgb[1], rgb[2], alpha


def _hsl_channels(channels: list[str]) -> RGBA | None:
    hue = _number(channels[0]) % 360
    saturation = _number(channels[1])
    lightness = _number(channels[2])
    if not (0 <= saturation <= 100 and 0 <= lightness <= 100):
        return None
    alpha = _alpha(channels[3]) if len(channels) == 4 else 1.0
    if alpha is None:
        return None
    r, g, b = _hsl_to_rgb(hue, saturation / 100, lightness / 100)
    return r, g, b, alpha


def _hsl_to_rgb(h: float, s: float, light: float) -> tuple[int, int, int]:
    c = (1 - abs(2 * light - 1)) * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = light - c / 2
    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x
    return round((r + m) * 255), round((g + m) * 255), round((b + m) * 255)


def _rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    rf, gf, bf = r / 255, g / 255, b / 255
    high = max(rf, gf, bf)
    low = min(rf, gf, bf)
    lightness = (high + low) / 2
    delta = high - low
    if delta == 0:
        return 0.0, 0.0, round(lightness * 100, 2)
    saturation = delta / (1 - abs(2 * lightness - 1))
    if high == rf:
        hue = 60 * (((gf - bf) / delta) % 6)
    elif high == gf:
        hue = 60 * ((bf - rf) / delta + 2)
    else:
        hue = 60 * ((rf - gf) / delta + 4)
    return round(hue, 2), round(saturation * 100, 2), round(lightness * 100, 2)


def _format_number(value: float) -> str:
    if math.isclose(value, round(value)):
        return str(int(round(value)))
    return f"{value:.2f}".rstrip("0").rstrip(".")
