from __future__ import annotations

import colorsys

from linechat.constants import COLOR_LIGHTNESS, COLOR_SATURATION


def string_hash(text: str) -> int:
    """Polynomial (x31) string hash folded into a signed 32-bit integer."""
    h = 0
    for ch in text:
        h = (31 * h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def hue_for(identity: str) -> int:
    return abs(string_hash(identity)) % 360


def hsl_to_hex(hue: int, saturation: float, lightness: float) -> str:
    red, green, blue = colorsys.hls_to_rgb(hue / 360.0, lightness, saturation)
    return "#{:02x}{:02x}{:02x}".format(
        round(red * 255), round(green * 255), round(blue * 255)
    )


class ColorAssigner:
    """Stable per-identity display colours, memoized for the session."""

    def __init__(
        self,
        saturation: float = COLOR_SATURATION,
        lightness: float = COLOR_LIGHTNESS,
    ):
        self.saturation = saturation
        self.lightness = lightness
        self._memo: dict[str, str] = {}

    def color_for(self, identity: str) -> str:
        color = self._memo.get(identity)
        if color is None:
            color = hsl_to_hex(hue_for(identity), self.saturation, self.lightness)
            self._memo[identity] = color
        return color

    def __len__(self) -> int:
        return len(self._memo)
