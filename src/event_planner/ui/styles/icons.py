from __future__ import annotations

from typing import Dict

import customtkinter as ctk
from PIL import Image


_ICON_PATTERNS: dict[str, list[str]] = {
    "add": [
        "................",
        "................",
        ".......XX.......",
        ".......XX.......",
        ".......XX.......",
        ".......XX.......",
        ".......XX.......",
        "..XXXXXXXXXXXX..",
        "..XXXXXXXXXXXX..",
        ".......XX.......",
        ".......XX.......",
        ".......XX.......",
        ".......XX.......",
        ".......XX.......",
        "................",
        "................",
    ],
    "remove": [
        "................",
        "................",
        "..XX........XX..",
        "...XX......XX...",
        "....XX....XX....",
        ".....XX..XX.....",
        "......XXXX......",
        ".......XX.......",
        "......XXXX......",
        ".....XX..XX.....",
        "....XX....XX....",
        "...XX......XX...",
        "..XX........XX..",
        "................",
        "................",
        "................",
    ],
    "retry": [
        "................",
        "......XXXX..X...",
        "....XX....XXX...",
        "...XX......XX...",
        "..XX.....XXXX...",
        "..XX............",
        "..XX............",
        "..XX............",
        "..XX........XX..",
        "...XX......XX...",
        "....XX....XX....",
        "......XXXX......",
        "................",
        "................",
        "................",
        "................",
    ],
    "next": [
        "................",
        "................",
        ".....XX.........",
        "......XX........",
        ".......XX.......",
        "........XX......",
        ".........XX.....",
        "..........XX....",
        ".........XX.....",
        "........XX......",
        ".......XX.......",
        "......XX........",
        ".....XX.........",
        "................",
        "................",
        "................",
    ],
    "back": [
        "................",
        "................",
        ".........XX.....",
        "........XX......",
        ".......XX.......",
        "......XX........",
        ".....XX.........",
        "....XX..........",
        ".....XX.........",
        "......XX........",
        ".......XX.......",
        "........XX......",
        ".........XX.....",
        "................",
        "................",
        "................",
    ],
    "save": [
        "................",
        "..XXXXXXXXXX....",
        "..X...XX...XX...",
        "..X...XX....XX..",
        "..X...XX.....X..",
        "..X..........X..",
        "..X..........X..",
        "..X..XXXXXX..X..",
        "..X..X....X..X..",
        "..X..X....X..X..",
        "..X..X....X..X..",
        "..XXXXXXXXXXXX..",
        "................",
        "................",
        "................",
        "................",
    ],
    "send": [
        "................",
        "................",
        ".X..............",
        ".XXX............",
        ".X..XXX.........",
        ".X.....XXX......",
        ".X........XXX...",
        ".XXXXXXXXXXXXXX.",
        ".X........XXX...",
        ".X.....XXX......",
        ".X..XXX.........",
        ".XXX............",
        ".X..............",
        "................",
        "................",
        "................",
    ],
}


def _hex_to_rgba(color: str) -> tuple[int, int, int, int]:
    value = color.lstrip("#")
    if len(value) != 6:
        return (0, 0, 0, 255)
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), 255)


def _build_image(pattern: list[str], color: str) -> Image.Image:
    height = len(pattern)
    width = max(len(row) for row in pattern)
    img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    pix = img.load()
    rgba = _hex_to_rgba(color)
    for y, row in enumerate(pattern):
        for x, ch in enumerate(row):
            if ch != ".":
                pix[x, y] = rgba
    return img


def build_icons(color: str, size: tuple[int, int] = (16, 16)) -> Dict[str, ctk.CTkImage]:
    """Pixel-pattern button icons tinted with one palette color."""
    icons = {}
    for name, pattern in _ICON_PATTERNS.items():
        image = _build_image(pattern, color)
        icons[name] = ctk.CTkImage(light_image=image, dark_image=image, size=size)
    return icons
