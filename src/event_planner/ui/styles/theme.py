import tkinter as tk
from tkinter import ttk
from typing import Dict

import customtkinter as ctk

THEMES: Dict[str, dict] = {
    "light": {
        "bg": "#fbf8f4",
        "surface": "#ffffff",
        "panel": "#f4efe8",
        "muted": "#6b5e52",
        "text": "#2b1d12",
        "accent": "#e0573a",
        "accent_dim": "#c2452b",
        "border": "#e4d9cc",
        "highlight": "#fbe7df",
        "error": "#c0262d",
    },
    "dusk": {
        "bg": "#14111a",
        "surface": "#1d1826",
        "panel": "#261f31",
        "muted": "#a99fb8",
        "text": "#f4f0fa",
        "accent": "#f0a04b",
        "accent_dim": "#d88a36",
        "border": "#352c44",
        "highlight": "#2e2540",
        "error": "#ff6b6b",
    },
}

ACTIVE_THEME = "dusk"
PALETTE = THEMES[ACTIVE_THEME]


def apply_theme(root: tk.Misc, name: str = "dusk") -> dict:
    global ACTIVE_THEME, PALETTE
    if name not in THEMES:
        name = "dusk"
    ACTIVE_THEME = name
    PALETTE = THEMES[name]

    appearance = "Light" if name == "light" else "Dark"
    ctk.set_appearance_mode(appearance)
    ctk.set_default_color_theme("blue" if appearance == "Light" else "dark-blue")
    root.configure(fg_color=PALETTE["bg"])  # type: ignore[arg-type]

    style = ttk.Style(root)
    style.theme_use("clam")

    base_font = ("Segoe UI", 10)
    style.configure("TFrame", background=PALETTE["bg"])
    style.configure("TLabel", background=PALETTE["bg"], foreground=PALETTE["text"], font=base_font)
    style.configure(
        "Treeview",
        background=PALETTE["panel"],
        fieldbackground=PALETTE["panel"],
        foreground=PALETTE["text"],
        bordercolor=PALETTE["border"],
        rowheight=28,
        font=base_font,
    )
    selected_fg = "#ffffff" if name == "light" else PALETTE["text"]
    style.map(
        "Treeview",
        background=[("selected", PALETTE["accent_dim"])],
        foreground=[("selected", selected_fg)],
    )
    style.configure(
        "Treeview.Heading",
        background=PALETTE["surface"],
        foreground=PALETTE["text"],
        bordercolor=PALETTE["border"],
        relief="flat",
        font=("Segoe UI", 10, "bold"),
    )
    style.map("Treeview.Heading", background=[("active", PALETTE["highlight"])])
    style.configure("TSeparator", background=PALETTE["border"])
    return PALETTE


def accent_button_kwargs(palette: dict) -> dict:
    return {
        "fg_color": palette["accent"],
        "hover_color": palette["accent_dim"],
        "text_color": "#ffffff",
    }


def style_combo_box(combo: ctk.CTkComboBox, palette: dict) -> None:
    """
    Apply palette to CustomTkinter combo boxes for readable light theme.
    """
    combo.configure(
        fg_color=palette["surface"],
        border_color=palette["border"],
        button_color=palette["accent"],
        button_hover_color=palette["accent_dim"],
        text_color=palette["text"],
        dropdown_fg_color=palette["surface"],
        dropdown_text_color=palette["text"],
        dropdown_hover_color=palette["highlight"],
        corner_radius=10,
        border_width=1,
    )
