from __future__ import annotations

import copy
import mimetypes
import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Any, Dict, List, Tuple

import customtkinter as ctk

from event_planner.core.models.category import ServiceCategory
from event_planner.core.models.wizard import Attachment
from event_planner.core.services.catalog import CategoryCatalog, category_choices
from event_planner.core.wizard.engine import SUBMIT_ERROR_KEY, WizardEngine
from event_planner.ui.styles import icons, theme


def _label(key: str) -> str:
    return key.replace("_", " ").replace(".", " / ").capitalize()


def _leaves(value: dict, prefix: str) -> List[Tuple[str, Any]]:
    out: List[Tuple[str, Any]] = []
    for key, sub in value.items():
        path = f"{prefix}.{key}"
        if isinstance(sub, dict):
            out.extend(_leaves(sub, path))
        else:
            out.append((path, sub))
    return out


def _parse_like(raw: str, template: Any) -> Any:
    """Convert entry text to the type of the field's default; keep the text when it does not parse."""
    text = raw.strip()
    if isinstance(template, bool):
        return text.lower() in ("1", "true", "yes")
    if isinstance(template, int):
        try:
            return int(text)
        except ValueError:
            return text
    if isinstance(template, float):
        try:
            return float(text.replace(",", ""))
        except ValueError:
            return text
    if isinstance(template, list):
        return [part.strip() for part in text.split(",") if part.strip()]
    return raw


def _show(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


class WizardWindow(ctk.CTkToplevel):
    """
    Generic window over any `WizardEngine`.

    Editors are generated from each step's field list and the type of the
    field's default value; step buttons jump freely, Next is gated by the
    step validator.
    """

    def __init__(
        self,
        master: tk.Misc,
        engine: WizardEngine,
        title: str = "Wizard",
        categories: CategoryCatalog | None = None,
    ):
        super().__init__(master)
        self.title(title)
        self.geometry("760x620")
        self.transient(master)
        self._engine = engine
        self._categories = categories
        self._palette = theme.PALETTE
        self._icons = icons.build_icons(self._palette["text"])
        self._accent_icons = icons.build_icons("#ffffff")
        self._rendered_step: int | None = None
        self._error_vars: Dict[str, tk.StringVar] = {}
        self._attachment_vars: Dict[str, tk.StringVar] = {}

        steps = ctk.CTkFrame(self, fg_color="transparent")
        steps.pack(fill="x", padx=12, pady=(12, 4))
        self._step_buttons: List[ctk.CTkButton] = []
        for step in engine.steps:
            btn = ctk.CTkButton(steps, text=f"{step.number}. {step.title}", width=10, command=lambda n=step.number: engine.go_to(n))
            btn.pack(side="left", padx=(0, 4))
            self._step_buttons.append(btn)
        self._progress = ctk.CTkProgressBar(self)
        self._progress.pack(fill="x", padx=12, pady=(0, 6))

        self._description_var = tk.StringVar()
        ctk.CTkLabel(self, textvariable=self._description_var, text_color=self._palette["muted"]).pack(anchor="w", padx=12)

        self._body = ctk.CTkScrollableFrame(self)
        self._body.pack(fill="both", expand=True, padx=12, pady=6)

        self._submit_error_var = tk.StringVar()
        ctk.CTkLabel(self, textvariable=self._submit_error_var, text_color=self._palette["error"]).pack(anchor="w", padx=12)

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.pack(fill="x", padx=12, pady=(4, 12))
        self._prev_btn = ctk.CTkButton(
            buttons, text="Previous", command=engine.previous, image=self._icons["back"], compound="left"
        )
        self._prev_btn.pack(side="left")
        self._draft_btn = ctk.CTkButton(
            buttons, text="Save draft", command=self._save_draft, image=self._icons["save"], compound="left"
        )
        if engine.drafts is not None:
            self._draft_btn.pack(side="left", padx=(6, 0))
        self._next_btn = ctk.CTkButton(
            buttons,
            text="Next",
            command=engine.next,
            image=self._accent_icons["next"],
            compound="right",
            **theme.accent_button_kwargs(self._palette),
        )
        self._submit_btn = ctk.CTkButton(
            buttons,
            text="Submit",
            command=self._submit,
            image=self._accent_icons["send"],
            compound="right",
            **theme.accent_button_kwargs(self._palette),
        )

        engine.subscribe(self._refresh)
        if engine.load_draft():
            messagebox.showinfo(title, "Restored your saved draft.", parent=self)
        self._refresh()

    # -------- Rendering --------
    def _refresh(self) -> None:
        engine = self._engine
        if not self.winfo_exists():
            return
        if self._rendered_step != engine.current_step:
            self._build_step()
        for number, btn in enumerate(self._step_buttons, start=1):
            if number == engine.current_step:
                btn.configure(**theme.accent_button_kwargs(self._palette))
            else:
                btn.configure(fg_color=self._palette["panel"], text_color=self._palette["text"])
        self._progress.set(engine.progress)
        self._description_var.set(engine.step.description)

        for key, var in self._error_vars.items():
            var.set(engine.errors.get(key, ""))
        for key, var in self._attachment_vars.items():
            names = [a.name for a in engine.record.attachments.get(key, [])]
            var.set(", ".join(names) if names else "No files")
        self._submit_error_var.set(engine.errors.get(SUBMIT_ERROR_KEY, ""))

        self._prev_btn.configure(state="disabled" if engine.is_first else "normal")
        self._next_btn.pack_forget()
        self._submit_btn.pack_forget()
        if engine.is_last:
            state = "disabled" if engine.is_submitting or engine.sink is None else "normal"
            self._submit_btn.configure(state=state, text="Submitting..." if engine.is_submitting else "Submit")
            self._submit_btn.pack(side="right")
        else:
            self._next_btn.pack(side="right")

    def _build_step(self) -> None:
        for child in self._body.winfo_children():
            child.destroy()
        self._error_vars = {}
        self._attachment_vars = {}
        step = self._engine.step
        self._rendered_step = step.number
        if not step.fields:
            self._build_preview()
            return
        for key in step.fields:
            if key in self._engine.record.attachments:
                self._attachment_editor(key)
                continue
            value = self._engine.record.get(key)
            if key in step.category_fields and self._category_editor(key, step.category_fields[key]):
                self._error_label(key)
                continue
            if isinstance(value, dict):
                ctk.CTkLabel(self._body, text=_label(key), font=("Segoe UI", 11, "bold")).pack(anchor="w", pady=(8, 0))
                for path, leaf in _leaves(value, key):
                    self._scalar_editor(path, leaf, top=key)
            else:
                self._scalar_editor(key, value)
            self._error_label(key)

    def _scalar_editor(self, path: str, value: Any, top: str | None = None) -> None:
        row = ctk.CTkFrame(self._body, fg_color="transparent")
        row.pack(fill="x", pady=2)
        name = path.split(".", 1)[1] if top else path
        ctk.CTkLabel(row, text=_label(name), width=200, anchor="w").pack(side="left")
        if isinstance(value, bool):
            var = tk.BooleanVar(value=value)
            ctk.CTkCheckBox(row, text="", variable=var, command=lambda: self._write(path, var.get(), top)).pack(side="left")
            return
        var = tk.StringVar(value=_show(value))
        ctk.CTkEntry(row, textvariable=var).pack(side="left", fill="x", expand=True)
        var.trace_add("write", lambda *_: self._write(path, _parse_like(var.get(), value), top))

    def _category_editor(self, key: str, parent_key: str | None) -> bool:
        """Combo box over the category catalog; False when there is nothing to pick from."""
        if self._categories is None:
            return False
        if parent_key is None:
            options = category_choices(self._categories)
        else:
            parent_id = self._engine.record.get(parent_key)
            options = category_choices(self._categories, parent_id) if parent_id else []
        if not options:
            return False
        by_name: Dict[str, ServiceCategory] = {c.name: c for c in options}
        current = next((c.name for c in options if c.id == self._engine.record.get(key)), "")

        row = ctk.CTkFrame(self._body, fg_color="transparent")
        row.pack(fill="x", pady=2)
        ctk.CTkLabel(row, text=_label(key), width=200, anchor="w").pack(side="left")
        var = tk.StringVar(value=current)
        combo = ctk.CTkComboBox(
            row,
            values=list(by_name),
            variable=var,
            state="readonly",
            command=lambda name: self._pick_category(key, by_name[name].id),
        )
        combo.pack(side="left", fill="x", expand=True)
        theme.style_combo_box(combo, self._palette)
        return True

    def _error_label(self, key: str) -> None:
        var = tk.StringVar(value=self._engine.errors.get(key, ""))
        ctk.CTkLabel(self._body, textvariable=var, text_color=self._palette["error"]).pack(anchor="w")
        self._error_vars[key] = var

    def _attachment_editor(self, key: str) -> None:
        row = ctk.CTkFrame(self._body, fg_color="transparent")
        row.pack(fill="x", pady=4)
        ctk.CTkLabel(row, text=_label(key), width=200, anchor="w").pack(side="left")
        var = tk.StringVar()
        ctk.CTkLabel(row, textvariable=var, anchor="w").pack(side="left", fill="x", expand=True)
        ctk.CTkButton(row, text="Add files", width=90, command=lambda: self._pick_files(key)).pack(side="left", padx=(6, 0))
        ctk.CTkButton(row, text="Clear", width=60, command=lambda: self._engine.update_field(key, [])).pack(side="left", padx=(4, 0))
        self._attachment_vars[key] = var
        self._error_label(key)

    def _build_preview(self) -> None:
        record = self._engine.record
        for key, value in record.fields.items():
            if value in ("", [], {}, None):
                continue
            text = _show(value) if not isinstance(value, dict) else ", ".join(f"{p.split('.', 1)[1]}={v}" for p, v in _leaves(value, key))
            ctk.CTkLabel(self._body, text=f"{_label(key)}: {text}", anchor="w", justify="left", wraplength=660).pack(anchor="w")
        for key, items in record.attachments.items():
            ctk.CTkLabel(self._body, text=f"{_label(key)}: {len(items)} file(s)", anchor="w").pack(anchor="w")

    # -------- Actions --------
    def _write(self, path: str, value: Any, top: str | None) -> None:
        if top is None:
            self._engine.update_field(path, value)
            return
        data = copy.deepcopy(self._engine.record.get(top) or {})
        node = data
        parts = path.split(".")[1:]
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value
        self._engine.update_field(top, data)

    def _pick_category(self, key: str, category_id: str) -> None:
        dependents = [k for k, parent in self._engine.step.category_fields.items() if parent == key]
        self._engine.update_field(key, category_id)
        if dependents:
            # rebuild once the combo box callback has returned
            self.after_idle(self._build_step)

    def _pick_files(self, key: str) -> None:
        paths = filedialog.askopenfilenames(parent=self, title=f"Add {_label(key).lower()}")
        for path in paths:
            content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
            self._engine.add_attachment(key, Attachment.from_path(path, content_type))

    def _save_draft(self) -> None:
        if self._engine.save_draft():
            messagebox.showinfo("Draft", "Draft saved.", parent=self)

    def _submit(self) -> None:
        result = self._engine.submit()
        if result.success:
            messagebox.showinfo("Submitted", f"Saved successfully{f' (#{result.id})' if result.id else ''}.", parent=self)
            self.destroy()
