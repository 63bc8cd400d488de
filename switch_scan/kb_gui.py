import tkinter as tk
from typing import Callable, Optional

from .kb_layout import Keyboard
from .text_buffer import TextBuffer

PALETTES = {
    "normal": {
        "bg": "#1e1e1e", "fg": "white", "key": "#3a3a3a",
        "group": "#2f6fb3", "item": "yellow", "item_fg": "black",
    },
    "high_contrast": {
        "bg": "white", "fg": "black", "key": "#e0e0e0",
        "group": "#ffb000", "item": "black", "item_fg": "white",
    },
}

SPEED_MIN_MS = 100
SPEED_MAX_MS = 3000


class VirtualKeyboard:
    """Render a Keyboard as rows of labels and show scan highlights on them."""

    def __init__(
        self,
        keyboard: Keyboard,
        buffer: TextBuffer,
        *,
        speed_ms: int = 1000,
        high_contrast: bool = False,
        on_speed: Optional[Callable[[int], None]] = None,
        on_speak: Optional[Callable[[], None]] = None,
        root: Optional[tk.Misc] = None,
    ) -> None:
        self.keyboard = keyboard
        self.buffer = buffer
        self.on_speed = on_speed
        self.on_speak = on_speak
        self.high_contrast = high_contrast

        self.row_frames: list[tk.Frame] = []
        self.key_widgets: list[list[tk.Label]] = []
        self._group_on: set[int] = set()
        self._item_on: set[tuple[int, int]] = set()

        self.root = root or tk.Tk()
        self.root.title("Switch Scanning Keyboard")

        self.text = tk.Text(self.root, height=4, width=48, wrap=tk.WORD, state=tk.DISABLED)
        self.text.pack(fill=tk.X, padx=5, pady=5)
        self.buffer.subscribe(self._show_text)

        self.feedback = tk.Label(self.root, text="", anchor=tk.W)
        self.feedback.pack(fill=tk.X, padx=5)

        self.page_frame = tk.Frame(self.root)
        self.page_frame.pack(padx=5, pady=5)
        self.render_keys()

        controls = tk.Frame(self.root)
        controls.pack(fill=tk.X, padx=5, pady=5)
        self.speed_var = tk.IntVar(master=self.root, value=speed_ms)
        self._speed = speed_ms
        self.speed_label = tk.Label(controls, text=f"{speed_ms}ms", width=7)
        self.speed_scale = tk.Scale(
            controls,
            variable=self.speed_var,
            from_=SPEED_MIN_MS,
            to=SPEED_MAX_MS,
            resolution=1,
            orient=tk.HORIZONTAL,
            showvalue=False,
            label="Scan speed",
            command=self._speed_moved,
        )
        self.speed_scale.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.speed_label.pack(side=tk.LEFT)
        tk.Button(controls, text="Contrast", command=self.toggle_theme).pack(side=tk.LEFT, padx=5)
        tk.Button(controls, text="Speak", command=self._speak).pack(side=tk.LEFT)

        self._apply_theme()

    # ───────── highlight surface ──────────────────────────────────────────
    def highlight_group(self, group: int, on: bool) -> None:
        if on:
            self._group_on.add(group)
        else:
            self._group_on.discard(group)
        self._paint_row(group)

    def highlight_item(self, group: int, item: int, on: bool) -> None:
        if on:
            self._item_on.add((group, item))
        else:
            self._item_on.discard((group, item))
        self._paint_row(group)

    def clear(self) -> None:
        self._group_on.clear()
        self._item_on.clear()
        for r_idx in range(len(self.row_frames)):
            self._paint_row(r_idx)

    # ───────── public control API ──────────────────────────────────────────
    def show_feedback(self, text: str) -> None:
        self.feedback.config(text=text)

    def toggle_theme(self) -> None:
        self.high_contrast = not self.high_contrast
        self._apply_theme()

    def bind_switch(self, keysym: str, on_switch: Callable[[], None]) -> None:
        """Make ``keysym`` (e.g. ``"space"``) act as the switch."""

        def _handler(_event) -> str:
            on_switch()
            return "break"

        self.root.bind_all(f"<KeyPress-{keysym}>", _handler)

    def render_keys(self) -> None:
        for child in self.page_frame.winfo_children():
            child.destroy()
        self.row_frames.clear()
        self.key_widgets.clear()

        max_len = max(len(r) for r in self.keyboard)
        base_width = 5
        for row in self.keyboard:
            row_frame = tk.Frame(self.page_frame, bd=3)
            row_frame.pack(fill=tk.X)
            width = int(base_width * max_len / len(row))
            labels = []
            for key in row:
                lbl = tk.Label(row_frame, text=key.label, width=width, relief=tk.RAISED, bd=2, padx=2, pady=2)
                lbl.pack(side=tk.LEFT, expand=True)
                labels.append(lbl)
            self.row_frames.append(row_frame)
            self.key_widgets.append(labels)

    # ───────── internal helpers ───────────────────────────────────────────
    @property
    def palette(self) -> dict:
        return PALETTES["high_contrast" if self.high_contrast else "normal"]

    def _paint_row(self, r_idx: int) -> None:
        pal = self.palette
        row_bg = pal["group"] if r_idx in self._group_on else pal["bg"]
        self.row_frames[r_idx].config(bg=row_bg)
        for k_idx, lbl in enumerate(self.key_widgets[r_idx]):
            if (r_idx, k_idx) in self._item_on:
                lbl.config(bg=pal["item"], fg=pal["item_fg"])
            elif r_idx in self._group_on:
                lbl.config(bg=pal["group"], fg=pal["fg"])
            else:
                lbl.config(bg=pal["key"], fg=pal["fg"])

    def _apply_theme(self) -> None:
        pal = self.palette
        for widget in (self.root, self.page_frame, self.feedback):
            widget.config(bg=pal["bg"])
        self.feedback.config(fg=pal["fg"])
        for r_idx in range(len(self.row_frames)):
            self._paint_row(r_idx)

    def _show_text(self, text: str) -> None:
        self.text.config(state=tk.NORMAL)
        self.text.delete("1.0", tk.END)
        self.text.insert(tk.END, text)
        self.text.config(state=tk.DISABLED)
        self.text.see(tk.END)

    def _speed_moved(self, value: str) -> None:
        speed = int(float(value))
        if speed == self._speed:
            return
        self._speed = speed
        self.speed_label.config(text=f"{speed}ms")
        if self.on_speed is not None:
            self.on_speed(speed)

    def _speak(self) -> None:
        if self.on_speak is not None:
            self.on_speak()

    # ---------- main loop ----------
    def run(self):
        self.root.mainloop()
