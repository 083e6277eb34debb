import calendar
import os
import sys
import tkinter as tk
from datetime import date, datetime, timedelta
from pathlib import Path
from tkinter import filedialog, scrolledtext, ttk

from . import config
from .calendar_export import IcsCalendarSync
from .errors import ScheduleImportError
from .importer import import_file, import_text
from .normalize import format_days_display, format_time_display, semester_options
from .review import ReviewSession, ReviewState

EDIT_FIELDS = [
    ("course_code", "Course ID"),
    ("course_name", "Course Name"),
    ("start_time", "Start"),
    ("end_time", "End"),
    ("location", "Location"),
    ("instructor", "Professor"),
]
DAYS = ["M", "T", "W", "Th", "F"]


def next_monday(today: date | None = None) -> date:
    today = today or date.today()
    return today + timedelta(days=(7 - today.weekday()) % 7)


class DatePicker(tk.Toplevel):
    def __init__(self, master: tk.Tk, initial: datetime, on_pick):
        super().__init__(master)
        self.title("Select date")
        self.resizable(False, False)
        self.transient(master)
        self.grab_set()
        self._on_pick = on_pick
        frm = ttk.Frame(self, padding=12)
        frm.pack(fill=tk.BOTH, expand=True)
        top = ttk.Frame(frm)
        top.pack(fill=tk.X)
        self.var_year = tk.IntVar(value=initial.year)
        self.var_month = tk.IntVar(value=initial.month)
        ttk.Label(top, text="Year").pack(side=tk.LEFT)
        cb_year = ttk.Combobox(top, width=6, values=list(range(initial.year - 1, initial.year + 3)),
                               textvariable=self.var_year, state="readonly")
        cb_year.pack(side=tk.LEFT, padx=(6, 12))
        ttk.Label(top, text="Month").pack(side=tk.LEFT)
        cb_month = ttk.Combobox(top, width=4, values=list(range(1, 13)), textvariable=self.var_month, state="readonly")
        cb_month.pack(side=tk.LEFT, padx=(6, 0))
        for cb in (cb_year, cb_month):
            cb.bind("<<ComboboxSelected>>", lambda e: self._render_days())
        self._grid = ttk.Frame(frm)
        self._grid.pack(fill=tk.BOTH, expand=True, pady=(8, 0))
        for i, wd in enumerate(["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]):
            ttk.Label(self._grid, text=wd, anchor="center").grid(row=0, column=i, padx=2, pady=2)
        self._buttons = []
        self._render_days()

    def _render_days(self):
        for b in self._buttons:
            b.destroy()
        self._buttons.clear()
        y, m = self.var_year.get(), self.var_month.get()
        # monthrange: Monday=0, matching the header columns
        first_weekday, days_in_month = calendar.monthrange(y, m)
        row, col = 1, first_weekday
        for d in range(1, days_in_month + 1):
            btn = ttk.Button(self._grid, text=str(d), width=3, command=lambda dd=d: self._pick(dd))
            btn.grid(row=row, column=col, padx=2, pady=2)
            self._buttons.append(btn)
            col += 1
            if col > 6:
                col, row = 0, row + 1

    def _pick(self, day: int):
        try:
            self._on_pick(datetime(self.var_year.get(), self.var_month.get(), day))
        finally:
            self.destroy()


class App(ttk.Frame):
    def __init__(self, master: tk.Tk):
        super().__init__(master, padding=16)
        self.master = master
        master.title("Import Schedule")
        self.pack(fill=tk.BOTH, expand=True)
        self._cfg = config.load_user_config()
        self.session = ReviewSession()
        self._last_ics = None

        ttk.Label(self, text="Import Schedule", font=("Segoe UI", 16, "bold")).grid(row=0, column=0, sticky="w")
        ttk.Label(self, text="Upload or paste your class schedule").grid(row=1, column=0, sticky="w")

        # Inputs: Upload File vs Paste Text
        grp = ttk.LabelFrame(self, text="Input", padding=12)
        grp.grid(row=2, column=0, sticky="nsew", pady=(12, 0))
        self.var_mode = tk.StringVar(value="file")
        ttk.Radiobutton(grp, text="Upload File", value="file", variable=self.var_mode,
                        command=self._sync_mode).grid(row=0, column=0, sticky="w")
        ttk.Radiobutton(grp, text="Paste Text", value="paste", variable=self.var_mode,
                        command=self._sync_mode).grid(row=0, column=1, sticky="w")
        self.var_file = tk.StringVar(value=self._cfg.get("last_file", ""))
        self.ent_file = ttk.Entry(grp, textvariable=self.var_file, width=60)
        self.ent_file.grid(row=1, column=0, columnspan=2, sticky="we", pady=(8, 0))
        self.btn_browse = ttk.Button(grp, text="Browse…", command=self.pick_file)
        self.btn_browse.grid(row=1, column=2, sticky="w", padx=(8, 0), pady=(8, 0))
        self.txt_paste = scrolledtext.ScrolledText(grp, height=6, wrap=tk.WORD)
        self.txt_paste.grid(row=2, column=0, columnspan=3, sticky="nsew", pady=(8, 0))
        ttk.Label(grp, text="First Monday of classes (YYYY-MM-DD):").grid(row=3, column=0, sticky="w", pady=(8, 0))
        self.var_date = tk.StringVar(value=self._cfg.get("last_date", next_monday().isoformat()))
        ttk.Entry(grp, textvariable=self.var_date, width=14).grid(row=3, column=1, sticky="w", pady=(8, 0))
        ttk.Button(grp, text="Pick date", command=self.open_date_picker).grid(row=3, column=2, sticky="w", pady=(8, 0))
        self.btn_parse = ttk.Button(grp, text="Parse Schedule", command=self.on_parse)
        self.btn_parse.grid(row=4, column=0, columnspan=3, pady=(12, 0))
        grp.columnconfigure(1, weight=1)

        # Review: list + inline editor
        rev = ttk.LabelFrame(self, text="Review Classes", padding=12)
        rev.grid(row=3, column=0, sticky="nsew", pady=(12, 0))
        cols = ("code", "name", "days", "time", "location", "instructor")
        self.tree = ttk.Treeview(rev, columns=cols, show="headings", height=6, selectmode="browse")
        for c in cols:
            self.tree.heading(c, text=c.title())
        self.tree.grid(row=0, column=0, columnspan=4, sticky="nsew")
        self.btn_edit = ttk.Button(rev, text="Edit", command=self.on_edit)
        self.btn_edit.grid(row=1, column=0, sticky="w", pady=(8, 0))
        self.btn_delete = ttk.Button(rev, text="Delete", command=self.on_delete)
        self.btn_delete.grid(row=1, column=1, sticky="w", pady=(8, 0))

        self.editor = ttk.Frame(rev)
        self.editor.grid(row=2, column=0, columnspan=4, sticky="we", pady=(8, 0))
        self.vars = {}
        for i, (name, label) in enumerate(EDIT_FIELDS):
            ttk.Label(self.editor, text=label).grid(row=0, column=i, sticky="w")
            var = tk.StringVar()
            ttk.Entry(self.editor, textvariable=var, width=14).grid(row=1, column=i, sticky="we", padx=(0, 4))
            self.vars[name] = var
        self.day_vars = {}
        days_row = ttk.Frame(self.editor)
        days_row.grid(row=2, column=0, columnspan=3, sticky="w", pady=(6, 0))
        for d in DAYS:
            var = tk.BooleanVar()
            ttk.Checkbutton(days_row, text=d, variable=var, command=lambda dd=d: self.on_toggle_day(dd)).pack(side=tk.LEFT)
            self.day_vars[d] = var
        self.var_semester = tk.StringVar()
        self.cb_semester = ttk.Combobox(self.editor, textvariable=self.var_semester, values=semester_options(), state="readonly", width=14)
        self.cb_semester.grid(row=2, column=3, sticky="w", pady=(6, 0))
        ttk.Button(self.editor, text="Done Editing", command=self.on_done_edit).grid(row=2, column=5, sticky="e", pady=(6, 0))
        rev.columnconfigure(0, weight=1)

        # Actions
        act = ttk.Frame(self)
        act.grid(row=4, column=0, sticky="we", pady=(12, 0))
        self.btn_confirm = ttk.Button(act, text="Add 0 Classes", command=self.on_confirm)
        self.btn_confirm.pack(side=tk.RIGHT)
        ttk.Button(act, text="Cancel", command=self.on_cancel).pack(side=tk.RIGHT, padx=(0, 8))
        self.btn_open_file = ttk.Button(act, text="Open .ics", command=self.open_ics, state=tk.DISABLED)
        self.btn_open_file.pack(side=tk.LEFT)

        self.outbox = scrolledtext.ScrolledText(self, height=5, wrap=tk.WORD, state=tk.DISABLED)
        self.outbox.grid(row=5, column=0, sticky="nsew", pady=(12, 0))

        self.columnconfigure(0, weight=1)
        self.rowconfigure(3, weight=1)
        self._setup_drag_and_drop(self.ent_file)
        self._sync_mode()
        self._refresh()

    def _setup_drag_and_drop(self, widget):
        try:
            from tkinterdnd2 import DND_FILES  # type: ignore
        except ImportError:
            return
        widget.drop_target_register(DND_FILES)
        widget.dnd_bind("<<Drop>>", self._on_drop)

    def _on_drop(self, event):
        # Windows paths may be brace-quoted and space-separated; take the first file
        raw = event.data.strip()
        if raw.startswith("{") and raw.endswith("}"):
            raw = raw[1:-1]
        self.var_file.set(raw.split("} {")[0].strip())
        self.var_mode.set("file")
        self._sync_mode()

    def _sync_mode(self):
        paste = self.var_mode.get() == "paste"
        self.ent_file.configure(state=tk.DISABLED if paste else tk.NORMAL)
        self.btn_browse.configure(state=tk.DISABLED if paste else tk.NORMAL)
        self.txt_paste.configure(state=tk.NORMAL if paste else tk.DISABLED)

    def _log(self, text: str):
        self.outbox.configure(state=tk.NORMAL)
        self.outbox.insert(tk.END, text + "\n")
        self.outbox.see(tk.END)
        self.outbox.configure(state=tk.DISABLED)

    def _refresh(self):
        self.tree.delete(*self.tree.get_children())
        for i, c in enumerate(self.session.candidates):
            span = ""
            if c.start_time:
                span = format_time_display(c.start_time)
                if c.end_time:
                    span += f" - {format_time_display(c.end_time)}"
            self.tree.insert("", tk.END, iid=str(i), values=(
                c.course_code, c.course_name or "Untitled Class", format_days_display(c.days), span, c.location, c.instructor,
            ))
        editing = self.session.editing
        for child in self.editor.winfo_children():
            self._set_state(child, tk.NORMAL if editing else tk.DISABLED)
        if editing:
            self.tree.selection_set(str(self.session.editing_index))
        self.btn_confirm.configure(
            text=self.session.confirm_label,
            state=tk.NORMAL if self.session.can_confirm else tk.DISABLED,
        )

    def _set_state(self, widget, state):
        try:
            widget.configure(state=state)
        except tk.TclError:
            for child in widget.winfo_children():
                self._set_state(child, state)

    def _selected_index(self) -> int | None:
        sel = self.tree.selection()
        return int(sel[0]) if sel else None

    def pick_file(self):
        path = filedialog.askopenfilename(filetypes=[("Schedule", "*.pdf *.txt"), ("PDF", "*.pdf"), ("Text", "*.txt")])
        if path:
            self.var_file.set(path)

    def on_parse(self):
        if self.session.state != ReviewState.IDLE:
            self.session.cancel()
        self.btn_parse.configure(state=tk.DISABLED)
        self._log("Processing…")
        self.update_idletasks()
        try:
            if self.var_mode.get() == "paste":
                classes = import_text(self.txt_paste.get("1.0", tk.END))
            else:
                path = self.var_file.get().strip()
                if not path:
                    self._log("Warning: Choose a PDF or TXT schedule file.")
                    return
                classes = import_file(path)
            self.session.load(classes)
            self._log(f"{len(classes)} class{'es' if len(classes) != 1 else ''} found - edit or confirm")
        except ScheduleImportError as e:
            self._log(f"Error: {e.message}")
        finally:
            self.btn_parse.configure(state=tk.NORMAL)
            self._refresh()

    def on_edit(self):
        idx = self._selected_index()
        if idx is None or self.session.state != ReviewState.REVIEWING:
            return
        cls = self.session.begin_edit(idx)
        for name, var in self.vars.items():
            value = getattr(cls, name)
            var.set(value.strftime("%H:%M") if hasattr(value, "strftime") else (value or ""))
        for d, var in self.day_vars.items():
            var.set(d in cls.days)
        self.var_semester.set(cls.semester)
        self._refresh()

    def on_toggle_day(self, day: str):
        if self.session.state == ReviewState.EDITING:
            days = self.session.toggle_day(day)
            for d, var in self.day_vars.items():
                var.set(d in days)

    def on_done_edit(self):
        if self.session.state != ReviewState.EDITING:
            return
        try:
            for name, var in self.vars.items():
                self.session.set_field(name, var.get().strip())
            if self.var_semester.get():
                self.session.set_field("semester", self.var_semester.get())
        except ValueError as e:
            self._log(f"Error: {e}")
            return
        cls = self.session.finish_edit()
        problems = cls.problems()
        if problems:
            self._log(f"{cls.course_code}: {'; '.join(problems)}")
        self._refresh()

    def on_delete(self):
        idx = self._selected_index()
        if idx is None or self.session.state not in (ReviewState.REVIEWING, ReviewState.EDITING):
            return
        removed = self.session.delete(idx)
        self._log(f"Removed {removed.course_code}")
        self._refresh()

    def on_confirm(self):
        if not self.session.can_confirm:
            return
        try:
            first_monday = datetime.strptime(self.var_date.get().strip(), "%Y-%m-%d").date()
        except ValueError:
            self._log("Error: First Monday must be YYYY-MM-DD.")
            return
        ics_path = self._output_path()
        sync = IcsCalendarSync(str(ics_path), first_monday, cal_name=self.session.candidates[0].semester)
        self.btn_confirm.configure(state=tk.DISABLED)
        try:
            committed = self.session.confirm(sync)
        except ScheduleImportError as e:
            self._log(f"Error: {e.message}")
        else:
            self._last_ics = str(ics_path)
            self.btn_open_file.configure(state=tk.NORMAL)
            self._log(f"Done → {ics_path} (classes: {len(committed)}, events: {sync.last_event_count})")
            self._save_cfg()
        finally:
            self._refresh()

    def on_cancel(self):
        self.session.cancel()
        self._log("Cancelled; nothing was saved.")
        self._refresh()

    def _output_path(self) -> Path:
        src = self.var_file.get().strip()
        if self.var_mode.get() == "file" and src:
            p = Path(src)
            return p.resolve().parent / f"{p.stem.replace(' ', '_')}.ics"
        return Path.home() / "schedule.ics"

    def _save_cfg(self):
        try:
            config.save_user_config({"last_file": self.var_file.get().strip(), "last_date": self.var_date.get().strip()})
        except OSError as e:
            self._log(f"Could not remember inputs: {e}")

    def open_ics(self):
        if not self._last_ics:
            return
        path = self._last_ics
        if sys.platform.startswith("win"):
            os.startfile(path)  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            os.system(f'open "{path}"')
        else:
            os.system(f'xdg-open "{path}"')

    def open_date_picker(self):
        def _set(dt: datetime):
            self.var_date.set(dt.strftime("%Y-%m-%d"))
        try:
            cur = datetime.strptime(self.var_date.get().strip(), "%Y-%m-%d")
        except ValueError:
            cur = datetime.today()
        DatePicker(self.master, cur, _set)


def main():
    # Real drag & drop needs the TkinterDnD root when it is installed
    try:
        from tkinterdnd2 import TkinterDnD  # type: ignore
        root = TkinterDnD.Tk()
    except ImportError:
        root = tk.Tk()
    App(root)
    root.minsize(860, 640)
    root.mainloop()


if __name__ == "__main__":
    main()
