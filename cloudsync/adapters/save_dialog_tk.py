"""Tk save-file picker behind :class:`SaveDialogPort`."""

from __future__ import annotations

import os
from tkinter import filedialog
from typing import Any, Optional, Sequence

from cloudsync.domain.ports import FileFilter, SaveDialogPort


class TkSaveDialog(SaveDialogPort):
    """Ask the user for a destination path with ``asksaveasfilename``."""

    def __init__(self, parent: Any = None, initial_dir: Optional[str] = None) -> None:
        self.parent = parent
        self.initial_dir = initial_dir

    def show_save_file_dialog(
        self, title: str, default_name: str, filters: Sequence[FileFilter]
    ) -> Optional[str]:
        filetypes = [(label, pattern) for label, pattern in filters] or [("All files", "*.*")]
        _, ext = os.path.splitext(filetypes[0][1])
        initial_dir = self.initial_dir
        if initial_dir and not os.path.isdir(initial_dir):
            initial_dir = None
        selected = filedialog.asksaveasfilename(
            parent=self.parent,
            title=title,
            initialfile=default_name,
            initialdir=initial_dir or os.path.expanduser("~"),
            filetypes=filetypes,
            defaultextension=ext if ext and ext != ".*" else "",
        )
        if not selected:
            return None
        return os.path.normpath(selected)
