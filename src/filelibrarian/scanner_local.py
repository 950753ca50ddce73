from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable
from pathlib import Path

from .excludes import is_excluded_file_name, is_excluded_folder_name

logger = logging.getLogger(__name__)


class LocalScanner:
    def __init__(self, root: Path) -> None:
        self.root = Path(os.path.abspath(root.expanduser()))

    def scan(
        self,
        progress_cb: Callable[[Path, int, int], None] | None = None,
    ) -> list[Path]:
        if not self.root.exists() or not self.root.is_dir():
            raise FileNotFoundError(f"Local root not found: {self.root}")

        found: list[Path] = []
        dirs_scanned = 0

        for current_dir, dirs, files in os.walk(self.root, topdown=True):
            current_path = Path(current_dir)
            dirs_scanned += 1
            dirs[:] = [name for name in dirs if not is_excluded_folder_name(name)]

            for filename in files:
                if is_excluded_file_name(filename):
                    continue
                full_path = current_path / filename
                try:
                    st = full_path.lstat()
                except OSError:
                    logger.debug("Skipping unreadable entry %s", full_path)
                    continue
                if not stat.S_ISREG(st.st_mode):
                    continue
                found.append(full_path)

            if progress_cb is not None:
                progress_cb(current_path, dirs_scanned, len(found))

        logger.debug(
            "Scanned %s: %d dirs, %d files", self.root, dirs_scanned, len(found)
        )
        return sorted(found)
