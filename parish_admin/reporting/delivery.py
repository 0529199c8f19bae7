from __future__ import annotations

import logging
import re
import tempfile
import webbrowser
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union

from ..config import settings
from .errors import DeliveryError, PopupBlockedError

logger = logging.getLogger(__name__)


class Delivery(Protocol):
    """
    Where rendered reports go.

    deliver(): a download; returns where the file ended up.
    present_printable(): show an HTML document for printing; returns the file shown.
    """

    def deliver(self, data: bytes, filename: str) -> Path:
        ...

    def present_printable(self, html: str, title: str) -> Path:
        ...


def _slug(s: str) -> str:
    s = re.sub(r"[^a-zA-Z0-9]+", "-", (s or "").strip().lower()).strip("-")
    return s or "report"


class FileDelivery:
    """
    Downloads land in export_dir. Printables are written to a temp file and
    opened in the default browser, whose page triggers the print dialog.

    Temp files are removed right away if the browser cannot be opened, and on
    close() otherwise. With print_dir set, printables are written there instead
    and outlive close(), so a browser opened from a short-lived process can
    still read them.
    """

    def __init__(
        self,
        export_dir: Optional[Union[str, Path]] = None,
        *,
        print_dir: Optional[Union[str, Path]] = None,
        open_browser: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.export_dir = Path(export_dir) if export_dir is not None else settings.export_path
        self.print_dir = Path(print_dir) if print_dir is not None else None
        self._open_browser = open_browser or webbrowser.open
        self._temp_files: List[Path] = []

    def deliver(self, data: bytes, filename: str) -> Path:
        name = Path(filename).name
        if not name:
            raise DeliveryError("Missing filename for download")
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            path = self.export_dir / name
            path.write_bytes(data)
        except OSError as e:
            raise DeliveryError(f"Could not write {name}: {e}") from e
        logger.info("Report saved: %s (%d bytes)", path, len(data))
        return path

    def present_printable(self, html: str, title: str) -> Path:
        if self.print_dir is not None:
            try:
                self.print_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DeliveryError(f"Could not create {self.print_dir}: {e}") from e

        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            suffix=".html",
            prefix=f"{_slug(title)}-",
            dir=self.print_dir,
            delete=False,
        ) as fh:
            fh.write(html)
            path = Path(fh.name)

        try:
            opened = self._open_browser(path.as_uri())
        except webbrowser.Error as e:
            logger.warning("Browser unavailable for printing: %s", e)
            opened = False

        if not opened:
            path.unlink(missing_ok=True)
            raise PopupBlockedError()

        if self.print_dir is None:
            self._temp_files.append(path)
        logger.info("Printable report opened: %s", path)
        return path

    def close(self) -> None:
        while self._temp_files:
            self._temp_files.pop().unlink(missing_ok=True)

    def __enter__(self) -> "FileDelivery":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["Delivery", "FileDelivery"]
