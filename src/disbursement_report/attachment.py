"""Serialisation of report workbooks into email attachments or files."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Dict

from openpyxl.workbook import Workbook

from . import log
from .constants import XLSX_EXTENSION, XLSX_MIME_TYPE
from .formatters import TimestampLike, format_report_date


@dataclass(frozen=True)
class Attachment:
    """Named, typed, base64-encoded file ready to attach to an email."""

    type: str
    name: str
    content: str

    def as_dict(self) -> Dict[str, str]:
        return {"type": self.type, "name": self.name, "content": self.content}


def build_report_filename(label: str, report_date: TimestampLike) -> str:
    """Return ``"<label> <DD-MM-YYYY>"`` for the report date in UTC+7."""

    return f"{label} {format_report_date(report_date)}"


def serialize_workbook(workbook: Workbook) -> bytes:
    """Serialise ``workbook`` into its ``.xlsx`` bytes."""

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def encode_attachment(payload: bytes, filename: str) -> Attachment:
    """Wrap serialised spreadsheet bytes into an :class:`Attachment`."""

    return Attachment(
        type=XLSX_MIME_TYPE,
        name=f"{filename}{XLSX_EXTENSION}",
        content=base64.b64encode(payload).decode("ascii"),
    )


def to_attachment(workbook: Workbook, filename: str) -> Attachment:
    """Serialise ``workbook`` and return it as a base64 ``.xlsx`` attachment.

    Args:
        workbook (Workbook): Finished report workbook.
        filename (str): Attachment name without the ``.xlsx`` extension.

    Returns:
        Attachment: Descriptor with the spreadsheet MIME type,
            ``<filename>.xlsx`` as name and the base64 document as content.
    """

    payload = serialize_workbook(workbook)
    attachment = encode_attachment(payload, filename)
    log.info("Encoded attachment '%s' (%d bytes)", attachment.name, len(payload))
    return attachment


def save_report(workbook: Workbook, directory: Path, filename: str) -> Path:
    """Persist ``workbook`` as ``<directory>/<filename>.xlsx``.

    The directory is expanded, resolved and created on demand. The same
    openpyxl writer as :func:`serialize_workbook` produces the file.

    Returns:
        Path: Absolute path of the written file.
    """

    directory = Path(directory).expanduser().resolve()
    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / f"{filename}{XLSX_EXTENSION}"
    workbook.save(destination)
    log.info("Saved report to '%s'", destination)
    return destination
