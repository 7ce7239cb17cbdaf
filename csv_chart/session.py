"""The ordered collection of uploaded datasets.

Shared by the Streamlit page (one ``UploadSession`` per browser session) and
the API (one collection per request).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from csv_chart.data import CsvParseError, Dataset, build_dataset, decode_upload


logger = logging.getLogger(__name__)


def error_message(errors: Iterable[str]) -> str:
    """Combine per-file errors into the single string shown to the user."""
    return "\n".join(e for e in errors if e)


class DatasetCollection:
    def __init__(self, datasets: Optional[Iterable[Dataset]] = None) -> None:
        self._datasets: List[Dataset] = list(datasets or [])

    def __len__(self) -> int:
        return len(self._datasets)

    def __iter__(self) -> Iterator[Dataset]:
        return iter(self._datasets)

    @property
    def datasets(self) -> List[Dataset]:
        return list(self._datasets)

    @property
    def is_empty(self) -> bool:
        return not self._datasets

    def add_upload(self, file_name: str, raw: bytes, *, color_index: Optional[int] = None) -> Dataset:
        """Parse one uploaded file and append it.

        The palette slot defaults to the next free position. Raises
        ``CsvParseError`` when the file holds no valid rows.
        """
        if color_index is None:
            color_index = len(self._datasets)
        dataset = build_dataset(file_name, decode_upload(raw), color_index)
        self._datasets.append(dataset)
        if dataset.skipped_rows:
            logger.info("%s: skipped %d invalid rows", file_name, dataset.skipped_rows)
        return dataset

    def add_uploads(self, files: Iterable[Tuple[str, bytes]]) -> List[str]:
        """Append a batch of ``(file_name, raw)`` uploads in order.

        Colors are assigned from the collection size at the start of the batch
        plus the file's position in the batch, so a rejected file still uses up
        its palette slot. Returns the error messages of rejected files.
        """
        base = len(self._datasets)
        errors: List[str] = []
        for position, (file_name, raw) in enumerate(files):
            try:
                self.add_upload(file_name, raw, color_index=base + position)
            except CsvParseError as exc:
                logger.warning("Rejected upload %s: %s", file_name, exc)
                errors.append(str(exc))
        return errors

    def clear(self) -> None:
        self._datasets = []

    def summary(self) -> List[Dict[str, object]]:
        return [ds.summary() for ds in self._datasets]


class UploadSession:
    """Per-browser-session upload state behind the Streamlit page.

    The file picker hands back every selected file on each rerun; uploads are
    keyed by their upload id so each one is appended exactly once.
    """

    def __init__(self) -> None:
        self.collection = DatasetCollection()
        self.seen_ids: Set[str] = set()
        self.uploader_key = 0
        self.last_error = ""

    @property
    def widget_key(self) -> str:
        return f"uploader_{self.uploader_key}"

    def ingest(self, uploads: Optional[Iterable[Any]]) -> List[str]:
        """Append uploads not seen before.

        ``uploads`` are objects with ``file_id``, ``name`` and ``getvalue()``,
        like Streamlit's ``UploadedFile``. ``last_error`` is replaced only when
        a new batch arrives.
        """
        fresh = [f for f in uploads or [] if f.file_id not in self.seen_ids]
        if not fresh:
            return []
        errors = self.collection.add_uploads([(f.name, f.getvalue()) for f in fresh])
        self.seen_ids.update(f.file_id for f in fresh)
        self.last_error = error_message(errors)
        return errors

    def clear(self) -> None:
        """Clear All: drop datasets, forget uploads, reset the picker and the error."""
        self.collection.clear()
        self.seen_ids = set()
        # A fresh widget key empties the file picker.
        self.uploader_key += 1
        self.last_error = ""
