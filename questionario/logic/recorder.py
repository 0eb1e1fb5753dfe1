"""Persistence of submission summaries as JSON files.

Each saved submission becomes ``<slug>_<YYYYMMDD_HHMMSS>.json`` inside the
responses directory. Files are created exclusively: when two submissions for
the same instrument land in the same second, the later one gets a counter
suffix (``_2``, ``_3`` ...) instead of overwriting the earlier file.

Saving is optional. A missing or read-only directory, or a failed write, is
reported through ``PersistResult(saved=False)`` and never raised.
"""

from __future__ import annotations

import logging
import os
import re
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from questionario.models.summary import PersistResult, SubmissionSummary

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "questionario"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
MAX_NAME_ATTEMPTS = 100

# Anything that is not a Unicode letter or digit; underscore included.
_NON_ALNUM_RE = re.compile(r"[\W_]+")


def slugify(text: str) -> str:
    """Lower-case `text` and join its letter/digit runs with single hyphens.

    >>> slugify("Saúde Mental!!")
    'saúde-mental'
    >>> slugify("  --  ")
    'questionario'
    """
    normalized = unicodedata.normalize("NFC", text or "").strip().lower()
    slug = _NON_ALNUM_RE.sub("-", normalized).strip("-")
    return slug or DEFAULT_SLUG


def build_filename(instrument: str, when: datetime, attempt: int = 1) -> str:
    stem = f"{slugify(instrument)}_{when.strftime(TIMESTAMP_FORMAT)}"
    if attempt > 1:
        stem = f"{stem}_{attempt}"
    return f"{stem}.json"


def _store_unavailable(store: Path) -> Optional[str]:
    if not store.exists():
        return "missing"
    if not store.is_dir():
        return "not_a_directory"
    if not os.access(store, os.W_OK | os.X_OK):
        return "not_writable"
    return None


def _write_exclusive(path: Path, payload: bytes) -> None:
    """Create `path` and write `payload`; remove the file if the write fails."""
    with open(path, "xb") as fh:
        try:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        except BaseException:
            fh.close()
            try:
                path.unlink()
            except OSError:
                logger.warning("submission.partial_file_not_removed path=%s", path, exc_info=True)
            raise


def persist_summary(
    summary: SubmissionSummary,
    store: Union[str, "os.PathLike[str]"],
    *,
    now: Optional[datetime] = None,
) -> PersistResult:
    """Write `summary` into `store` under a fresh, unique file name."""
    directory = Path(store)
    reason = _store_unavailable(directory)
    if reason is not None:
        logger.info("submission.persist_skipped reason=%s dir=%s", reason, directory)
        return PersistResult.not_saved()

    payload = summary.to_json().encode("utf-8")
    when = now or datetime.now().astimezone()
    for attempt in range(1, MAX_NAME_ATTEMPTS + 1):
        name = build_filename(summary.instrumento, when, attempt)
        try:
            _write_exclusive(directory / name, payload)
        except FileExistsError:
            continue
        except OSError:
            logger.error("submission.persist_failed dir=%s file=%s", directory, name, exc_info=True)
            return PersistResult.not_saved()
        logger.info(
            "submission.persisted file=%s instrument=%s answered=%s/%s",
            name,
            summary.instrumento,
            summary.respondidas,
            summary.total_questoes,
        )
        return PersistResult(saved=True, filename=name)

    logger.error("submission.persist_failed dir=%s reason=name_exhausted", directory)
    return PersistResult.not_saved()


__all__ = [
    "DEFAULT_SLUG",
    "build_filename",
    "persist_summary",
    "slugify",
]
