# weld_annote/persistence.py
from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Dict, List, Optional

from .domain import (
    AnnotationRecord,
    AppConfig,
    MetaRecord,
    StoreEntry,
    parse_record_filename,
)

logger = logging.getLogger(__name__)


# Filenames (within annotation/config dirs)
META_FILENAME = "meta.json"
APP_CONFIG_FILENAME = "config.json"
CONFIG_DIR_ENV = "WELD_ANNOTE_CONFIG_DIR"


# -----------------------------
# Errors
# -----------------------------

class StoreError(Exception):
    """Base class for annotation store failures surfaced to the UI."""


class NoDirectorySelected(StoreError):
    pass


class DirectoryCreateFailure(StoreError):
    pass


class RecordNotFound(StoreError, LookupError):
    pass


class RecordParseFailure(StoreError, ValueError):
    pass


class RecordWriteFailure(StoreError):
    pass


class DeleteFailure(StoreError):
    pass


# -----------------------------
# Atomic file helpers
# -----------------------------

def _atomic_write_text(path: str, text: str, encoding: str = "utf-8") -> None:
    d = os.path.dirname(path)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=d)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def _atomic_write_json(path: str, payload: Dict) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    _atomic_write_text(path, text + "\n")


def _read_json(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


# -----------------------------
# Annotation store (<video>_annotations/)
# -----------------------------

class AnnotationStore:
    """
    File-per-record store for one annotation directory.

    Layout:
      <annotation_dir>/<timestamp>.json   one AnnotationRecord each
      <annotation_dir>/meta.json          the MetaRecord singleton

    The directory is created lazily on the first write.
    """

    def __init__(self, annotation_dir: Optional[str]):
        self.annotation_dir = annotation_dir or ""

    # ---------------- Paths ----------------

    def _require_dir(self) -> str:
        if not self.annotation_dir:
            raise NoDirectorySelected("No annotation directory selected.")
        return self.annotation_dir

    def _path_for(self, name: str) -> str:
        d = self._require_dir()
        if not name or os.path.basename(name) != name or "/" in name or "\\" in name:
            raise ValueError(f"Invalid record name: {name!r}")
        if not name.endswith(".json"):
            raise ValueError(f"Record names must end in .json: {name!r}")
        return os.path.join(d, name)

    def _ensure_dir(self) -> None:
        d = self._require_dir()
        if os.path.isdir(d):
            return
        try:
            os.makedirs(d, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateFailure(f"Could not create {d}: {e}") from e
        logger.info("Created annotation directory %s", d)

    def _write(self, name: str, payload: Dict) -> None:
        path = self._path_for(name)
        self._ensure_dir()
        try:
            _atomic_write_json(path, payload)
        except OSError as e:
            raise RecordWriteFailure(f"Could not write {path}: {e}") from e

    # ---------------- Records ----------------

    def exists(self, name: str) -> bool:
        return os.path.isfile(self._path_for(name))

    def put(self, record: AnnotationRecord) -> str:
        """
        Writes <timestamp>.json, replacing any record with the same timestamp.
        Returns the stored name.
        """
        ts = record.timestamp
        if isinstance(ts, bool) or not isinstance(ts, int) or ts < 0:
            raise ValueError(f"timestamp must be a non-negative int, got {ts!r}")
        rec = record.without_degenerate_strokes()
        name = rec.name
        self._write(name, rec.to_dict())
        logger.debug("Saved annotation %s (%d strokes)", name, len(rec.strokes))
        return name

    def get(self, name: str) -> Optional[AnnotationRecord]:
        """
        Returns the decoded record, or None if no such file exists.
        Raises RecordParseFailure when the content is not a valid record or its
        timestamp disagrees with the file name.
        """
        path = self._path_for(name)
        if not os.path.isfile(path):
            return None
        try:
            rec = AnnotationRecord.from_dict(_read_json(path))
        except (ValueError, UnicodeDecodeError) as e:
            # json.JSONDecodeError is a ValueError
            raise RecordParseFailure(f"{name}: {e}") from e
        except OSError as e:
            raise StoreError(f"Could not read {name}: {e}") from e

        expected = parse_record_filename(name)
        if expected is not None and expected != rec.timestamp:
            raise RecordParseFailure(
                f"{name}: stored timestamp {rec.timestamp} does not match file name"
            )
        return rec

    def list(self) -> List[StoreEntry]:
        """
        All stored annotations ordered by timestamp ascending.

        A missing directory means "no annotations yet". Files that do not look
        like records or fail to parse are skipped.
        """
        d = self.annotation_dir
        if not d or not os.path.isdir(d):
            return []
        try:
            names = os.listdir(d)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StoreError(f"Could not list {d}: {e}") from e

        out: List[StoreEntry] = []
        for fn in names:
            if fn == META_FILENAME or not fn.endswith(".json"):
                continue
            ts = parse_record_filename(fn)
            if ts is None:
                logger.warning("Skipping %s: name is not a timestamp", fn)
                continue
            try:
                rec = self.get(fn)
            except StoreError as e:
                logger.warning("Skipping unreadable annotation %s", e)
                continue
            if rec is None:
                continue
            out.append(StoreEntry(name=fn, timestamp=rec.timestamp))

        out.sort(key=lambda e: e.timestamp)
        return out

    def delete(self, name: str) -> None:
        """
        Removes one record. Raises RecordNotFound if it is not there.
        """
        path = self._path_for(name)
        try:
            os.remove(path)
        except FileNotFoundError as e:
            raise RecordNotFound(f"No annotation named {name}") from e
        except OSError as e:
            raise DeleteFailure(f"Could not delete {name}: {e}") from e
        logger.info("Deleted annotation %s", name)

    # ---------------- Metadata ----------------

    def put_meta(self, meta: MetaRecord) -> None:
        self._write(META_FILENAME, meta.to_dict())
        logger.debug("Saved metadata for %s", self.annotation_dir)

    def get_meta(self) -> MetaRecord:
        """
        Returns stored metadata, or defaults if it was never written.
        """
        if not self.annotation_dir:
            return MetaRecord()
        path = os.path.join(self.annotation_dir, META_FILENAME)
        if not os.path.isfile(path):
            return MetaRecord()
        try:
            return MetaRecord.from_dict(_read_json(path))
        except (OSError, ValueError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", path, e)
            return MetaRecord()


# -----------------------------
# App config (<config_dir>/config.json)
# -----------------------------

def default_config_dir() -> str:
    return os.environ.get(CONFIG_DIR_ENV) or os.path.join(os.path.expanduser("~"), ".weld_annote")


def app_config_path(config_dir: Optional[str] = None) -> str:
    return os.path.join(config_dir or default_config_dir(), APP_CONFIG_FILENAME)


def load_app_config(config_dir: Optional[str] = None) -> AppConfig:
    """
    Loads <config_dir>/config.json.

    If missing or invalid, returns defaults.
    """
    path = app_config_path(config_dir)
    if not os.path.exists(path):
        return AppConfig()
    try:
        data = _read_json(path)
        if not isinstance(data, dict):
            raise ValueError("config must be an object")
        return AppConfig.from_dict(data)
    except (OSError, ValueError, UnicodeDecodeError) as e:
        logger.warning("Using default config, could not read %s: %s", path, e)
        return AppConfig()


def save_app_config(cfg: AppConfig, config_dir: Optional[str] = None) -> None:
    """
    Saves the app config atomically.
    """
    path = app_config_path(config_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    _atomic_write_json(path, cfg.to_dict())
