"""CSV acquisition: fetch, decompress, cap, and parse motion-capture exports."""

from __future__ import annotations

import gzip
import logging
import zlib
from pathlib import Path
from typing import Iterable, Literal, Protocol, Sequence

import pandas as pd
import requests

from .constants import (
    CONTACT_MARKER_COLUMN,
    DEFAULT_MAX_CSV_CHARS,
    ENERGY_COLUMNS,
    GZIP_MAGIC,
    KINEMATIC_COLUMNS,
    MOVEMENT_ID_COLUMN,
    TIME_COLUMN,
)

logger = logging.getLogger(__name__)

FileFamily = Literal["me", "ik"]

ME_HEADER_MARKERS = ("total_kinetic_energy", "legs_kinetic_energy", "torso_kinetic_energy")
IK_HEADER_MARKERS = ("pelvis_rot", "torso_rot", "left_knee", "right_knee")


class CsvFetchError(RuntimeError):
    """A CSV resource could not be retrieved."""


class ByteSource(Protocol):
    """Anything that can hand back the raw bytes behind a locator."""

    def fetch_bytes(self, locator: str) -> bytes: ...


class CsvFetcher:
    """
    Retrieve raw CSV bytes from http(s) URLs or local paths.

    One `requests.Session` is reused across locators of a scoring run.
    """

    def __init__(self, timeout_s: float = 30.0, session: requests.Session | None = None):
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def fetch_bytes(self, locator: str) -> bytes:
        if locator.startswith(("http://", "https://")):
            return self._fetch_url(locator)
        path = Path(locator).expanduser()
        try:
            return path.read_bytes()
        except OSError as exc:
            raise CsvFetchError(f"CSV read failed for {path}: {exc}") from exc

    def _fetch_url(self, url: str) -> bytes:
        try:
            response = self.session.get(url, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise CsvFetchError(f"CSV download failed: {exc}") from exc
        if not response.ok:
            raise CsvFetchError(f"CSV download failed: {response.status_code}")
        return response.content


def decode_csv_bytes(raw: bytes, max_chars: int = DEFAULT_MAX_CSV_CHARS) -> str:
    """Decode raw bytes to capped text, gunzipping when the gzip magic header is present."""
    if raw[:2] == GZIP_MAGIC:
        logger.info("Detected gzip-compressed CSV (%d bytes), decompressing", len(raw))
        try:
            text = gzip.decompress(raw).decode("utf-8", errors="replace")
        except (OSError, EOFError, zlib.error) as exc:
            raise CsvFetchError(f"CSV decompress failed: {exc}") from exc
        logger.info("Decompressed to %d chars", len(text))
    else:
        text = raw.decode("utf-8", errors="replace")
    return cap_csv_text(text, max_chars)


def cap_csv_text(text: str, max_chars: int = DEFAULT_MAX_CSV_CHARS) -> str:
    """Truncate at the last newline at or before `max_chars` so no row is split."""
    if len(text) <= max_chars:
        return text
    last_newline = text.rfind("\n", 0, max_chars + 1)
    capped = text[:last_newline] if last_newline > 0 else text[:max_chars]
    logger.info("Capped CSV at %d chars (max: %d)", len(capped), max_chars)
    return capped


def parse_csv_rows(text: str, label: str = "CSV") -> list[dict[str, str]]:
    """Split CSV text into lower-cased, quote-stripped header -> value mappings."""
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        logger.debug("[%s] fewer than 2 non-empty lines, nothing to parse", label)
        return []

    headers = [_strip_quotes(header.strip().lower()) for header in lines[0].split(",")]
    logger.debug("[%s] %d headers: %s", label, len(headers), ", ".join(headers[:30]))

    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        values = line.split(",")
        rows.append(
            {
                header: _strip_quotes(values[j].strip()) if j < len(values) else ""
                for j, header in enumerate(headers)
            }
        )
    logger.debug("[%s] parsed %d data rows", label, len(rows))
    return rows


def detect_file_family(headers: Iterable[str]) -> FileFamily | None:
    """Classify an export as energy (`me`) or kinematics (`ik`) from its headers."""
    lowered = {header.lower() for header in headers}
    if any(marker in lowered for marker in ME_HEADER_MARKERS):
        return "me"
    if any(marker in lowered for marker in IK_HEADER_MARKERS):
        return "ik"
    return None


def sniff_file_family(
    locator: str,
    source: ByteSource,
    max_chars: int = DEFAULT_MAX_CSV_CHARS,
) -> FileFamily | None:
    """Fetch a resource and classify it from its header row."""
    text = decode_csv_bytes(source.fetch_bytes(locator), max_chars)
    header_line = next((line for line in text.split("\n") if line.strip()), "")
    return detect_file_family(
        _strip_quotes(header.strip().lower()) for header in header_line.split(",")
    )


def read_csv_rows(
    locator: str,
    source: ByteSource,
    *,
    label: str = "CSV",
    max_chars: int = DEFAULT_MAX_CSV_CHARS,
) -> list[dict[str, str]]:
    """Fetch one resource and parse it into row mappings."""
    text = decode_csv_bytes(source.fetch_bytes(locator), max_chars)
    rows = parse_csv_rows(text, label)
    logger.info("[%s] %d chars -> %d rows", label, len(text), len(rows))
    return rows


def read_concatenated_rows(
    locators: Sequence[str],
    source: ByteSource,
    *,
    family: FileFamily,
    max_chars: int = DEFAULT_MAX_CSV_CHARS,
) -> list[dict[str, str]]:
    """Concatenate rows from several exports of one family (e.g. per-movement files)."""
    rows: list[dict[str, str]] = []
    for idx, locator in enumerate(locators, start=1):
        rows.extend(
            read_csv_rows(locator, source, label=f"{family}-{idx}", max_chars=max_chars)
        )
    logger.info("Total %s rows after concatenation: %d", family, len(rows))
    return rows


def build_frame_table(
    rows: Sequence[dict[str, str]],
    family: FileFamily,
) -> tuple[pd.DataFrame, list[str]]:
    """
    Turn string rows into a typed frame table for one resource family.

    Numeric channels are coerced to float; blanks become 0.0 silently and
    malformed cells become 0.0 with one warning per column. The contact marker
    column is only present when the export carried it.
    """
    numeric_cols = [TIME_COLUMN, *(ENERGY_COLUMNS if family == "me" else KINEMATIC_COLUMNS)]
    raw = pd.DataFrame.from_records(list(rows)) if rows else pd.DataFrame()

    table = pd.DataFrame(index=raw.index)
    if MOVEMENT_ID_COLUMN in raw.columns:
        table[MOVEMENT_ID_COLUMN] = raw[MOVEMENT_ID_COLUMN].fillna("").astype(str).str.strip()
    else:
        table[MOVEMENT_ID_COLUMN] = pd.Series("", index=raw.index, dtype="object")

    if CONTACT_MARKER_COLUMN in raw.columns:
        numeric_cols.append(CONTACT_MARKER_COLUMN)

    warnings: list[str] = []
    for col in numeric_cols:
        if col not in raw.columns:
            table[col] = 0.0
            continue
        text_values = raw[col].fillna("").astype(str).str.strip()
        parsed = pd.to_numeric(text_values, errors="coerce")
        malformed = int((parsed.isna() & text_values.ne("")).sum())
        if malformed:
            warnings.append(
                f"{family}: {malformed} malformed value(s) in column '{col}' treated as 0"
            )
        table[col] = parsed.fillna(0.0).astype(float)

    for warning in warnings:
        logger.warning(warning)
    return table, warnings


def _strip_quotes(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value
