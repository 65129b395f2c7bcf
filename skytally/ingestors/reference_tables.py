"""Load the static reference tables from their CSV files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterator

from skytally.domain.errors import ReferenceTableError
from skytally.domain.reference import (
    HexRange,
    IcaoAircraft,
    IcaoOperator,
    ReferenceTables,
)

logger = logging.getLogger("skytally.ingestors.reference_tables")

AIRCRAFT_TYPES_FILE = "ICAOList.csv"
OPERATORS_FILE = "Airlines.csv"
HEX_RANGES_FILE = "ICAOHexRange.csv"
REGISTRATION_PREFIXES_FILE = "RegPrefixList.csv"
MILITARY_CODES_FILE = "MilICAOOperatorLookUp.csv"


def _read_rows(path: Path, *, header_len: int | None) -> Iterator[list[str]]:
    """Yield data rows, checking the header width when the file has one."""

    try:
        with path.open(newline="", encoding="utf-8") as handle:
            reader = csv.reader(handle)
            if header_len is not None:
                headers = next(reader, None)
                if headers is None:
                    raise ReferenceTableError(path.name, "missing header row")
                if len(headers) != header_len:
                    raise ReferenceTableError(
                        path.name,
                        f"unexpected header length {len(headers)}, expected {header_len}",
                    )
            for row in reader:
                if not row or not any(cell.strip() for cell in row):
                    continue
                yield row
    except OSError as exc:
        raise ReferenceTableError(path.name, f"failed to read file: {exc}") from exc
    except csv.Error as exc:
        raise ReferenceTableError(path.name, f"failed to parse CSV: {exc}") from exc


def _require(row: list[str], width: int, path: Path) -> None:
    if len(row) < width:
        raise ReferenceTableError(path.name, f"record has {len(row)} fields, expected {width}: {row}")


def load_aircraft_types(path: Path) -> dict[str, IcaoAircraft]:
    """Columns: type designator, class, engine count/type, "MANUFACTURER, model"."""

    records: dict[str, IcaoAircraft] = {}
    for row in _read_rows(path, header_len=4):
        _require(row, 4, path)
        records[row[0]] = IcaoAircraft(
            aircraft_class=row[1], engine=row[2], make=row[3].strip('"')
        )
    return records


def load_operators(path: Path) -> dict[str, IcaoOperator]:
    """Columns: company, country, telephony, three-letter code."""

    records: dict[str, IcaoOperator] = {}
    for row in _read_rows(path, header_len=4):
        _require(row, 4, path)
        code = row[3][:3]
        if not code:
            continue
        records[code] = IcaoOperator(company=row[0], country=row[1])
    return records


def load_hex_ranges(path: Path) -> dict[HexRange, str]:
    """Columns: lower bound, upper bound, country. The file has no header."""

    records: dict[HexRange, str] = {}
    for row in _read_rows(path, header_len=None):
        _require(row, 3, path)
        try:
            bounds = HexRange(int(row[0], 16), int(row[1], 16))
        except ValueError as exc:
            raise ReferenceTableError(
                path.name, f"unable to parse hexadecimal bound in {row[:2]}"
            ) from exc
        records[bounds] = row[2]
    return records


def load_registration_prefixes(path: Path) -> dict[str, str]:
    """Columns: country, prefix, comment."""

    records: dict[str, str] = {}
    for row in _read_rows(path, header_len=3):
        _require(row, 2, path)
        records[row[1]] = row[0]
    return records


def load_military_codes(path: Path) -> dict[str, str]:
    """Columns: operator, code. Rows without a code are skipped."""

    records: dict[str, str] = {}
    for row in _read_rows(path, header_len=2):
        _require(row, 2, path)
        if not row[1]:
            continue
        records[row[1]] = row[0]
    return records


def load_reference_tables(data_dir: str | Path) -> ReferenceTables:
    """Load all five tables or raise ``ReferenceTableError``."""

    base = Path(data_dir)
    tables = ReferenceTables(
        aircraft_types=load_aircraft_types(base / AIRCRAFT_TYPES_FILE),
        operators=load_operators(base / OPERATORS_FILE),
        hex_ranges=load_hex_ranges(base / HEX_RANGES_FILE),
        registration_prefixes=load_registration_prefixes(base / REGISTRATION_PREFIXES_FILE),
        military_codes=load_military_codes(base / MILITARY_CODES_FILE),
    )
    logger.info(
        "Loaded reference tables: %s types, %s operators, %s hex ranges, "
        "%s registration prefixes, %s military codes",
        len(tables.aircraft_types),
        len(tables.operators),
        len(tables.hex_ranges),
        len(tables.registration_prefixes),
        len(tables.military_codes),
    )
    return tables


__all__ = [
    "load_aircraft_types",
    "load_hex_ranges",
    "load_military_codes",
    "load_operators",
    "load_reference_tables",
    "load_registration_prefixes",
]
