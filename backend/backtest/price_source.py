"""Price series source for backtesting.

Reads a CSV file with a ``price`` column (USD per SOL) and an optional
``timestamp`` column (ISO 8601 or Unix seconds). Rows whose price fails
validation are skipped with a warning, as the live price feed would
reject them before they reach the core.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Protocol

from core.validation import InvalidPriceError, validate_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricePoint:
    price: Decimal
    timestamp: datetime | None = None


class PriceSource(Protocol):
    """Protocol for price series access."""

    def load(self) -> list[PricePoint]: ...


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    value = value.strip()
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        pass
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class CsvPriceSource:
    """Load prices from a CSV file in row order."""

    def __init__(self, path: str | Path, price_column: str = "price"):
        self.path = Path(path)
        self.price_column = price_column
        self.skipped = 0

    def load(self) -> list[PricePoint]:
        points: list[PricePoint] = []
        self.skipped = 0

        with open(self.path, newline="") as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames or self.price_column not in reader.fieldnames:
                raise ValueError(
                    f"{self.path}: missing '{self.price_column}' column "
                    f"(found {reader.fieldnames})"
                )

            for line_no, row in enumerate(reader, start=2):
                try:
                    price = validate_price(row.get(self.price_column))
                except InvalidPriceError as e:
                    self.skipped += 1
                    logger.warning("%s:%d skipped: %s", self.path.name, line_no, e)
                    continue
                points.append(
                    PricePoint(price=price, timestamp=_parse_timestamp(row.get("timestamp")))
                )

        logger.info(
            "Loaded %d prices from %s (skipped %d invalid rows)",
            len(points),
            self.path,
            self.skipped,
        )
        return points
