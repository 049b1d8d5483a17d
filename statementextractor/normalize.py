"""Date/amount normalization and duplicate removal for parsed candidates."""

import logging
from datetime import date
from typing import List, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

DEDUP_KEYS = ["transaction_date", "merchant", "amount"]


def normalize_date(text: str, today: date) -> str:
  """Convert ``M/D``, ``M/D/YY`` or ``M/D/YYYY`` into ``YYYY-MM-DD``.

  Two-digit years map to 20YY and a missing year becomes ``today.year``.
  Anything that does not form a real calendar date falls back to ``today``.
  """
  parts = text.strip().split("/")
  try:
    if len(parts) == 2:
      month, day, year = int(parts[0]), int(parts[1]), today.year
    elif len(parts) == 3 and len(parts[2]) in (2, 4):
      month, day = int(parts[0]), int(parts[1])
      year = int(f"20{parts[2]}" if len(parts[2]) == 2 else parts[2])
    else:
      raise ValueError(f"unsupported date layout: {text!r}")
    return date(year, month, day).isoformat()
  except ValueError as e:
    logger.debug(f"Falling back to processing date: {e}")
    return today.isoformat()


def parse_amount(text: str) -> float:
  return round(float(text.replace(",", "")), 2)


def deduplicate(candidates: Sequence) -> List:
  """Drop candidates repeating an earlier (date, merchant, amount) triple."""
  if not candidates:
    return []

  frame = pd.DataFrame(
    [[getattr(c, key) for key in DEDUP_KEYS] for c in candidates],
    columns=DEDUP_KEYS,
  )
  keep = ~frame.duplicated(subset=DEDUP_KEYS, keep="first")
  unique = [c for c, kept in zip(candidates, keep) if kept]

  dropped = len(candidates) - len(unique)
  if dropped:
    logger.info(f"Removed {dropped} duplicate transactions")
  return unique
