"""Matches statement text lines against an ordered cascade of line shapes.

Statement layouts vary by issuer, so every line is tried against the matchers
in ``LINE_MATCHERS`` from the most constrained shape (date, description,
amount and running balance) down to a bare ``merchant amount`` pair. The first
matcher that fires wins.
"""

import re
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

# Token patterns
DATE = r"(?<![\d/])\d{1,2}/\d{1,2}(?:/\d{4}|/\d{2})?"
SHORT_DATE = r"(?<![\d/])\d{1,2}/\d{1,2}"
AMOUNT = r"\d[\d,]*\.\d{2}"

AMOUNT_RE = re.compile(AMOUNT)

MIN_LINE_LENGTH = 5
MIN_MERCHANT_LENGTH = 3
MAX_MERCHANT_LENGTH = 100

NON_MERCHANT_PREFIXES = (
  "date",
  "transaction",
  "amount",
  "description",
  "merchant",
  "total",
  "balance",
  "payment",
  "fee",
)
# A signed credit line starting with "payment" is the payment itself, not a
# column header or a summary row.
CREDIT_ALLOWED_PREFIXES = ("payment",)


@dataclass
class RawMatch:
  date_text: str
  description: str
  amount_text: str
  is_credit: bool
  pattern: str
  line_number: int = 0


@dataclass
class SkippedLine:
  line_number: int
  text: str
  reason: str


class LineMatcher(NamedTuple):
  name: str
  regex: re.Pattern
  is_credit: bool
  has_date: bool


LINE_MATCHERS: List[LineMatcher] = [
  # "10/27 Zelle From A. Smith 500.00 9,372.34" - amount followed by balance
  LineMatcher("balance", re.compile(rf"^({DATE})\s+(.+?)\s+({AMOUNT})\s+-?{AMOUNT}\s*$"), False, True),
  # "10/10 PAYMENT RECEIVED -500.00 9,372.34"
  LineMatcher("credit_balance", re.compile(rf"^({DATE})\s+(.+?)\s+-({AMOUNT})\s+-?{AMOUNT}\s*$"), True, True),
  # "10/10 REFUND -25.00"
  LineMatcher("credit", re.compile(rf"^({DATE})\s+(.+?)\s+-({AMOUNT})\s*$"), True, True),
  # "10/10 AMAZON MKTPL*NF2LF3661 Amzn.com/bill WA 38.40"
  LineMatcher("short_date", re.compile(rf"^({SHORT_DATE})\s+(.+?)\s+({AMOUNT})\s*$"), False, True),
  # "10/10/2024 Amazon Purchase 38.40"
  LineMatcher("flexible_date", re.compile(rf"^({DATE})\s+(.+?)\s+({AMOUNT})\s*$"), False, True),
  # "AMAZON PRIME 14.99"
  LineMatcher("no_date", re.compile(rf"^([A-Z][A-Za-z\s*.\-&']+?)\s+({AMOUNT})\s*$"), False, False),
]


def clean_merchant(text: str) -> str:
  text = re.sub(r"\*+", " ", text)
  text = re.sub(r"\s+", " ", text).strip()
  return text[:MAX_MERCHANT_LENGTH]


def header_word(merchant: str, is_credit: bool = False) -> Optional[str]:
  """Return the non-merchant prefix ``merchant`` starts with, if any."""
  lowered = merchant.lower()
  for prefix in NON_MERCHANT_PREFIXES:
    if is_credit and prefix in CREDIT_ALLOWED_PREFIXES:
      continue
    if lowered.startswith(prefix):
      return prefix
  return None


def match_line(line: str, today: date) -> Optional[RawMatch]:
  """Run the matcher cascade over one trimmed line."""
  for matcher in LINE_MATCHERS:
    m = matcher.regex.search(line)
    if not m:
      continue
    if matcher.has_date:
      date_text, description, amount_text = m.group(1), m.group(2), m.group(3)
    else:
      date_text = f"{today.month}/{today.day}"
      description, amount_text = m.group(1), m.group(2)
    return RawMatch(
      date_text=date_text,
      description=description,
      amount_text=amount_text,
      is_credit=matcher.is_credit,
      pattern=matcher.name,
    )
  return None


class LineParser:
  """Extracts raw transaction matches from reconstructed document text."""

  def __init__(self, clock: Callable[[], date] = date.today):
    self.clock = clock

  def parse(self, text: str, skipped: Optional[List[SkippedLine]] = None,
            today: Optional[date] = None) -> List[RawMatch]:
    """Return one ``RawMatch`` per transaction line, in document order.

    Lines that cannot carry a transaction are skipped silently. When a
    ``skipped`` list is passed, amount-bearing lines that produced no match
    are appended to it along with the reason. ``today`` pins the date used
    for dateless lines, otherwise the clock is read once per call.
    """
    today = today or self.clock()
    lines = text.split("\n")
    logger.info(f"Parsing {len(lines)} lines for transactions...")

    matches = []
    sample_lines = 0
    for line_number, line in enumerate(lines, 1):
      line = line.strip()
      if len(line) < MIN_LINE_LENGTH:
        continue

      has_amount = AMOUNT_RE.search(line) is not None
      if has_amount and sample_lines < 10:
        sample_lines += 1
        logger.debug(f"Sample line {sample_lines}: {line}")

      match = match_line(line, today)
      reason = None
      if match is None:
        reason = "no_match"
      else:
        match.description = clean_merchant(match.description)
        match.line_number = line_number
        if len(match.description) < MIN_MERCHANT_LENGTH:
          reason = "short_merchant"
        elif header_word(match.description, match.is_credit):
          reason = "header_word"

      if reason is None:
        matches.append(match)
      elif skipped is not None and has_amount:
        skipped.append(SkippedLine(line_number, line, reason))

    logger.info(f"Matched {len(matches)} transaction lines")
    return matches
