"""Statement PDF -> candidate transactions.

The pipeline runs four stages over one document:

1. ``PageTextReconstructor`` rebuilds text rows from positioned glyph runs.
2. ``LineParser`` matches each row against the ordered line shapes.
3. ``classify`` decides revenue vs expense and guesses an expense category.
4. ``normalize_date`` / ``deduplicate`` canonicalize dates and drop repeats.

Candidates are meant for human review before anything is stored, so nothing
here keeps state between calls.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

import pandas as pd

from .classifier import classify
from .line_parser import LineParser, SkippedLine
from .normalize import deduplicate, normalize_date, parse_amount
from .page_text import PageTextReconstructor, ReconstructorConfig

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
SOURCE_TAG = "pdf_upload"
NO_TRANSACTIONS_MESSAGE = "No transactions found in PDF. The file may be scanned or in an unsupported format."

RECORD_COLUMNS = ["transaction_date", "merchant", "amount", "type", "category", "source", "description"]


@dataclass
class TransactionCandidate:
  transaction_date: str
  merchant: str
  amount: float
  type: str
  category: str = ""
  source: str = SOURCE_TAG
  description: str = ""

  def to_dict(self) -> Dict[str, Any]:
    return asdict(self)


@dataclass
class ExtractionResult:
  transactions: List[TransactionCandidate] = field(default_factory=list)
  skipped_lines: List[SkippedLine] = field(default_factory=list)
  page_count: int = 0

  @property
  def is_empty(self) -> bool:
    return not self.transactions


class FileValidation(NamedTuple):
  is_valid: bool
  error: Optional[str] = None


class StatementExtractor:
  """Runs the full extraction pipeline for one statement at a time."""

  def __init__(self, config: ReconstructorConfig = None, clock: Callable[[], date] = date.today):
    self.reconstructor = PageTextReconstructor(config)
    self.parser = LineParser(clock)
    self.clock = clock

  def extract(self, pdf_bytes: bytes) -> List[TransactionCandidate]:
    return self.extract_with_report(pdf_bytes).transactions

  def extract_with_report(self, pdf_bytes: bytes) -> ExtractionResult:
    page_texts = self.reconstructor.page_texts(pdf_bytes)
    full_text = "".join(text + "\n" for text in page_texts)
    logger.debug(f"Full extracted text (first 500 chars): {full_text[:500]}")

    result = self.extract_text(full_text)
    result.page_count = len(page_texts)
    return result

  def extract_text(self, text: str) -> ExtractionResult:
    """Stages 2-4 over already reconstructed document text."""
    today = self.clock()
    skipped: List[SkippedLine] = []
    candidates = []
    for match in self.parser.parse(text, skipped, today):
      kind, category = classify(match.description, match.is_credit)
      candidates.append(TransactionCandidate(
        transaction_date=normalize_date(match.date_text, today),
        merchant=match.description,
        amount=parse_amount(match.amount_text),
        type=kind,
        category=category,
      ))

    transactions = deduplicate(candidates)
    logger.info(f"Parsed {len(transactions)} transactions")
    return ExtractionResult(transactions=transactions, skipped_lines=skipped)


def extract_transactions(pdf_bytes: bytes, *, config: ReconstructorConfig = None,
                         clock: Callable[[], date] = None) -> List[TransactionCandidate]:
  """Extract candidate transactions from the bytes of a statement PDF.

  Raises ``PdfExtractionError`` if the document cannot be decoded. A readable
  PDF without a text layer (a scan) yields an empty list.
  """
  return StatementExtractor(config, clock or date.today).extract(pdf_bytes)


async def extract_transactions_async(pdf_bytes: bytes, *, config: ReconstructorConfig = None,
                                     clock: Callable[[], date] = None) -> List[TransactionCandidate]:
  return await asyncio.to_thread(extract_transactions, pdf_bytes, config=config, clock=clock)


def _field(file: Any, name: str) -> Any:
  if isinstance(file, dict):
    return file.get(name)
  return getattr(file, name, None)


def validate_file(file: Any) -> FileValidation:
  """Pre-flight check of an upload: ``{"type": ..., "size": ...}``."""
  if file is None:
    return FileValidation(False, "No file selected")

  if _field(file, "type") != PDF_MIME_TYPE:
    return FileValidation(False, "File must be a PDF")

  if (_field(file, "size") or 0) > MAX_FILE_SIZE:
    return FileValidation(False, "File size must be less than 10MB")

  return FileValidation(True, None)


def validate_for_import(transactions: Iterable[Any]) -> FileValidation:
  """Every reviewed transaction needs a category before it can be stored."""
  missing = [t for t in transactions if not _field(t, "category")]
  if missing:
    return FileValidation(False, f"Please assign categories to all transactions ({len(missing)} missing)")
  return FileValidation(True, None)


def to_dataframe(transactions: Iterable[TransactionCandidate]) -> pd.DataFrame:
  return pd.DataFrame([t.to_dict() for t in transactions], columns=RECORD_COLUMNS)
