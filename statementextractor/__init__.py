"""
Statement Extractor Package

Turns bank and credit-card statement PDFs into candidate transactions
ready for review.
"""

from .extractor import (
  ExtractionResult,
  FileValidation,
  StatementExtractor,
  TransactionCandidate,
  extract_transactions,
  extract_transactions_async,
  to_dataframe,
  validate_file,
  validate_for_import,
)
from .page_text import PageTextReconstructor, PdfExtractionError, ReconstructorConfig

__version__ = "1.0.0"

__all__ = [
  "ExtractionResult",
  "FileValidation",
  "PageTextReconstructor",
  "PdfExtractionError",
  "ReconstructorConfig",
  "StatementExtractor",
  "TransactionCandidate",
  "extract_transactions",
  "extract_transactions_async",
  "to_dataframe",
  "validate_file",
  "validate_for_import",
]
