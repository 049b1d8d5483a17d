"""Rebuilds reading-order text lines from the positioned text runs of a PDF.

PDF pages carry no notion of a line: every text run is drawn at an (x, y)
position. Runs whose vertical positions round to the same y coordinate are treated as
one visual row, rows are ordered top to bottom, and the rows of each page are
joined with newlines.
"""

import io
import math
import os
import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import fitz  # PyMuPDF
import pdfplumber

logger = logging.getLogger(__name__)

ENGINES = ("pdfplumber", "pymupdf")


class PdfExtractionError(Exception):
  """The document could not be opened or decoded."""


@dataclass
class ReconstructorConfig:
  engine: str = "pdfplumber"
  # pdfplumber splits glyphs into separate runs across gaps wider than this
  x_tolerance: float = 3

  def __post_init__(self):
    if self.engine not in ENGINES:
      raise ValueError(f"Unknown PDF engine '{self.engine}', expected one of {', '.join(ENGINES)}")

  @classmethod
  def from_env(cls) -> "ReconstructorConfig":
    return cls(engine=os.environ.get("STATEMENT_PDF_ENGINE", "pdfplumber").strip().lower())


def group_runs(runs: List[Tuple[float, str]]) -> List[str]:
  """Group ``(y, text)`` runs into rows, top row first.

  ``y`` is in PDF space (origin bottom-left). Runs keep their
  extraction order inside a row.
  """
  rows: Dict[int, List[str]] = {}
  for y, text in runs:
    text = text.strip()
    if not text:
      continue
    # halves round up, never to even
    rows.setdefault(math.floor(y + 0.5), []).append(text)
  return [" ".join(rows[y]) for y in sorted(rows, reverse=True)]


class PageTextReconstructor:
  """Turns PDF bytes into per-page row lists using the configured engine."""

  def __init__(self, config: ReconstructorConfig = None):
    self.config = config or ReconstructorConfig()

  def page_rows(self, pdf_bytes: bytes) -> List[List[str]]:
    if not pdf_bytes:
      raise PdfExtractionError("Failed to extract text from PDF. The file is empty.")

    if self.config.engine == "pymupdf":
      pages = self._runs_with_pymupdf(pdf_bytes)
    else:
      pages = self._runs_with_pdfplumber(pdf_bytes)

    result = []
    for page_num, runs in enumerate(pages):
      rows = group_runs(runs)
      logger.info(f"Page {page_num + 1} extracted {len(rows)} lines")
      result.append(rows)
    return result

  def page_texts(self, pdf_bytes: bytes) -> List[str]:
    return ["\n".join(rows) for rows in self.page_rows(pdf_bytes)]

  def document_text(self, pdf_bytes: bytes) -> str:
    """Full document text, each page followed by a newline."""
    return "".join(text + "\n" for text in self.page_texts(pdf_bytes))

  def _runs_with_pdfplumber(self, pdf_bytes: bytes) -> List[List[Tuple[float, str]]]:
    pages = []
    try:
      with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        logger.info(f"PDF loaded: {len(pdf.pages)} pages")
        for page in pdf.pages:
          words = page.extract_words(
            x_tolerance=self.config.x_tolerance,
            keep_blank_chars=True,
            use_text_flow=True,
          )
          # word box bottom (baseline plus descent), measured from the top of the page
          pages.append([(float(page.height) - w["bottom"], w["text"]) for w in words])
    except Exception as e:
      logger.error(f"pdfplumber could not read the document: {e}")
      raise PdfExtractionError(
        "Failed to extract text from PDF. Please make sure the file is a valid PDF."
      ) from e
    return pages

  def _runs_with_pymupdf(self, pdf_bytes: bytes) -> List[List[Tuple[float, str]]]:
    pages = []
    try:
      doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
      logger.error(f"PyMuPDF could not open the document: {e}")
      raise PdfExtractionError(
        "Failed to extract text from PDF. Please make sure the file is a valid PDF."
      ) from e

    with doc:
      if doc.needs_pass:
        raise PdfExtractionError("Failed to extract text from PDF. The file is password protected.")
      logger.info(f"PDF loaded: {doc.page_count} pages")
      try:
        for page in doc:
          height = page.rect.height
          runs = []
          for block in page.get_text("dict")["blocks"]:
            for line in block.get("lines", []):
              for span in line["spans"]:
                # span origin is the baseline start, measured from the top
                runs.append((height - span["origin"][1], span["text"]))
          pages.append(runs)
      except Exception as e:
        logger.error(f"PyMuPDF failed while reading page text: {e}")
        raise PdfExtractionError(
          "Failed to extract text from PDF. Please make sure the file is a valid PDF."
        ) from e
    return pages
