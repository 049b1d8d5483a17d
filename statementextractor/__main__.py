import os
import sys
import json
import logging
import argparse

import pandas as pd

from .extractor import StatementExtractor, to_dataframe
from .page_text import ENGINES, PdfExtractionError, ReconstructorConfig

logger = logging.getLogger("statementextractor")


def main(argv=None):
  parser = argparse.ArgumentParser(description='Extract candidate transactions from statement PDFs')
  parser.add_argument('pdfs', nargs='+', help='Input PDF files')
  parser.add_argument('--output', help='Output CSV file (prints JSON when omitted)')
  parser.add_argument('--engine', choices=ENGINES, default='pdfplumber', help='PDF text engine')
  parser.add_argument('--text', action='store_true', help='Print the reconstructed text instead of transactions')
  parser.add_argument('--show-skipped', action='store_true', help='List amount-bearing lines that were not matched')
  parser.add_argument('--verbose', action='store_true', help='Debug logging')
  args = parser.parse_args(argv)

  logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s | %(message)s")

  if args.text and args.output:
    logger.warning("--output is ignored with --text, the text is printed instead")

  extractor = StatementExtractor(ReconstructorConfig(engine=args.engine))
  frames = []
  records = []
  failed = False

  for path in args.pdfs:
    name = os.path.basename(path)
    try:
      with open(path, 'rb') as f:
        data = f.read()
    except OSError as e:
      logger.error(f"{name}: could not read file: {e}")
      failed = True
      continue

    try:
      if args.text:
        print(extractor.reconstructor.document_text(data))
        continue
      result = extractor.extract_with_report(data)
    except PdfExtractionError as e:
      logger.error(f"{name}: {e}")
      failed = True
      continue

    if result.is_empty:
      logger.warning(f"{name}: no transactions found, the file may be scanned")

    if args.show_skipped:
      for line in result.skipped_lines:
        logger.info(f"{name}:{line.line_number} skipped ({line.reason}): {line.text}")

    df = to_dataframe(result.transactions)
    df['source_file'] = name
    frames.append(df)
    records.extend(dict(t.to_dict(), source_file=name) for t in result.transactions)

  if args.output and not args.text:
    combined = pd.concat(frames, ignore_index=True) if frames else to_dataframe([])
    combined.to_csv(args.output, index=False)
    logger.info(f"Wrote {len(combined)} transactions to {args.output}")
  elif not args.text:
    print(json.dumps(records, indent=2))

  return 1 if failed else 0


if __name__ == '__main__':
  sys.exit(main())
