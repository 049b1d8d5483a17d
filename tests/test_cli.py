import io
import os
import json
import tempfile
import unittest
from contextlib import redirect_stdout

import pandas as pd

from statementextractor.__main__ import main
from tests.pdf_fixtures import make_statement_pdf


class CliTest(unittest.TestCase):
  def setUp(self):
    self.tmp = tempfile.TemporaryDirectory()
    self.pdf_path = os.path.join(self.tmp.name, 'october.pdf')
    with open(self.pdf_path, 'wb') as f:
      f.write(make_statement_pdf([['10/10 CAFE LUNA 8.75', '10/11 UBER *TRIP 12.50']]))

  def tearDown(self):
    self.tmp.cleanup()

  def test_json_output(self):
    out = io.StringIO()
    with redirect_stdout(out):
      status = main([self.pdf_path])
    self.assertEqual(status, 0)
    records = json.loads(out.getvalue())
    self.assertEqual([r['merchant'] for r in records], ['CAFE LUNA', 'UBER TRIP'])
    self.assertEqual(records[0]['source_file'], 'october.pdf')

  def test_csv_output(self):
    csv_path = os.path.join(self.tmp.name, 'out.csv')
    self.assertEqual(main([self.pdf_path, '--output', csv_path, '--engine', 'pymupdf']), 0)
    df = pd.read_csv(csv_path)
    self.assertEqual(len(df), 2)
    self.assertEqual(list(df['category']), ['Meals', 'Transportation'])

  def test_text_dump(self):
    out = io.StringIO()
    with redirect_stdout(out):
      main([self.pdf_path, '--text'])
    self.assertIn('10/10 CAFE LUNA 8.75\n10/11 UBER *TRIP 12.50', out.getvalue())

  def test_bad_file_sets_exit_status(self):
    bad_path = os.path.join(self.tmp.name, 'broken.pdf')
    with open(bad_path, 'wb') as f:
      f.write(b'garbage')
    out = io.StringIO()
    with redirect_stdout(out):
      status = main([bad_path, self.pdf_path])
    self.assertEqual(status, 1)
    self.assertEqual(len(json.loads(out.getvalue())), 2)

  def test_missing_file_is_skipped(self):
    out = io.StringIO()
    with redirect_stdout(out):
      status = main([os.path.join(self.tmp.name, 'missing.pdf'), self.pdf_path])
    self.assertEqual(status, 1)
    self.assertEqual([r['merchant'] for r in json.loads(out.getvalue())], ['CAFE LUNA', 'UBER TRIP'])

  def test_text_ignores_output(self):
    csv_path = os.path.join(self.tmp.name, 'out.csv')
    out = io.StringIO()
    with redirect_stdout(out), self.assertLogs('statementextractor', level='WARNING') as logs:
      main([self.pdf_path, '--text', '--output', csv_path])
    self.assertFalse(os.path.exists(csv_path))
    self.assertIn('--output is ignored', logs.output[0])


if __name__ == '__main__':
  unittest.main()
