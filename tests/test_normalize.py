import unittest
from dataclasses import dataclass
from datetime import date

from statementextractor.normalize import deduplicate, normalize_date, parse_amount

TODAY = date(2025, 11, 2)


@dataclass
class Row:
  transaction_date: str
  merchant: str
  amount: float
  tag: str = ''


class NormalizeDateTest(unittest.TestCase):
  def test_formats(self):
    for text, expected in [
      ('10/27', '2025-10-27'),
      ('1/5', '2025-01-05'),
      ('3/7/24', '2024-03-07'),
      ('12/31/2023', '2023-12-31'),
      ('02/29/2024', '2024-02-29'),
    ]:
      with self.subTest(text=text):
        self.assertEqual(normalize_date(text, TODAY), expected)

  def test_unparseable_falls_back_to_today(self):
    for text in ['', 'garbage', '10/27/123', '13/45', '02/30/2023', '1/2/3/4']:
      with self.subTest(text=text):
        self.assertEqual(normalize_date(text, TODAY), '2025-11-02')


class ParseAmountTest(unittest.TestCase):
  def test_thousands_separators(self):
    self.assertEqual(parse_amount('9,372.34'), 9372.34)
    self.assertEqual(parse_amount('38.40'), 38.4)


class DeduplicateTest(unittest.TestCase):
  def test_first_occurrence_wins(self):
    rows = [
      Row('2025-10-10', 'AMAZON', 38.4, 'first'),
      Row('2025-10-11', 'UBER', 12.5),
      Row('2025-10-10', 'AMAZON', 38.4, 'second'),
      Row('2025-10-10', 'AMAZON', 38.41),
      Row('2025-10-12', 'AMAZON', 38.4),
    ]
    unique = deduplicate(rows)
    self.assertEqual(len(unique), 4)
    self.assertIs(unique[0], rows[0])
    self.assertEqual([r.merchant for r in unique], ['AMAZON', 'UBER', 'AMAZON', 'AMAZON'])
    keys = {(r.transaction_date, r.merchant, r.amount) for r in unique}
    self.assertEqual(len(keys), len(unique))

  def test_empty(self):
    self.assertEqual(deduplicate([]), [])


if __name__ == '__main__':
  unittest.main()
