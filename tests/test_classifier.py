import unittest

from statementextractor.classifier import (
  CATEGORY_RULES,
  EXPENSE,
  REVENUE,
  classify,
  detect_category,
  is_revenue,
)


class RevenueTest(unittest.TestCase):
  def test_keywords(self):
    for merchant in [
      'Zelle From Adrian Hernandez on 10/27',
      'ONLINE PAYMENT THANK YOU',
      'Amazon refund',
      'Direct Deposit ACME PAYROLL',
      'Venmo from J Doe',
    ]:
      with self.subTest(merchant=merchant):
        self.assertTrue(is_revenue(merchant))

  def test_credit_flag_overrides_keywords(self):
    self.assertFalse(is_revenue('CORNER BAKERY'))
    self.assertTrue(is_revenue('CORNER BAKERY', is_credit=True))
    self.assertEqual(classify('CORNER BAKERY', is_credit=True), (REVENUE, ''))

  def test_revenue_never_categorized(self):
    # matches both a revenue keyword and the Office Supplies keywords
    self.assertEqual(classify('AMAZON REFUND'), (REVENUE, ''))


class CategoryTest(unittest.TestCase):
  def test_amazon_prime_is_entertainment(self):
    self.assertEqual(detect_category('AMAZON PRIME'), 'Entertainment')
    self.assertEqual(detect_category('Amazon Prime*2K4LL0 Amzn.com/bill'), 'Entertainment')
    self.assertEqual(detect_category('AMAZON MKTPL NF2LF3661 Amzn.com/bill WA'), 'Office Supplies')

  def test_prime_rule_precedes_amazon_rule(self):
    labels = [label for _, label in CATEGORY_RULES]
    self.assertLess(labels.index('Entertainment'), labels.index('Office Supplies'))

  def test_table_samples(self):
    for merchant, category in [
      ('WPENGINE INC', 'Web Hosting'),
      ('DNH*GODADDY.COM', 'Web Hosting'),
      ('CLAUDE.AI SUBSCRIPTION', 'Software'),
      ('GOOGLE *YouTubePremium', 'Software'),
      ('IN-N-OUT BURGER #123', 'Meals'),
      ('HILTON GARDEN INN', 'Travel / Lodge'),
      ('TARGET 00012345', 'Groceries'),
      ('UBER *TRIP', 'Transportation'),
      ('T-MOBILE AUTOPAY', 'Utilities'),
      ('NORDSTROM RACK', 'Other'),
      ('LOCAL HARDWARE STORE', ''),
    ]:
      with self.subTest(merchant=merchant):
        self.assertEqual(detect_category(merchant), category)

  def test_expense_classification(self):
    self.assertEqual(classify('LYFT RIDE'), (EXPENSE, 'Transportation'))
    self.assertEqual(classify('UNKNOWN VENDOR'), (EXPENSE, ''))


if __name__ == '__main__':
  unittest.main()
