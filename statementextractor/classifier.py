"""Revenue detection and expense categorization by merchant keywords.

Both tables are ordered tuples: the first matching entry wins, so more
specific keywords ("AMAZON PRIME") have to sit above the general ones
("AMAZON") they overlap with.
"""

import logging
from typing import NamedTuple, Sequence, Tuple

logger = logging.getLogger(__name__)

REVENUE = "revenue"
EXPENSE = "expense"

REVENUE_KEYWORDS: Tuple[str, ...] = (
  "PAYMENT",
  "CREDIT",
  "REFUND",
  "RETURN",
  "CASH BACK",
  "CASHBACK",
  "REWARD",
  "DEPOSIT",
  "REIMBURSEMENT",
  "REVERSAL",
  "ADJUSTMENT",
  "STATEMENT CREDIT",
  "ZELLE FROM",
  "VENMO FROM",
  "PAYPAL FROM",
  "WIRE FROM",
  "ACH CREDIT",
  "DIRECT DEPOSIT",
  "TRANSFER FROM",
)

CATEGORY_RULES: Tuple[Tuple[Sequence[str], str], ...] = (
  (("WPENGINE", "DNHGODADDY", "GODADDY"), "Web Hosting"),
  (("CLAUDE.AI", "ANTHROPIC", "SPOTIFY", "NETFLIX", "GOOGLE", "YOUTUBE"), "Software"),
  (("AMAZON PRIME",), "Entertainment"),
  (("AMAZON", "WALMART", "APPLE.COM", "HOME DEPOT", "BESTBUY", "IKEA"), "Office Supplies"),
  (("GRILL", "BURGER", "TST BOSSA NOVA", "BAKERY", "CAFE", "IN-N-OUT",
    "RESTAURANT", "RESTAURANTE", "PARFOGO", "SUSHI"), "Meals"),
  (("EXPEDIA", "HILTON", "AMERICAN AIR", "UNITED", "DELTA", "COPA",
    "HOTEL", "HOSTEL", "AIRBNB"), "Travel / Lodge"),
  (("TARGET", "SMART AND FINAL", "SMART&FINAL"), "Groceries"),
  (("UBER", "LYFT"), "Transportation"),
  (("ATTBILL", "T-MOBILE", "TMOBILE", "AT&T"), "Utilities"),
  (("ROSS", "MARSHALLS", "NORDSTROM"), "Other"),
)


class Classification(NamedTuple):
  type: str
  category: str


def is_revenue(merchant: str, is_credit: bool = False) -> bool:
  if is_credit:
    return True
  upper = merchant.upper()
  return any(keyword in upper for keyword in REVENUE_KEYWORDS)


def detect_category(merchant: str) -> str:
  """Best-guess expense category, or '' to leave it for manual assignment."""
  upper = merchant.upper()
  for keywords, category in CATEGORY_RULES:
    for keyword in keywords:
      if keyword in upper:
        logger.debug(f"Auto-detected category: {merchant} -> {category}")
        return category
  return ""


def classify(merchant: str, is_credit: bool = False) -> Classification:
  if is_revenue(merchant, is_credit):
    return Classification(REVENUE, "")
  return Classification(EXPENSE, detect_category(merchant))
