"""Money token recognition and normalization for OCR receipt lines."""

import re
from decimal import Decimal, InvalidOperation

from dutchie.domain.amounts import round_cents

# An amount with exactly two decimals, optionally "$"-prefixed, with an optional
# trailing sign/marker ("-", "−", "*", "."), or the same amount in parentheses.
MONEY_TOKEN_PATTERN = re.compile(
    r"\(\s*\$?\s*\d+[.,]\d{2}\s*\)"
    r"|(?<![\d.,])(?:\$\s*)?\d+[.,]\d{2}(?!\d)(?:\s*[-−*]|\.(?!\d))?"
)

# A line that is nothing but an amount, optionally with a trailing discount "-".
MONEY_LINE_PATTERN = re.compile(r"^\d+\.\d{2}-?$")

VALID_AMOUNT = re.compile(r"^\d+\.\d{2}$")

# OCR letter/digit confusions inside amounts.
OCR_DIGIT_CONFUSIONS = str.maketrans({"O": "0", "o": "0", "I": "1", "l": "1"})


def find_money_tokens(line: str) -> list[str]:
    """Return every money-shaped substring of a line, left to right."""
    if not line:
        return []
    return [match.group(0) for match in MONEY_TOKEN_PATTERN.finditer(line)]


def normalize_money_token(raw: str) -> str:
    """
    Apply the OCR clean-up rules to a raw token, in order.

    1. drop whitespace, 2. drop a leading "$" (also just inside "("),
    3. first comma becomes the decimal point, 4. Unicode minus becomes "-",
    5. O/o -> 0 and I/l -> 1, 6. drop one trailing "." or "*".
    """
    token = re.sub(r"\s+", "", raw)
    token = re.sub(r"^(\(?)\$", r"\1", token)
    token = token.replace(",", ".", 1)
    token = token.replace("−", "-")
    token = token.translate(OCR_DIGIT_CONFUSIONS)
    token = re.sub(r"[.*]$", "", token)
    return token


def parse_money(raw: str) -> Decimal | None:
    """
    Parse a raw token into a signed Decimal.

    A trailing "-" or wrapping parentheses mean a negative amount (discount).
    Anything that is not exactly ``digits.dd`` after normalization yields None,
    never zero.
    """
    if not raw:
        return None
    token = normalize_money_token(raw)

    negative = False
    if token.endswith("-"):
        negative = True
        token = token[:-1]
    if token.startswith("(") and token.endswith(")"):
        negative = True
        token = token[1:-1]

    if not VALID_AMOUNT.match(token):
        return None
    try:
        value = Decimal(token)
    except InvalidOperation:
        return None
    return -value if negative else value


def is_money_line(line: str) -> bool:
    """True if the whole line is a single amount such as "12.89" or "2.00-"."""
    return MONEY_LINE_PATTERN.match(line.strip()) is not None


def money_from_line(line: str) -> Decimal | None:
    """Signed amount of a pure money line, else None."""
    text = line.strip()
    if not MONEY_LINE_PATTERN.match(text):
        return None
    if text.endswith("-"):
        return -Decimal(text[:-1])
    return Decimal(text)


def last_money_value(line: str) -> Decimal | None:
    """Rightmost parseable amount on a line, rounded to cents."""
    for token in reversed(find_money_tokens(line)):
        value = parse_money(token)
        if value is not None:
            return round_cents(value)
    return None


def first_money_value(line: str) -> Decimal | None:
    """Leftmost parseable amount on a line, rounded to cents."""
    for token in find_money_tokens(line):
        value = parse_money(token)
        if value is not None:
            return round_cents(value)
    return None
