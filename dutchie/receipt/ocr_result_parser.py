"""Parse raw OCR text into a strategy-independent ReceiptExtraction."""

from dutchie.domain.receipt import (
    EXTRACTION_STRATEGIES,
    ExtractedItem,
    ExtractionStrategy,
    OcrResult,
    ReceiptExtraction,
)

from .line_rules import DEFAULT_LINE_RULES, LineRules
from .ocr_helpers import rebuild_text
from .ocr_parser import extract_items_with_names, extract_prices_only


def parse_receipt_text(
    text: str,
    strategy: ExtractionStrategy,
    rules: LineRules = DEFAULT_LINE_RULES,
) -> ReceiptExtraction:
    """
    Run the caller-chosen extraction strategy over OCR text.

    ``prices_only`` returns unnamed items (named by position when they join a
    receipt group); ``itemized`` returns named items. No strategy is inferred.
    """
    if strategy == "prices_only":
        prices = extract_prices_only(text, rules)
        return ReceiptExtraction(
            strategy=strategy,
            items=[ExtractedItem(price=price) for price in prices.prices],
            subtotal=prices.subtotal,
            tax=prices.tax,
            total=prices.total,
        )
    if strategy == "itemized":
        itemized = extract_items_with_names(text, rules)
        return ReceiptExtraction(
            strategy=strategy,
            items=list(itemized.items),
            subtotal=itemized.subtotal,
            tax=itemized.tax,
            total=itemized.total,
        )
    raise ValueError(f"Unknown extraction strategy {strategy!r}; expected one of {', '.join(EXTRACTION_STRATEGIES)}")


def parse_ocr_result(
    ocr_result: OcrResult,
    strategy: ExtractionStrategy,
    *,
    use_words: bool = False,
    rules: LineRules = DEFAULT_LINE_RULES,
) -> ReceiptExtraction:
    """
    Parse an OCR collaborator result.

    With ``use_words`` the lines are rebuilt from word positions instead of
    trusting the line breaks in ``ocr_result.text``; without words the raw text
    is used either way.
    """
    text = ocr_result.text
    if use_words and ocr_result.words:
        text = rebuild_text(ocr_result.words, rules.y_tolerance)
    return parse_receipt_text(text, strategy, rules)
