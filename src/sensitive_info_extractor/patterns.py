"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: patterns.py
@DateTime: 2026-10-17
@Docs: Lexical matchers for phone, ID card and bank card numbers.
手机号、身份证号、银行卡号的词法匹配器。

Matching is purely lexical. Whether a candidate is correct is decided by
``validators``. Each category is scanned independently, so one text may
yield overlapping candidates from different categories.
匹配仅基于词法；候选值是否正确由 ``validators`` 判定。
各类别独立扫描，同一文本可能得到不同类别的重叠候选。
"""

import re
from collections.abc import Callable, Iterable

from sensitive_info_extractor.categories import CATEGORY_ORDER, Category
from sensitive_info_extractor.models import CandidateMatch

NON_DIGIT = re.compile(r"\D")

# Optional +86/86 prefix, then 1[3-9]X XXXX XXXX with optional "-", " " or "." between groups.
PHONE_PATTERN = re.compile(
    r"(?<!\d)"
    r"(?:\+?86[-. ]?)?"
    r"1[3-9]\d"
    r"[-. ]?\d{4}"
    r"[-. ]?\d{4}"
    r"(?!\d)"
)

ID_CARD_PATTERN = re.compile(r"(?<!\d)\d{17}[\dXx](?![\dXx])")

# Either a plain run or groups of four separated by single spaces. The grouped
# forms cap the tail so the whole match never exceeds 19 digits.
BANK_CARD_PATTERN = re.compile(
    r"(?<!\d)"
    r"(?:\d{13,19}"
    r"|\d{4}(?: \d{4}){3}(?: \d{1,3})?"
    r"|\d{4}(?: \d{4}){2}(?: \d{1,4})?)"
    r"(?!\d)"
)

BANK_CARD_MIN_DIGITS = 13
BANK_CARD_MAX_DIGITS = 19


def clean_digits(text: str) -> str:
    """Strip every non-digit character.
    去除所有非数字字符。
    """
    return NON_DIGIT.sub("", text)


def _spans(pattern: re.Pattern[str], text: str) -> list[tuple[str, int, int]]:
    return [(m.group(), m.start(), m.end()) for m in pattern.finditer(text)]


def find_phone_spans(text: str) -> list[tuple[str, int, int]]:
    """Find phone-like spans.
    查找疑似手机号片段。

    The optional country prefix is consumed greedily, so the longest match at a
    start position wins and matches never overlap.
    可选国家码前缀被贪婪匹配，同一起点取最长匹配且匹配之间互不重叠。

    Args:
        text: Text to scan.
            待扫描文本。
    Returns:
        list[tuple[str, int, int]]: ``(raw, start, end)`` triples.
            ``(原文, 起始, 结束)`` 三元组列表。
    """
    return _spans(PHONE_PATTERN, text)


def find_id_card_spans(text: str) -> list[tuple[str, int, int]]:
    """Find 18-character ID-card-like spans.
    查找 18 位疑似身份证号片段。
    """
    return _spans(ID_CARD_PATTERN, text)


def find_bank_card_spans(text: str) -> list[tuple[str, int, int]]:
    """Find bank-card-like spans of 13 to 19 digits.
    查找 13 到 19 位的疑似银行卡号片段。

    Space-grouped runs are accepted when the digit count stays in range.
    按空格分组的号码在数字位数符合范围时同样接受。
    """
    spans: list[tuple[str, int, int]] = []
    for raw, start, end in _spans(BANK_CARD_PATTERN, text):
        digits = clean_digits(raw)
        if BANK_CARD_MIN_DIGITS <= len(digits) <= BANK_CARD_MAX_DIGITS:
            spans.append((raw, start, end))
    return spans


_FINDERS: dict[Category, Callable[[str], list[tuple[str, int, int]]]] = {
    Category.PHONE: find_phone_spans,
    Category.ID_CARD: find_id_card_spans,
    Category.BANK_CARD: find_bank_card_spans,
}


def find_candidates(
    text: str,
    enabled_categories: Iterable[Category],
    *,
    row_index: int = 0,
    column_index: int = 0,
    file_id: str = "",
    sheet: str = "",
) -> list[CandidateMatch]:
    """Scan text for candidates of every enabled category.
    按已启用类别扫描文本中的候选值。

    Args:
        text: Cell text.
            单元格文本。
        enabled_categories: Categories to scan for.
            需要扫描的类别。
        row_index: Source row index.
            源行索引。
        column_index: Source column index.
            源列索引。
        file_id: Source file identifier.
            源文件标识。
        sheet: Source sheet name.
            源工作表名称。
    Returns:
        list[CandidateMatch]: Candidates ordered by start offset, end offset, category.
            按起始偏移、结束偏移、类别排序的候选列表。
    """
    if not text:
        return []
    enabled = set(enabled_categories)
    found: list[CandidateMatch] = []
    for category in CATEGORY_ORDER:
        if category not in enabled:
            continue
        for raw, start, end in _FINDERS[category](text):
            found.append(
                CandidateMatch(
                    category=category,
                    text=raw,
                    start=start,
                    end=end,
                    row_index=row_index,
                    column_index=column_index,
                    file_id=file_id,
                    sheet=sheet,
                )
            )
    found.sort(key=lambda c: (c.start, c.end, CATEGORY_ORDER.index(c.category)))
    return found
