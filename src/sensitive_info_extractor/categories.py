"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: categories.py
@DateTime: 2026-10-17
@Docs: Sensitive data categories and failure reasons.
敏感信息类别与校验失败原因。
"""

from enum import StrEnum


class Category(StrEnum):
    """Sensitive data categories.
    敏感信息类别。
    """

    PHONE = "phone"
    ID_CARD = "id_card"
    BANK_CARD = "bank_card"


class FailureReason(StrEnum):
    """Why a candidate failed validation.
    候选值校验失败的原因。
    """

    BAD_FORMAT = "BadFormat"
    BAD_REGION = "BadRegion"
    BAD_DATE = "BadDate"
    CHECKSUM_MISMATCH = "ChecksumMismatch"
    LUHN_MISMATCH = "LuhnMismatch"


# Scan and report order within a cell when spans start at the same offset.
CATEGORY_ORDER: tuple[Category, ...] = (Category.PHONE, Category.ID_CARD, Category.BANK_CARD)

ALL_CATEGORIES: frozenset[Category] = frozenset(CATEGORY_ORDER)

_LABELS: dict[Category, str] = {
    Category.PHONE: "手机号",
    Category.ID_CARD: "身份证号",
    Category.BANK_CARD: "银行卡号",
}

_REASON_LABELS: dict[FailureReason, str] = {
    FailureReason.BAD_FORMAT: "格式错误",
    FailureReason.BAD_REGION: "地区码无效",
    FailureReason.BAD_DATE: "出生日期无效",
    FailureReason.CHECKSUM_MISMATCH: "校验码不匹配",
    FailureReason.LUHN_MISMATCH: "Luhn 校验失败",
}


def label_for(category: Category | str) -> str:
    """Return the display label for a category.
    返回类别的显示名称。

    Args:
        category: Category or its string value.
            类别或其字符串值。
    Returns:
        str: Display label.
            显示名称。
    """
    return _LABELS[Category(category)]


def reason_label(reason: FailureReason | str | None) -> str:
    """Return the display label for a failure reason (empty for None).
    返回失败原因的显示名称（None 时为空字符串）。
    """
    if reason is None:
        return ""
    return _REASON_LABELS[FailureReason(reason)]


def parse_categories(values: list[str] | tuple[str, ...]) -> frozenset[Category]:
    """Parse category values, accepting names or values case-insensitively.
    解析类别取值，大小写不敏感地接受名称或值。

    Args:
        values: Raw category strings.
            原始类别字符串。
    Returns:
        frozenset[Category]: Parsed categories.
            解析后的类别集合。
    Raises:
        ValueError: When a value is not a known category.
            取值不是已知类别时抛出。
    """
    parsed: set[Category] = set()
    for raw in values:
        item = str(raw).strip().lower()
        if not item:
            continue
        for member in Category:
            if item == member.value or item == member.name.lower():
                parsed.add(member)
                break
        else:
            raise ValueError(f"Unknown category: {raw}")
    return frozenset(parsed)
