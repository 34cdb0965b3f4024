"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: validators.py
@DateTime: 2026-10-17
@Docs: Per-category validators with checksum rules.
按类别的校验器（含校验码规则）。

Validators are pure functions. A failed check is returned as data, never
raised, so invalid candidates still reach the report for human review.
校验器均为纯函数；校验失败以数据形式返回而不是抛出异常，
以便无效候选仍进入报告供人工复核。
"""

from datetime import date

from sensitive_info_extractor.categories import Category, FailureReason
from sensitive_info_extractor.models import ValidationResult
from sensitive_info_extractor.patterns import BANK_CARD_MAX_DIGITS, BANK_CARD_MIN_DIGITS, clean_digits

ID_WEIGHTS: tuple[int, ...] = (7, 9, 10, 5, 8, 4, 2, 1, 6, 3, 7, 9, 10, 5, 8, 4, 2)
ID_CHECK_CODES: tuple[str, ...] = ("1", "0", "X", "9", "8", "7", "6", "5", "4", "3", "2")

ID_MIN_YEAR = 1900
ID_MAX_YEAR = 2099

PHONE_LENGTH = 11
PHONE_COUNTRY_CODE = "86"


def _invalid(reason: FailureReason, normalized: str | None = None) -> ValidationResult:
    return ValidationResult(is_valid=False, normalized=normalized, reason=reason)


def normalize_phone(raw: str) -> str:
    """Strip separators and a leading 86 country code.
    去除分隔符与开头的 86 国家码。

    Args:
        raw: Raw phone text, e.g. ``+86 138-0013-8000``.
            原始手机号文本，例如 ``+86 138-0013-8000``。
    Returns:
        str: Digits only, country code removed when present.
            仅包含数字，若存在国家码则去除。
    """
    digits = clean_digits(raw)
    if len(digits) == PHONE_LENGTH + len(PHONE_COUNTRY_CODE) and digits.startswith(PHONE_COUNTRY_CODE):
        digits = digits[len(PHONE_COUNTRY_CODE) :]
    return digits


def validate_phone(raw: str) -> ValidationResult:
    """Validate a mainland mobile number.
    校验大陆手机号。

    Valid iff the normalized value has 11 digits, starts with ``1`` and its
    second digit is in ``3..9``.
    规范化后为 11 位数字、以 ``1`` 开头且第二位在 ``3..9`` 之间时有效。

    Args:
        raw: Raw phone text.
            原始手机号文本。
    Returns:
        ValidationResult: Verdict fields.
            校验结论字段。
    """
    digits = normalize_phone(raw)
    if len(digits) != PHONE_LENGTH or digits[0] != "1" or digits[1] not in "3456789":
        return _invalid(FailureReason.BAD_FORMAT, digits or None)
    return ValidationResult(is_valid=True, normalized=digits)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month (0 for an invalid month).
    返回某月天数（月份无效时返回 0）。
    """
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    if month in (4, 6, 9, 11):
        return 30
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return 0


def parse_birth_date(text: str) -> date | None:
    """Parse ``YYYYMMDD`` within the accepted year range.
    在允许的年份范围内解析 ``YYYYMMDD``。

    Args:
        text: Eight digit date string.
            8 位日期字符串。
    Returns:
        date | None: Parsed date, or None when invalid.
            解析后的日期；无效时返回 None。
    """
    if len(text) != 8 or not text.isdigit():
        return None
    year, month, day = int(text[:4]), int(text[4:6]), int(text[6:8])
    if not ID_MIN_YEAR <= year <= ID_MAX_YEAR:
        return None
    if not 1 <= day <= days_in_month(year, month):
        return None
    return date(year, month, day)


def id_check_code(first17: str) -> str:
    """Compute the ID card check character for 17 leading digits.
    根据前 17 位数字计算身份证校验码。

    Args:
        first17: The first 17 digits.
            前 17 位数字。
    Returns:
        str: Expected check character (``0``-``9`` or ``X``).
            期望的校验字符（``0``-``9`` 或 ``X``）。
    Raises:
        ValueError: When the input is not 17 ASCII digits.
            输入不是 17 位数字时抛出。
    """
    if len(first17) != 17 or not first17.isascii() or not first17.isdigit():
        raise ValueError(f"Expected 17 digits, got {first17!r}")
    total = sum(int(d) * w for d, w in zip(first17, ID_WEIGHTS, strict=True))
    return ID_CHECK_CODES[total % 11]


def validate_id_card(raw: str) -> ValidationResult:
    """Validate an 18-character resident ID number.
    校验 18 位居民身份证号。

    Checks, in order: format, region code (non-zero), birth date, checksum.
    依次检查：格式、地区码（非零）、出生日期、校验码。

    Args:
        raw: Raw ID text.
            原始身份证号文本。
    Returns:
        ValidationResult: Verdict fields; ``birth_date`` is set when the date parses.
            校验结论字段；日期可解析时设置 ``birth_date``。
    """
    value = raw.strip().upper()
    first17, check = value[:17], value[17:]
    if len(value) != 18 or not first17.isascii() or not first17.isdigit() or check not in "0123456789X":
        return _invalid(FailureReason.BAD_FORMAT)
    if value[0] == "0" or int(value[:6]) == 0:
        return _invalid(FailureReason.BAD_REGION, value)
    birth = parse_birth_date(value[6:14])
    if birth is None:
        return _invalid(FailureReason.BAD_DATE, value)
    if id_check_code(first17) != check:
        return ValidationResult(
            is_valid=False,
            normalized=value,
            reason=FailureReason.CHECKSUM_MISMATCH,
            birth_date=birth,
        )
    return ValidationResult(is_valid=True, normalized=value, birth_date=birth)


def luhn_check(number: str) -> bool:
    """Run the Luhn checksum over a digit string.
    对数字串执行 Luhn 校验。

    Every second digit from the right is doubled, minus 9 when above 9.
    从右往左每隔一位翻倍，超过 9 则减 9。
    """
    if not number or not number.isascii() or not number.isdigit():
        return False
    total = 0
    for position, ch in enumerate(reversed(number), start=1):
        digit = int(ch)
        if position % 2 == 0:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def validate_bank_card(raw: str) -> ValidationResult:
    """Validate a bank card number with the Luhn algorithm.
    使用 Luhn 算法校验银行卡号。

    Args:
        raw: Raw card text, spaces allowed.
            原始卡号文本（允许空格）。
    Returns:
        ValidationResult: Verdict fields.
            校验结论字段。
    """
    digits = clean_digits(raw)
    if not BANK_CARD_MIN_DIGITS <= len(digits) <= BANK_CARD_MAX_DIGITS:
        return _invalid(FailureReason.BAD_FORMAT, digits or None)
    if not luhn_check(digits):
        return _invalid(FailureReason.LUHN_MISMATCH, digits)
    return ValidationResult(is_valid=True, normalized=digits)


def validate(category: Category, raw: str) -> ValidationResult:
    """Dispatch to the validator of a category.
    分派到对应类别的校验器。
    """
    match category:
        case Category.PHONE:
            return validate_phone(raw)
        case Category.ID_CARD:
            return validate_id_card(raw)
        case Category.BANK_CARD:
            return validate_bank_card(raw)
    raise ValueError(f"Unknown category: {category}")
