"""
Currency display helpers for SplitIt

Only presentation lives here. Allocation always works in hundredths of the
base unit, whatever currency is shown.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple

# ISO 3166-1 alpha-2 region -> ISO 4217 currency
REGION_CURRENCY: Dict[str, str] = {
    "US": "USD", "GB": "GBP", "CA": "CAD", "AU": "AUD", "NZ": "NZD",
    "DE": "EUR", "FR": "EUR", "IT": "EUR", "ES": "EUR", "NL": "EUR",
    "BE": "EUR", "AT": "EUR", "PT": "EUR", "IE": "EUR", "FI": "EUR",
    "GR": "EUR", "SK": "EUR", "SI": "EUR", "EE": "EUR", "LV": "EUR",
    "LT": "EUR", "LU": "EUR", "MT": "EUR", "CY": "EUR", "HR": "EUR",
    "CH": "CHF", "SE": "SEK", "NO": "NOK", "DK": "DKK",
    "PL": "PLN", "CZ": "CZK", "HU": "HUF", "RO": "RON",
    "BG": "BGN", "RS": "RSD", "IS": "ISK", "AL": "ALL", "MK": "MKD",
    "RU": "RUB", "UA": "UAH", "TR": "TRY", "BY": "BYN",
    "JP": "JPY", "CN": "CNY", "KR": "KRW", "IN": "INR",
    "ID": "IDR", "TH": "THB", "VN": "VND", "MY": "MYR",
    "PH": "PHP", "SG": "SGD", "HK": "HKD", "TW": "TWD",
    "BD": "BDT", "PK": "PKR", "LK": "LKR", "MM": "MMK",
    "SA": "SAR", "AE": "AED", "QA": "QAR", "KW": "KWD",
    "BH": "BHD", "OM": "OMR", "JO": "JOD", "IQ": "IQD",
    "IR": "IRR", "IL": "ILS", "EG": "EGP", "LB": "LBP",
    "UZ": "UZS", "KZ": "KZT", "AZ": "AZN", "AM": "AMD", "GE": "GEL",
    "MX": "MXN", "BR": "BRL", "AR": "ARS", "CL": "CLP",
    "CO": "COP", "PE": "PEN", "UY": "UYU",
    "ZA": "ZAR", "NG": "NGN", "KE": "KES", "GH": "GHS",
    "TZ": "TZS", "ET": "ETB", "MA": "MAD", "TN": "TND", "DZ": "DZD",
}

ZERO_DECIMAL_CURRENCIES = frozenset({
    "JPY", "KRW", "UZS", "IDR", "VND", "IRR", "MMK",
    "RWF", "BIF", "GNF", "ISK", "PYG", "CLP",
    "IQD", "LBP", "MGA",
})

# narrow symbols; anything missing is shown as its ISO code
_SYMBOLS: Dict[str, str] = {
    "USD": "$", "CAD": "$", "AUD": "$", "NZD": "$", "SGD": "$", "HKD": "$",
    "TWD": "$", "MXN": "$", "ARS": "$", "CLP": "$", "COP": "$", "UYU": "$",
    "EUR": "€", "GBP": "£", "JPY": "¥", "CNY": "¥", "KRW": "₩", "INR": "₹",
    "RUB": "₽", "UAH": "₴", "TRY": "₺", "ILS": "₪", "NGN": "₦", "PHP": "₱",
    "THB": "฿", "VND": "₫", "KZT": "₸", "AZN": "₼", "GEL": "₾", "PLN": "zł",
    "BRL": "R$", "ZAR": "R", "CHF": "CHF", "SEK": "kr", "NOK": "kr",
    "DKK": "kr", "ISK": "kr", "CZK": "Kč", "HUF": "Ft", "RON": "lei",
    "MYR": "RM", "IDR": "Rp", "BDT": "৳", "PKR": "Rs", "LKR": "Rs",
    "EGP": "E£", "PEN": "S/", "GHS": "GH₵", "KES": "KSh", "AMD": "֏",
}

COMMON_CURRENCIES: List[Tuple[str, str]] = [
    ("AED", "UAE Dirham"), ("AMD", "Armenian Dram"), ("ARS", "Argentine Peso"),
    ("AUD", "Australian Dollar"), ("AZN", "Azerbaijani Manat"), ("BDT", "Bangladeshi Taka"),
    ("BGN", "Bulgarian Lev"), ("BHD", "Bahraini Dinar"), ("BRL", "Brazilian Real"),
    ("BYN", "Belarusian Ruble"), ("CAD", "Canadian Dollar"), ("CHF", "Swiss Franc"),
    ("CLP", "Chilean Peso"), ("CNY", "Chinese Yuan"), ("COP", "Colombian Peso"),
    ("CZK", "Czech Koruna"), ("DKK", "Danish Krone"), ("DZD", "Algerian Dinar"),
    ("EGP", "Egyptian Pound"), ("ETB", "Ethiopian Birr"), ("EUR", "Euro"),
    ("GBP", "British Pound"), ("GEL", "Georgian Lari"), ("GHS", "Ghanaian Cedi"),
    ("HKD", "Hong Kong Dollar"), ("HUF", "Hungarian Forint"), ("IDR", "Indonesian Rupiah"),
    ("ILS", "Israeli Shekel"), ("INR", "Indian Rupee"), ("IRR", "Iranian Rial"),
    ("ISK", "Icelandic Krona"), ("JOD", "Jordanian Dinar"), ("JPY", "Japanese Yen"),
    ("KES", "Kenyan Shilling"), ("KRW", "South Korean Won"), ("KWD", "Kuwaiti Dinar"),
    ("KZT", "Kazakhstani Tenge"), ("LKR", "Sri Lankan Rupee"), ("MAD", "Moroccan Dirham"),
    ("MXN", "Mexican Peso"), ("MYR", "Malaysian Ringgit"), ("NGN", "Nigerian Naira"),
    ("NOK", "Norwegian Krone"), ("NZD", "New Zealand Dollar"), ("OMR", "Omani Rial"),
    ("PEN", "Peruvian Sol"), ("PHP", "Philippine Peso"), ("PKR", "Pakistani Rupee"),
    ("PLN", "Polish Zloty"), ("QAR", "Qatari Riyal"), ("RON", "Romanian Leu"),
    ("RUB", "Russian Ruble"), ("SAR", "Saudi Riyal"), ("SEK", "Swedish Krona"),
    ("SGD", "Singapore Dollar"), ("THB", "Thai Baht"), ("TND", "Tunisian Dinar"),
    ("TRY", "Turkish Lira"), ("TWD", "Taiwan Dollar"), ("TZS", "Tanzanian Shilling"),
    ("UAH", "Ukrainian Hryvnia"), ("USD", "US Dollar"), ("UYU", "Uruguayan Peso"),
    ("UZS", "Uzbekistani Som"), ("VND", "Vietnamese Dong"), ("ZAR", "South African Rand"),
]

DEFAULT_CURRENCY = "USD"


def currency_decimals(currency: str) -> int:
    """Number of decimals shown for a currency: 0 or 2"""
    return 0 if currency.upper() in ZERO_DECIMAL_CURRENCIES else 2


def currency_symbol(currency: str) -> str:
    """Display symbol, or the ISO code when there is no short one"""
    code = currency.upper()
    return _SYMBOLS.get(code, code)


def format_amount(value: float, currency: str) -> str:
    """Grouped number with the currency's decimals, e.g. 1,234.50 or 1,235"""
    d = currency_decimals(currency)
    return f"{value:,.{d}f}"


def format_money(value: float, currency: str) -> str:
    """Symbol plus formatted amount, sign in front: -$ 3.50"""
    sign = "-" if round(value, currency_decimals(currency)) < 0 else ""
    return f"{sign}{currency_symbol(currency)} {format_amount(abs(value), currency)}"


def detect_currency(locale_tag: Optional[str]) -> str:
    """
    Guess the currency from a locale tag such as "en_GB", "de-AT" or
    "en_US.UTF-8". Falls back to USD.
    """
    if not locale_tag:
        return DEFAULT_CURRENCY
    tag = locale_tag.split(".", 1)[0].replace("-", "_")
    for part in reversed(tag.split("_")[1:]):
        if len(part) == 2 and part.isalpha():
            return REGION_CURRENCY.get(part.upper(), DEFAULT_CURRENCY)
    return DEFAULT_CURRENCY
