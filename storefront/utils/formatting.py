# storefront/utils/formatting.py
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.utils.settings import CURRENCY_LOCALE

# symbol waluty, separator tysiecy
CURRENCY_LOCALES = {
    "id_ID": ("Rp", "."),
    "en_US": ("$", ","),
    "de_DE": ("€", "."),
}


def _to_decimal(value) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def format_currency(value, locale: str | None = None) -> str:
    """
    Kwota bez czesci ulamkowej z grupowaniem tysiecy, np. 150000 -> "Rp150.000".
    Wartosc nieliczbowa daje zero zamiast wyjatku.
    """
    symbol, group = CURRENCY_LOCALES.get(locale or CURRENCY_LOCALE, CURRENCY_LOCALES["id_ID"])
    amount = _to_decimal(value)
    if amount is None:
        amount = Decimal(0)

    # to_integral_value nie ma limitu precyzji kontekstu, quantize ma (28 cyfr)
    rounded = int(amount.to_integral_value(rounding=ROUND_HALF_UP))
    digits = f"{abs(rounded):,}".replace(",", group)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{digits}"


def format_weight(grams) -> str:
    """
    Gramy ponizej 1000, powyzej kilogramy z dwoma miejscami: 1500 -> "1.50 kg".
    Ulamkowe gramy zostaja bez zaokraglania: 999.5 -> "999.5 g".
    """
    weight = _to_decimal(grams)
    if weight is None:
        return "0 g"

    if weight >= 1000:
        return f"{weight / 1000:.2f} kg"
    return f"{weight.normalize():f} g"


def format_datetime(value) -> str:
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value))
        except (TypeError, ValueError):
            return "-"
    return moment.strftime("%d %b %Y %H:%M")
