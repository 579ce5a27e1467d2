# utils/normalize_data.py

from decimal import Decimal, InvalidOperation


def normalize_symbol(symbol: str) -> str:
    """
    Normalize trading symbol for exchange requests.
    - Removes spaces, slashes and dashes
    - Converts to uppercase

    Args:
        symbol (str): raw symbol like "btcusdt", "BTC/USDT", "btc usdt"

    Returns:
        str: normalized symbol (e.g., "BTCUSDT")
    """
    if not symbol:
        return ""
    return symbol.strip().replace(" ", "").replace("/", "").replace("-", "").upper()


def to_decimal(value) -> Decimal:
    """
    Coerce str / int / float / Decimal into a finite Decimal.

    Floats go through str() so 49999.99 stays 49999.99 instead of its
    binary expansion.

    Raises:
        ValueError: for None, booleans, non-numeric strings, NaN or infinity.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def format_price(value) -> str:
    """Human-readable price: 2 decimals from 1 upwards, up to 8 below."""
    if value is None:
        return "N/A"
    try:
        dec = to_decimal(value)
    except ValueError:
        return str(value)
    if abs(dec) >= 1:
        return f"{dec:,.2f}"
    text = f"{dec:.8f}".rstrip("0")
    return text + "0" if text.endswith(".") else text
