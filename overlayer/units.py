from decimal import Decimal, InvalidOperation, Overflow, Underflow, localcontext
from typing import Union

MAX_UINT256 = 2**256 - 1


def parse_units(value: Union[str, int, Decimal], decimals: int = 18) -> int:
    """Converts a decimal amount (e.g. "1.5") into integer base units."""
    text = str(value).strip()
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Invalid decimal amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid decimal amount: {value!r}")

    with localcontext() as ctx:
        ctx.prec = 200
        ctx.traps[Underflow] = True
        try:
            scaled = amount.scaleb(decimals)
        except (Overflow, Underflow):
            raise ValueError(f"Amount out of range: {value!r}")
        if scaled != scaled.to_integral_value():
            raise ValueError(f"Too many decimals for {decimals}-decimal unit: {value!r}")
        return int(scaled)


def format_units(value: int, decimals: int = 18) -> str:
    """Formats integer base units as a decimal string, always with a fractional part."""
    value = int(value)
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10**decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_text}"


def parse_ether(value: Union[str, int, Decimal]) -> int:
    return parse_units(value, 18)


def format_ether(value: int) -> str:
    return format_units(value, 18)
