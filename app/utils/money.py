"""Utilidades de montos.

Money helpers. Aggregates come back from the driver as Decimal, float or
None depending on the backend; every amount is normalized to a Decimal
with two decimals.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENTAVOS: Decimal = Decimal("0.01")
CERO: Decimal = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Convierte un valor a Decimal con 2 decimales, None cuenta como 0.

    Args:
        value: Valor de la base de datos (Value from the database or request)

    Returns:
        Decimal: Monto redondeado a centavos (Amount rounded to cents)
    """
    if value is None:
        return CERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTAVOS, rounding=ROUND_HALF_UP)
