"""
Tipos compartidos por los esquemas Pydantic de Inkwell.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

CENT = Decimal("0.01")

# Importes monetarios: Decimal en memoria, número en JSON.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def to_money(value) -> Decimal:
    """Convierte un precio recibido (float, int, str o Decimal) a Decimal sin ruido binario."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
