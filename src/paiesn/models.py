"""Types Pydantic partages par les modeles d'entree du moteur."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field


def _rejeter_float(v: Any) -> Any:
    """Refuse les float pour forcer l'utilisation de Decimal, int ou str."""
    if isinstance(v, float):
        raise ValueError(
            "Les montants doivent etre Decimal, int ou str, jamais float. "
            "Utilisez Decimal('100.00') ou '100.00'."
        )
    return v


MontantDecimal = Annotated[Decimal, BeforeValidator(_rejeter_float)]

# Montant ou nombre d'heures >= 0
MontantPositif = Annotated[Decimal, BeforeValidator(_rejeter_float), Field(ge=0)]
