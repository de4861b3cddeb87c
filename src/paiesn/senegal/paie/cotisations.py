"""Fonctions de calcul des cotisations sociales salariales.

IPRES (retraite), CSS (securite sociale) et allocations familiales:
chaque cotisation est calculee sur le brut plafonne a son propre plafond.

Toutes les fonctions sont pures (pas d'effets de bord), prennent des Decimal
en entree et retournent des Decimal. Aucun float n'est utilise.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from paiesn.exceptions import ErreurValidation
from paiesn.senegal.bareme import RegleCotisation, TauxCotisations

DEUX_DECIMALES = Decimal("0.01")


def _arrondir(montant: Decimal) -> Decimal:
    """Arrondit au centime pres (ROUND_HALF_UP)."""
    return montant.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Cotisations:
    """Cotisations salariales d'une periode."""

    ipres: Decimal
    css: Decimal
    allocations_familiales: Decimal
    total: Decimal


def calculer_cotisation(salaire_brut: Decimal, regle: RegleCotisation) -> Decimal:
    """Cotisation = min(brut, plafond) * taux, arrondie au centime.

    Raises:
        ErreurValidation: Si le salaire brut est negatif.
    """
    if salaire_brut < Decimal("0"):
        raise ErreurValidation(f"Le salaire brut ne peut pas etre negatif: {salaire_brut}")
    base = min(salaire_brut, regle.plafond)
    return _arrondir(base * regle.taux)


def calculer_cotisations(salaire_brut: Decimal, taux: TauxCotisations) -> Cotisations:
    """Calcule les trois cotisations salariales, chacune plafonnee independamment."""
    ipres = calculer_cotisation(salaire_brut, taux.ipres)
    css = calculer_cotisation(salaire_brut, taux.css)
    allocations = calculer_cotisation(salaire_brut, taux.allocations_familiales)
    return Cotisations(
        ipres=ipres,
        css=css,
        allocations_familiales=allocations,
        total=ipres + css + allocations,
    )
