"""Calcul de l'impot sur le revenu selon le bareme progressif senegalais.

Methode par tranches:
1. Parcourir les tranches dans l'ordre croissant
2. Une tranche est atteinte si le revenu depasse strictement son minimum
3. Portion imposable = min(revenu, maximum) - minimum, arrondie par tranche
4. Impot = montant fixe de la plus haute tranche atteinte + impot marginal

Le montant fixe de chaque tranche egale la somme arrondie des tranches
inferieures (verifie au chargement du bareme), donc l'impot calcule est
identique a la somme des impots par tranche.

Toutes les valeurs sont en Decimal -- jamais de float.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from paiesn.senegal.bareme import BaremeAnnuel, TrancheImposition

logger = logging.getLogger(__name__)

DEUX_DECIMALES = Decimal("0.01")
MOIS_PAR_ANNEE = 12


def _arrondir(montant: Decimal) -> Decimal:
    """Arrondit au centime pres (ROUND_HALF_UP)."""
    return montant.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TrancheAppliquee:
    """Ligne de la ventilation de l'impot: une tranche et sa portion imposee."""

    tranche: TrancheImposition
    base_imposable: Decimal
    impot: Decimal


def ventiler_impot_revenu(
    montant_annuel: Decimal, bareme: BaremeAnnuel
) -> tuple[TrancheAppliquee, ...]:
    """Retourne le detail de l'impot par tranche atteinte.

    Un revenu nul, negatif ou sous le seuil d'imposition donne une
    ventilation vide.
    """
    if montant_annuel <= Decimal("0") or montant_annuel <= bareme.seuil_imposition:
        return ()

    lignes = []
    for tranche in bareme.tranches_impot:
        if montant_annuel <= tranche.minimum:
            break
        base = min(montant_annuel, tranche.maximum) - tranche.minimum
        lignes.append(
            TrancheAppliquee(
                tranche=tranche,
                base_imposable=base,
                impot=_arrondir(base * tranche.taux),
            )
        )
    return tuple(lignes)


def calculer_impot_revenu(montant_annuel: Decimal, bareme: BaremeAnnuel) -> Decimal:
    """Calcule l'impot annuel sur un revenu imposable annuel.

    Args:
        montant_annuel: Revenu imposable annuel en XOF.
        bareme: Bareme de l'annee (tranches et seuil d'imposition).

    Returns:
        Impot annuel arrondi au centime (>= 0).
    """
    lignes = ventiler_impot_revenu(montant_annuel, bareme)
    if not lignes:
        return Decimal("0")

    derniere = lignes[-1]
    impot = derniere.tranche.montant_fixe + derniere.impot
    logger.debug(
        "Impot annuel sur %s: %s (tranche a %s%%)",
        montant_annuel,
        impot,
        derniere.tranche.taux * 100,
    )
    return _arrondir(impot)


def calculer_impot_mensuel(brut_mensuel: Decimal, bareme: BaremeAnnuel) -> Decimal:
    """Impot mensuel: le brut est annualise (x 12), impose, puis ramene au mois."""
    if brut_mensuel <= Decimal("0"):
        return Decimal("0")
    impot_annuel = calculer_impot_revenu(brut_mensuel * MOIS_PAR_ANNEE, bareme)
    return _arrondir(impot_annuel / MOIS_PAR_ANNEE)
