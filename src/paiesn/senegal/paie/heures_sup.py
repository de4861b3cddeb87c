"""Calcul des heures supplementaires et des primes de rendement.

Quatre categories d'heures, chacune avec sa majoration:
- normales (jours ouvrables): 125 %
- nuit (22h-6h): 150 %
- week-end: 150 %
- jours feries: 200 %

Chaque categorie est arrondie au centime avant l'addition. Les plafonds
legaux (20 h par semaine, 130 h par an) sont indicatifs: un depassement
est journalise et signale, jamais bloque ni retranche du salaire.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from paiesn.exceptions import ErreurValidation
from paiesn.models import MontantDecimal, MontantPositif
from paiesn.senegal.bareme import TauxHeuresSup

logger = logging.getLogger(__name__)

DEUX_DECIMALES = Decimal("0.01")


def _arrondir(montant: Decimal) -> Decimal:
    """Arrondit au centime pres (ROUND_HALF_UP)."""
    return montant.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


class IndicateursPerformance(BaseModel):
    """Scores de performance (sur 100) du salarie pour la periode."""

    model_config = ConfigDict(frozen=True)

    productivite: MontantDecimal = Decimal("0")
    qualite: MontantDecimal = Decimal("0")
    assiduite: MontantDecimal = Decimal("0")


class DemandeHeuresSup(BaseModel):
    """Heures supplementaires d'une periode, ventilees par categorie.

    Un nombre d'heures nul ou negatif ne contribue rien au montant.
    """

    model_config = ConfigDict(frozen=True)

    heures_normales: MontantDecimal = Decimal("0")
    heures_nuit: MontantDecimal = Decimal("0")
    heures_weekend: MontantDecimal = Decimal("0")
    heures_feriees: MontantDecimal = Decimal("0")
    taux_horaire: MontantDecimal
    salaire_base: MontantPositif | None = None
    indicateurs: IndicateursPerformance | None = None
    heures_cumul_annuel: MontantPositif = Decimal("0")


@dataclass(frozen=True)
class VentilationHeuresSup:
    """Resultat du calcul: montants par categorie, prime et avertissements."""

    heures_normales: Decimal
    heures_nuit: Decimal
    heures_weekend: Decimal
    heures_feriees: Decimal
    montant_normales: Decimal
    montant_nuit: Decimal
    montant_weekend: Decimal
    montant_feriees: Decimal
    prime_rendement: Decimal
    total_heures: Decimal
    montant_total: Decimal
    taux_horaire: Decimal
    avertissements: tuple[str, ...] = ()


def taux_horaire_mensuel(salaire_base: Decimal, taux: TauxHeuresSup) -> Decimal:
    """Taux horaire = salaire mensuel / heures mensuelles legales (173.33)."""
    return _arrondir(salaire_base / taux.heures_mensuelles)


def _montant_categorie(heures: Decimal, taux_horaire: Decimal, majoration: Decimal) -> Decimal:
    if heures <= Decimal("0"):
        return Decimal("0")
    return _arrondir(heures * taux_horaire * majoration)


def calculer_heures_sup_simples(
    heures: Decimal, taux_horaire: Decimal, taux: TauxHeuresSup
) -> Decimal:
    """Montant des heures supplementaires au taux normal (125 %).

    Raises:
        ErreurValidation: Si le taux horaire est negatif.
    """
    if taux_horaire < Decimal("0"):
        raise ErreurValidation(f"Le taux horaire ne peut pas etre negatif: {taux_horaire}")
    return _montant_categorie(heures, taux_horaire, taux.majoration_normale)


def calculer_prime_rendement(
    salaire_base: Decimal,
    indicateurs: IndicateursPerformance,
    taux: TauxHeuresSup,
) -> Decimal:
    """Somme des primes dont l'indicateur atteint le seuil (>=), chacune arrondie."""
    total = Decimal("0")
    for prime in taux.primes_rendement:
        score = getattr(indicateurs, prime.indicateur)
        if score >= prime.seuil:
            total += _arrondir(salaire_base * prime.taux)
    return total


def verifier_plafonds(
    total_heures: Decimal,
    heures_cumul_annuel: Decimal,
    taux: TauxHeuresSup,
) -> tuple[str, ...]:
    """Retourne les avertissements de depassement des plafonds legaux."""
    avertissements = []
    if total_heures > taux.plafond_hebdomadaire:
        message = (
            f"Depassement du plafond hebdomadaire: {total_heures} h "
            f"(maximum {taux.plafond_hebdomadaire} h)"
        )
        logger.warning(message)
        avertissements.append(message)

    cumul = heures_cumul_annuel + total_heures
    if cumul > taux.plafond_annuel:
        message = (
            f"Depassement du plafond annuel: {cumul} h (maximum {taux.plafond_annuel} h)"
        )
        logger.warning(message)
        avertissements.append(message)
    return tuple(avertissements)


def calculer_heures_sup(demande: DemandeHeuresSup, taux: TauxHeuresSup) -> VentilationHeuresSup:
    """Calcule le montant detaille des heures supplementaires.

    Args:
        demande: Heures par categorie, taux horaire et indicateurs optionnels.
        taux: Majorations, plafonds et primes du bareme.

    Returns:
        VentilationHeuresSup avec le total = somme des categories arrondies + prime.

    Raises:
        ErreurValidation: Si le taux horaire est negatif, ou si des indicateurs
            sont fournis sans salaire de base.
    """
    if demande.taux_horaire < Decimal("0"):
        raise ErreurValidation(
            f"Le taux horaire ne peut pas etre negatif: {demande.taux_horaire}"
        )

    normales = _montant_categorie(
        demande.heures_normales, demande.taux_horaire, taux.majoration_normale
    )
    nuit = _montant_categorie(demande.heures_nuit, demande.taux_horaire, taux.majoration_nuit)
    weekend = _montant_categorie(
        demande.heures_weekend, demande.taux_horaire, taux.majoration_weekend
    )
    feriees = _montant_categorie(
        demande.heures_feriees, demande.taux_horaire, taux.majoration_ferie
    )

    prime = Decimal("0")
    if demande.indicateurs is not None:
        if demande.salaire_base is None:
            raise ErreurValidation("Le salaire de base est requis pour la prime de rendement")
        prime = calculer_prime_rendement(demande.salaire_base, demande.indicateurs, taux)

    total_heures = sum(
        (
            max(h, Decimal("0"))
            for h in (
                demande.heures_normales,
                demande.heures_nuit,
                demande.heures_weekend,
                demande.heures_feriees,
            )
        ),
        Decimal("0"),
    )
    avertissements = verifier_plafonds(total_heures, demande.heures_cumul_annuel, taux)

    montant_total = normales + nuit + weekend + feriees + prime
    logger.debug(
        "Heures sup: %s h, montant %s (prime %s)", total_heures, montant_total, prime
    )

    return VentilationHeuresSup(
        heures_normales=demande.heures_normales,
        heures_nuit=demande.heures_nuit,
        heures_weekend=demande.heures_weekend,
        heures_feriees=demande.heures_feriees,
        montant_normales=normales,
        montant_nuit=nuit,
        montant_weekend=weekend,
        montant_feriees=feriees,
        prime_rendement=prime,
        total_heures=total_heures,
        montant_total=montant_total,
        taux_horaire=demande.taux_horaire,
        avertissements=avertissements,
    )
