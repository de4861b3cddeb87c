"""Retenues d'assiduite: penalites de retard et absences non payees.

Le salaire journalier est le salaire de base divise par les jours
ouvrables du mois (22). Pour les retards, il est ramene a l'heure (8 h)
puis a la minute, chaque division etant arrondie au centime.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from paiesn.exceptions import ErreurValidation
from paiesn.senegal.bareme import RegleAssiduite

logger = logging.getLogger(__name__)

DEUX_DECIMALES = Decimal("0.01")
MINUTES_PAR_HEURE = 60

# Limites hautes des categories de retard (minutes apres tolerance)
LIMITE_RETARD_MINEUR = 15
LIMITE_RETARD_MODERE = 60


def _arrondir(montant: Decimal) -> Decimal:
    return montant.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


class CategorieRetard(str, Enum):
    AUCUN = "aucun"
    MINEUR = "mineur"
    MODERE = "modere"
    GRAVE = "grave"


ACTIONS_RECOMMANDEES = {
    CategorieRetard.AUCUN: "Aucune action requise",
    CategorieRetard.MINEUR: "Avertissement verbal",
    CategorieRetard.MODERE: "Avertissement ecrit",
    CategorieRetard.GRAVE: "Sanction disciplinaire",
}


@dataclass(frozen=True)
class CalculRetard:
    """Retard d'une arrivee, apres application de la tolerance."""

    minutes: int
    categorie: CategorieRetard
    penalite: Decimal
    justification_requise: bool
    approbation_requise: bool

    @property
    def action_recommandee(self) -> str:
        return ACTIONS_RECOMMANDEES[self.categorie]


def _verifier_salaire(salaire_base: Decimal) -> None:
    if salaire_base < Decimal("0"):
        raise ErreurValidation(f"Le salaire de base ne peut pas etre negatif: {salaire_base}")


def salaire_journalier(salaire_base: Decimal, regle: RegleAssiduite) -> Decimal:
    """Salaire de base / jours ouvrables du mois, arrondi au centime."""
    _verifier_salaire(salaire_base)
    return _arrondir(salaire_base / regle.jours_ouvrables)


def minutes_de_retard(
    heure_prevue: datetime.time | None, heure_arrivee: datetime.time | None
) -> int:
    """Minutes entieres entre l'heure prevue et l'arrivee; 0 si en avance ou inconnu."""
    if heure_prevue is None or heure_arrivee is None:
        return 0
    jour = datetime.date(2000, 1, 1)
    ecart = datetime.datetime.combine(jour, heure_arrivee) - datetime.datetime.combine(
        jour, heure_prevue
    )
    return max(0, int(ecart.total_seconds() // MINUTES_PAR_HEURE))


def categorie_retard(minutes: int) -> CategorieRetard:
    if minutes <= 0:
        return CategorieRetard.AUCUN
    if minutes <= LIMITE_RETARD_MINEUR:
        return CategorieRetard.MINEUR
    if minutes <= LIMITE_RETARD_MODERE:
        return CategorieRetard.MODERE
    return CategorieRetard.GRAVE


def calculer_penalite_retard(
    minutes: int, salaire_base: Decimal, regle: RegleAssiduite
) -> Decimal:
    """Penalite = (salaire journalier / heures par jour / 60) x minutes.

    Les minutes sont celles restant apres tolerance. Zero si aucun retard.
    """
    if minutes <= 0:
        return Decimal("0")
    journalier = salaire_journalier(salaire_base, regle)
    horaire = _arrondir(journalier / regle.heures_par_jour)
    par_minute = _arrondir(horaire / MINUTES_PAR_HEURE)
    return par_minute * minutes


def calculer_retard(
    heure_prevue: datetime.time | None,
    heure_arrivee: datetime.time | None,
    salaire_base: Decimal,
    regle: RegleAssiduite,
) -> CalculRetard:
    """Calcule le retard retenu pour une arrivee et sa penalite.

    Les premieres minutes (tolerance, 5 par defaut) ne sont pas retenues.
    Un justificatif est exige au-dela de 15 minutes retenues, une
    approbation du responsable au-dela de 30.
    """
    minutes = max(0, minutes_de_retard(heure_prevue, heure_arrivee) - regle.tolerance_retard_minutes)
    penalite = calculer_penalite_retard(minutes, salaire_base, regle)
    if minutes > 0:
        logger.debug("Retard retenu: %d min, penalite %s", minutes, penalite)
    return CalculRetard(
        minutes=minutes,
        categorie=categorie_retard(minutes),
        penalite=penalite,
        justification_requise=minutes > regle.seuil_justification_minutes,
        approbation_requise=minutes > regle.seuil_approbation_minutes,
    )


def total_penalites_retard(retards: Iterable[CalculRetard]) -> Decimal:
    """Retenue mensuelle pour retards: somme des penalites de chaque arrivee."""
    return sum((r.penalite for r in retards), Decimal("0"))


def calculer_retenue_absences(
    salaire_base: Decimal,
    jours_complets: int,
    demi_journees: int,
    regle: RegleAssiduite,
) -> Decimal:
    """Retenue pour absences non payees.

    Un salaire journalier par jour complet, la moitie (arrondie) par
    demi-journee.

    Raises:
        ErreurValidation: Si un nombre de jours est negatif.
    """
    if jours_complets < 0 or demi_journees < 0:
        raise ErreurValidation(
            f"Nombre d'absences negatif: {jours_complets} jours, {demi_journees} demi-journees"
        )
    journalier = salaire_journalier(salaire_base, regle)
    return journalier * jours_complets + _arrondir(journalier / 2) * demi_journees
