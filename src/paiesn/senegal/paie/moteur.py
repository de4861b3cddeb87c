"""Moteur de paie: orchestration de tous les calculs pour un mois de paie.

Combine les heures supplementaires (heures_sup.py), l'impot sur le revenu
(impot.py) et les cotisations sociales (cotisations.py) pour produire un
ResultatPaie complet. Aucune etape n'est sautee: un salaire net negatif
interrompt le calcul au lieu d'etre ramene a zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from paiesn.exceptions import ErreurSalaireNetNegatif, ErreurValidation
from paiesn.models import MontantPositif
from paiesn.senegal.bareme import BaremeAnnuel
from paiesn.senegal.paie.cotisations import Cotisations, calculer_cotisations
from paiesn.senegal.paie.heures_sup import (
    calculer_heures_sup_simples,
    taux_horaire_mensuel,
    verifier_plafonds,
)
from paiesn.senegal.paie.impot import calculer_impot_mensuel

logger = logging.getLogger(__name__)

DEUX_DECIMALES = Decimal("0.01")


def _arrondir(montant: Decimal) -> Decimal:
    return montant.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


class HeuresPeriode(BaseModel):
    """Heures supplementaires du mois et cumul annuel anterieur."""

    model_config = ConfigDict(frozen=True)

    heures_sup: MontantPositif = Decimal("0")
    heures_cumul_annuel: MontantPositif = Decimal("0")


class Primes(BaseModel):
    """Primes et indemnites du mois."""

    model_config = ConfigDict(frozen=True)

    prime_rendement: MontantPositif = Decimal("0")
    transport: MontantPositif = Decimal("0")
    repas: MontantPositif = Decimal("0")
    logement: MontantPositif = Decimal("0")
    autres: MontantPositif = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.prime_rendement + self.transport + self.repas + self.logement + self.autres


class Retenues(BaseModel):
    """Retenues diverses du mois (hors impot et cotisations)."""

    model_config = ConfigDict(frozen=True)

    avance: MontantPositif = Decimal("0")
    pret: MontantPositif = Decimal("0")
    absence: MontantPositif = Decimal("0")
    retard: MontantPositif = Decimal("0")
    autres: MontantPositif = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.avance + self.pret + self.absence + self.retard + self.autres


@dataclass(frozen=True)
class ResultatPaie:
    """Resultat complet d'un calcul de paie mensuel."""

    salaire_base: Decimal
    taux_horaire: Decimal
    heures_sup: Decimal
    montant_heures_sup: Decimal
    total_primes: Decimal
    brut: Decimal

    # Retenues legales
    impot_revenu: Decimal
    cotisations: Cotisations

    # Retenues diverses
    total_retenues_diverses: Decimal

    # Totaux
    total_retenues: Decimal
    net: Decimal

    avertissements: tuple[str, ...] = ()


def calculer_paie(
    salaire_base: Decimal,
    heures: HeuresPeriode,
    primes: Primes,
    retenues: Retenues,
    bareme: BaremeAnnuel,
) -> ResultatPaie:
    """Calcule une paie mensuelle complete.

    Args:
        salaire_base: Salaire de base mensuel.
        heures: Heures supplementaires du mois (payees au taux normal).
        primes: Primes et indemnites.
        retenues: Retenues diverses (avance, pret, absence, retard, autres).
        bareme: Bareme de l'annee.

    Returns:
        ResultatPaie avec chaque composante du calcul.

    Raises:
        ErreurValidation: Si le salaire de base est negatif.
        ErreurSalaireNetNegatif: Si le net calcule est negatif.
    """
    if salaire_base < Decimal("0"):
        raise ErreurValidation(f"Le salaire de base ne peut pas etre negatif: {salaire_base}")

    # Chaque composante est arrondie une seule fois: brut et net sont des
    # sommes exactes des montants conserves dans le resultat.
    salaire_base = _arrondir(salaire_base)

    # 1. Taux horaire et heures supplementaires
    taux_horaire = taux_horaire_mensuel(salaire_base, bareme.heures_sup)
    montant_heures_sup = calculer_heures_sup_simples(
        heures.heures_sup, taux_horaire, bareme.heures_sup
    )
    avertissements = verifier_plafonds(
        heures.heures_sup, heures.heures_cumul_annuel, bareme.heures_sup
    )

    # 2. Brut
    total_primes = _arrondir(primes.total)
    brut = salaire_base + montant_heures_sup + total_primes

    # 3. Impot (annualise puis ramene au mois) et cotisations
    impot = calculer_impot_mensuel(brut, bareme)
    cotisations = calculer_cotisations(brut, bareme.cotisations)

    # 4. Net
    total_retenues_diverses = _arrondir(retenues.total)
    total_retenues = impot + cotisations.total + total_retenues_diverses
    net = brut - total_retenues

    if net < Decimal("0"):
        raise ErreurSalaireNetNegatif(brut, net)

    logger.debug("Paie: brut %s, impot %s, cotisations %s, net %s", brut, impot, cotisations.total, net)

    return ResultatPaie(
        salaire_base=salaire_base,
        taux_horaire=taux_horaire,
        heures_sup=heures.heures_sup,
        montant_heures_sup=montant_heures_sup,
        total_primes=total_primes,
        brut=brut,
        impot_revenu=impot,
        cotisations=cotisations,
        total_retenues_diverses=total_retenues_diverses,
        total_retenues=total_retenues,
        net=net,
        avertissements=avertissements,
    )
