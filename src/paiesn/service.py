"""Service de calcul: point d'entree unique pour les appelants (CLI, API, lots).

Le bareme est fourni a la construction. Chaque appel de premier niveau
envoie exactement un evenement au journal d'audit, qu'il reussisse ou non.
Les erreurs typees sont propagees telles quelles, sauf pour paie_employe
qui retourne un resultat explicite (PaieReussie ou PaieEchouee).
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from paiesn.audit import STATUT_ECHEC, EvenementCalcul, JournalAudit
from paiesn.cache import CacheCalculs
from paiesn.exceptions import (
    ErreurConfiguration,
    ErreurSalaireNetNegatif,
    ErreurValidation,
)
from paiesn.models import MontantPositif
from paiesn.senegal.bareme import BaremeAnnuel
from paiesn.senegal.paie.cotisations import Cotisations, calculer_cotisations
from paiesn.senegal.paie.heures_sup import (
    DemandeHeuresSup,
    VentilationHeuresSup,
    calculer_heures_sup,
)
from paiesn.senegal.paie.impot import calculer_impot_revenu
from paiesn.senegal.paie.moteur import (
    HeuresPeriode,
    Primes,
    ResultatPaie,
    Retenues,
    calculer_paie,
)
from paiesn.senegal.tva.calcul import DemandeTVA, ResultatTVA, calculer_tva

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PeriodePaie(BaseModel):
    """Mois de paie."""

    model_config = ConfigDict(frozen=True)

    annee: int = Field(ge=2000)
    mois: int = Field(ge=1, le=12)

    def __str__(self) -> str:
        return f"{self.mois:02d}/{self.annee}"


class ProfilSalarial(BaseModel):
    """Donnees salariales d'un employe."""

    model_config = ConfigDict(frozen=True)

    identifiant: str
    nom: str = ""
    salaire_base: MontantPositif
    actif: bool = True


class DepotProfils(Protocol):
    """Source des profils salariaux (base de donnees, fichier, memoire)."""

    def trouver(self, identifiant: str) -> ProfilSalarial | None: ...


class DepotProfilsMemoire:
    """Depot de profils en memoire."""

    def __init__(self, profils: list[ProfilSalarial] | None = None) -> None:
        self._profils = {p.identifiant: p for p in profils or []}

    def ajouter(self, profil: ProfilSalarial) -> None:
        self._profils[profil.identifiant] = profil

    def trouver(self, identifiant: str) -> ProfilSalarial | None:
        return self._profils.get(identifiant)


class TypeErreur(str, Enum):
    """Motifs d'echec d'un calcul de paie pour un employe."""

    EMPLOYE_INTROUVABLE = "employe_introuvable"
    EMPLOYE_INACTIF = "employe_inactif"
    PERIODE_INVALIDE = "periode_invalide"
    DONNEES_INVALIDES = "donnees_invalides"
    SALAIRE_NET_NEGATIF = "salaire_net_negatif"


@dataclass(frozen=True)
class PaieReussie:
    identifiant: str
    periode: PeriodePaie
    resultat: ResultatPaie
    ok: bool = True


@dataclass(frozen=True)
class PaieEchouee:
    identifiant: str
    periode: PeriodePaie | None
    type_erreur: TypeErreur
    message: str
    ok: bool = False


ResultatPaieEmploye = PaieReussie | PaieEchouee


def _en_texte(valeurs: dict[str, Any]) -> dict[str, Any]:
    return {cle: str(v) if isinstance(v, Decimal) else v for cle, v in valeurs.items()}


def _relayer_avertissements(resultat: ResultatPaie | VentilationHeuresSup) -> None:
    # Un resultat memorise ne repasse pas par verifier_plafonds
    for message in resultat.avertissements:
        logger.warning(message)


def _sorties_paie(resultat: ResultatPaie) -> dict[str, Any]:
    return _en_texte(
        {
            "brut": resultat.brut,
            "impot_revenu": resultat.impot_revenu,
            "cotisations": resultat.cotisations.total,
            "retenues": resultat.total_retenues_diverses,
            "net": resultat.net,
        }
    )


class ServiceCalcul:
    """Facade des moteurs de calcul configuree par un bareme annuel.

    Args:
        bareme: Bareme applique a tous les calculs du service.
        audit: Journal recevant un evenement par appel (optionnel).
        profils: Depot de profils salariaux, requis pour paie_employe.
        cache: Cache de memoisation partage (optionnel).
    """

    def __init__(
        self,
        bareme: BaremeAnnuel,
        audit: JournalAudit | None = None,
        profils: DepotProfils | None = None,
        cache: CacheCalculs | None = None,
    ) -> None:
        self.bareme = bareme
        self._audit = audit
        self._profils = profils
        self._cache = cache

    # ------------------------------------------------------------------
    # Outils internes
    # ------------------------------------------------------------------

    def _auditer(self, evenement: EvenementCalcul) -> None:
        if self._audit is not None:
            self._audit.enregistrer(evenement)

    def _memoiser(
        self,
        operation: str,
        entrees: tuple,
        calcul: Callable[[], T],
        si_memorise: Callable[[T], None] | None = None,
    ) -> T:
        """Execute le calcul via le cache; si_memorise recoit un resultat servi par le cache."""
        if self._cache is None:
            return calcul()

        execute = False

        def calcul_suivi() -> T:
            nonlocal execute
            execute = True
            return calcul()

        resultat = self._cache.obtenir_ou_calculer(
            operation, (self.bareme, *entrees), calcul_suivi
        )
        if not execute and si_memorise is not None:
            si_memorise(resultat)
        return resultat

    def _executer(
        self,
        type_calcul: str,
        entrees: dict[str, Any],
        calcul: Callable[[], T],
        sorties: Callable[[T], dict[str, Any]],
    ) -> T:
        try:
            resultat = calcul()
        except Exception as e:
            self._auditer(
                EvenementCalcul(
                    type_calcul=type_calcul,
                    entrees=entrees,
                    sorties={},
                    statut=STATUT_ECHEC,
                    erreur=f"{type(e).__name__}: {e}",
                )
            )
            raise
        self._auditer(
            EvenementCalcul(type_calcul=type_calcul, entrees=entrees, sorties=sorties(resultat))
        )
        return resultat

    # ------------------------------------------------------------------
    # Calculs
    # ------------------------------------------------------------------

    def impot_revenu(self, montant_annuel: Decimal) -> Decimal:
        """Impot annuel sur un revenu imposable annuel."""
        return self._executer(
            "impot_revenu",
            _en_texte({"montant_annuel": montant_annuel}),
            lambda: self._memoiser(
                "impot_revenu",
                (montant_annuel,),
                lambda: calculer_impot_revenu(montant_annuel, self.bareme),
            ),
            lambda impot: {"impot": str(impot)},
        )

    def cotisations(self, salaire_brut: Decimal) -> Cotisations:
        return self._executer(
            "cotisations",
            _en_texte({"salaire_brut": salaire_brut}),
            lambda: self._memoiser(
                "cotisations",
                (salaire_brut,),
                lambda: calculer_cotisations(salaire_brut, self.bareme.cotisations),
            ),
            lambda c: _en_texte(
                {
                    "ipres": c.ipres,
                    "css": c.css,
                    "allocations_familiales": c.allocations_familiales,
                    "total": c.total,
                }
            ),
        )

    def heures_sup(self, demande: DemandeHeuresSup) -> VentilationHeuresSup:
        return self._executer(
            "heures_sup",
            demande.model_dump(mode="json"),
            lambda: self._memoiser(
                "heures_sup",
                (demande,),
                lambda: calculer_heures_sup(demande, self.bareme.heures_sup),
                _relayer_avertissements,
            ),
            lambda v: _en_texte(
                {
                    "total_heures": v.total_heures,
                    "prime_rendement": v.prime_rendement,
                    "montant_total": v.montant_total,
                    "avertissements": list(v.avertissements),
                }
            ),
        )

    def tva(self, demande: DemandeTVA) -> ResultatTVA:
        """Calcul de TVA (jamais memorise: chaque calcul recoit son identifiant)."""
        return self._executer(
            "tva",
            demande.model_dump(mode="json"),
            lambda: calculer_tva(demande, self.bareme.tva),
            lambda r: _en_texte(
                {
                    "identifiant_calcul": r.identifiant_calcul,
                    "taux_tva": r.taux_tva,
                    "montant_tva": r.montant_tva,
                    "montant_ttc": r.montant_ttc,
                    "exonere": r.exonere,
                    "montant_retenue": r.declaration.montant_retenue,
                }
            ),
        )

    def _calculer_paie(
        self,
        salaire_base: Decimal,
        heures: HeuresPeriode,
        primes: Primes,
        retenues: Retenues,
    ) -> ResultatPaie:
        return self._memoiser(
            "paie",
            (salaire_base, heures, primes, retenues),
            lambda: calculer_paie(salaire_base, heures, primes, retenues, self.bareme),
            _relayer_avertissements,
        )

    def paie(
        self,
        salaire_base: Decimal,
        heures: HeuresPeriode | None = None,
        primes: Primes | None = None,
        retenues: Retenues | None = None,
    ) -> ResultatPaie:
        """Paie mensuelle complete.

        Raises:
            ErreurValidation: Si le salaire de base est negatif.
            ErreurSalaireNetNegatif: Si le net calcule est negatif.
        """
        heures = heures or HeuresPeriode()
        primes = primes or Primes()
        retenues = retenues or Retenues()
        return self._executer(
            "paie",
            {
                "salaire_base": str(salaire_base),
                "heures": heures.model_dump(mode="json"),
                "primes": primes.model_dump(mode="json"),
                "retenues": retenues.model_dump(mode="json"),
            },
            lambda: self._calculer_paie(salaire_base, heures, primes, retenues),
            _sorties_paie,
        )

    def paie_employe(
        self,
        identifiant: str,
        periode: PeriodePaie | None,
        heures: HeuresPeriode | None = None,
        primes: Primes | None = None,
        retenues: Retenues | None = None,
        aujourd_hui: datetime.date | None = None,
    ) -> ResultatPaieEmploye:
        """Paie d'un employe pour une periode, sans exception pour les cas metier.

        Raises:
            ErreurConfiguration: Si aucun depot de profils n'est configure.
        """
        if self._profils is None:
            raise ErreurConfiguration("Aucun depot de profils configure pour le service")

        entrees = {"identifiant": identifiant, "periode": str(periode)}
        resultat = self._paie_employe(
            identifiant,
            periode,
            heures or HeuresPeriode(),
            primes or Primes(),
            retenues or Retenues(),
            aujourd_hui or datetime.date.today(),
        )

        if isinstance(resultat, PaieReussie):
            self._auditer(
                EvenementCalcul(
                    type_calcul="paie_employe",
                    entrees=entrees,
                    sorties=_sorties_paie(resultat.resultat),
                )
            )
        else:
            logger.info(
                "Paie refusee pour %s (%s): %s",
                identifiant,
                periode,
                resultat.type_erreur.value,
            )
            self._auditer(
                EvenementCalcul(
                    type_calcul="paie_employe",
                    entrees=entrees,
                    sorties={},
                    statut=STATUT_ECHEC,
                    erreur=f"{resultat.type_erreur.value}: {resultat.message}",
                )
            )
        return resultat

    def _paie_employe(
        self,
        identifiant: str,
        periode: PeriodePaie | None,
        heures: HeuresPeriode,
        primes: Primes,
        retenues: Retenues,
        aujourd_hui: datetime.date,
    ) -> ResultatPaieEmploye:
        def echec(type_erreur: TypeErreur, message: str) -> PaieEchouee:
            return PaieEchouee(identifiant, periode, type_erreur, message)

        if not identifiant or not identifiant.strip():
            return echec(TypeErreur.DONNEES_INVALIDES, "Identifiant d'employe manquant")

        if not isinstance(periode, PeriodePaie):
            return echec(TypeErreur.PERIODE_INVALIDE, f"Periode manquante ou invalide: {periode!r}")

        if (periode.annee, periode.mois) > (aujourd_hui.year, aujourd_hui.month):
            return echec(TypeErreur.PERIODE_INVALIDE, f"Periode future: {periode}")

        profil = self._profils.trouver(identifiant)
        if profil is None:
            return echec(TypeErreur.EMPLOYE_INTROUVABLE, f"Employe introuvable: {identifiant}")
        if not profil.actif:
            return echec(TypeErreur.EMPLOYE_INACTIF, f"Employe inactif: {identifiant}")

        try:
            resultat = self._calculer_paie(profil.salaire_base, heures, primes, retenues)
        except ErreurSalaireNetNegatif as e:
            return echec(TypeErreur.SALAIRE_NET_NEGATIF, str(e))
        except (ErreurValidation, ValidationError) as e:
            return echec(TypeErreur.DONNEES_INVALIDES, str(e))

        return PaieReussie(identifiant, periode, resultat)
