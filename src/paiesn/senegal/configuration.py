"""Chargement d'un bareme annuel depuis un fichier YAML.

Le YAML est valide par des modeles Pydantic puis converti en BaremeAnnuel
(dataclasses figees). Les montants et taux doivent etre ecrits entre
guillemets ou en entiers: un float YAML est refuse pour qu'aucune valeur
binaire approximative n'entre dans les calculs.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from paiesn.exceptions import ErreurConfiguration
from paiesn.models import MontantDecimal as ValeurDecimale
from paiesn.senegal.bareme import (
    ILLIMITE,
    BaremeAnnuel,
    PrimeRendement,
    RegleAssiduite,
    RegleCotisation,
    TauxCotisations,
    TauxHeuresSup,
    TauxTVA,
    TrancheImposition,
)


class _Modele(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TrancheYaml(_Modele):
    min: ValeurDecimale
    max: ValeurDecimale | None = None  # null = illimitee
    taux: ValeurDecimale
    montant_fixe: ValeurDecimale = Decimal("0")


class ImpotYaml(_Modele):
    seuil_minimum: ValeurDecimale = Decimal("0")
    tranches: list[TrancheYaml]


class CotisationYaml(_Modele):
    taux: ValeurDecimale
    plafond: ValeurDecimale


class CotisationsYaml(_Modele):
    ipres: CotisationYaml
    css: CotisationYaml
    allocations_familiales: CotisationYaml


class MajorationsYaml(_Modele):
    normale: ValeurDecimale
    nuit: ValeurDecimale
    weekend: ValeurDecimale
    ferie: ValeurDecimale


class PrimeYaml(_Modele):
    indicateur: str = Field(pattern="^(productivite|qualite|assiduite)$")
    seuil: ValeurDecimale
    taux: ValeurDecimale


class HeuresSupYaml(_Modele):
    heures_mensuelles: ValeurDecimale
    majorations: MajorationsYaml
    plafond_hebdomadaire: ValeurDecimale
    plafond_annuel: ValeurDecimale
    debut_nuit: datetime.time = datetime.time(22, 0)
    fin_nuit: datetime.time = datetime.time(6, 0)
    primes_rendement: list[PrimeYaml] = []
    jours_feries_fixes: list[str] = []  # "MM-JJ"
    jours_feries_mobiles: list[datetime.date] = []


class TvaYaml(_Modele):
    taux_normal: ValeurDecimale
    taux_reduit: ValeurDecimale
    taux_retenue: ValeurDecimale
    seuil_retenue: ValeurDecimale
    seuil_numero_fiscal: ValeurDecimale
    devise_locale: str = "XOF"
    devises_acceptees: list[str] = ["XOF", "EUR", "USD"]
    secteurs_taux_reduit: list[str] = []
    secteurs_exoneres: list[str] = []
    seuil_declaration_mensuelle: ValeurDecimale
    seuil_audit: ValeurDecimale


class AssiduiteYaml(_Modele):
    jours_ouvrables: int = Field(default=22, gt=0)
    heures_par_jour: int = Field(default=8, gt=0)
    tolerance_retard_minutes: int = Field(default=5, ge=0)
    seuil_justification_minutes: int = Field(default=15, ge=0)
    seuil_approbation_minutes: int = Field(default=30, ge=0)


class BaremeYaml(_Modele):
    """Schema complet d'un fichier de bareme."""

    annee: int
    impot: ImpotYaml
    cotisations: CotisationsYaml
    heures_sup: HeuresSupYaml
    tva: TvaYaml
    assiduite: AssiduiteYaml = AssiduiteYaml()


def _jour_ferie(valeur: str) -> tuple[int, int]:
    """Convertit 'MM-JJ' en (mois, jour)."""
    try:
        mois, jour = (int(partie) for partie in valeur.split("-"))
        datetime.date(2000, mois, jour)  # 2000 est bissextile: accepte le 29 fevrier
    except ValueError as e:
        raise ErreurConfiguration(f"Jour ferie invalide (format MM-JJ attendu): {valeur!r}") from e
    return mois, jour


def _vers_bareme(modele: BaremeYaml) -> BaremeAnnuel:
    tranches = tuple(
        TrancheImposition(
            minimum=t.min,
            maximum=ILLIMITE if t.max is None else t.max,
            taux=t.taux,
            montant_fixe=t.montant_fixe,
        )
        for t in modele.impot.tranches
    )
    c = modele.cotisations
    h = modele.heures_sup
    v = modele.tva
    return BaremeAnnuel(
        annee=modele.annee,
        seuil_imposition=modele.impot.seuil_minimum,
        tranches_impot=tranches,
        cotisations=TauxCotisations(
            ipres=RegleCotisation(taux=c.ipres.taux, plafond=c.ipres.plafond),
            css=RegleCotisation(taux=c.css.taux, plafond=c.css.plafond),
            allocations_familiales=RegleCotisation(
                taux=c.allocations_familiales.taux,
                plafond=c.allocations_familiales.plafond,
            ),
        ),
        heures_sup=TauxHeuresSup(
            heures_mensuelles=h.heures_mensuelles,
            majoration_normale=h.majorations.normale,
            majoration_nuit=h.majorations.nuit,
            majoration_weekend=h.majorations.weekend,
            majoration_ferie=h.majorations.ferie,
            plafond_hebdomadaire=h.plafond_hebdomadaire,
            plafond_annuel=h.plafond_annuel,
            debut_nuit=h.debut_nuit,
            fin_nuit=h.fin_nuit,
            primes_rendement=tuple(
                PrimeRendement(indicateur=p.indicateur, seuil=p.seuil, taux=p.taux)
                for p in h.primes_rendement
            ),
            jours_feries_fixes=tuple(_jour_ferie(j) for j in h.jours_feries_fixes),
            jours_feries_mobiles=tuple(h.jours_feries_mobiles),
        ),
        tva=TauxTVA(
            taux_normal=v.taux_normal,
            taux_reduit=v.taux_reduit,
            taux_retenue=v.taux_retenue,
            seuil_retenue=v.seuil_retenue,
            seuil_numero_fiscal=v.seuil_numero_fiscal,
            devise_locale=v.devise_locale.upper(),
            devises_acceptees=frozenset(d.upper() for d in v.devises_acceptees),
            secteurs_taux_reduit=frozenset(s.upper() for s in v.secteurs_taux_reduit),
            secteurs_exoneres=frozenset(s.upper() for s in v.secteurs_exoneres),
            seuil_declaration_mensuelle=v.seuil_declaration_mensuelle,
            seuil_audit=v.seuil_audit,
        ),
        assiduite=RegleAssiduite(**modele.assiduite.model_dump()),
    )


def charger_bareme_texte(texte: str) -> BaremeAnnuel:
    """Construit un bareme depuis un contenu YAML.

    Raises:
        ErreurConfiguration: Si le YAML est invalide ou la table mal formee.
    """
    try:
        donnees = yaml.safe_load(texte)
    except yaml.YAMLError as e:
        raise ErreurConfiguration(f"YAML invalide: {e}") from e

    if not isinstance(donnees, dict):
        raise ErreurConfiguration("Le fichier de bareme doit contenir un dictionnaire")

    try:
        modele = BaremeYaml.model_validate(donnees)
    except ValidationError as e:
        raise ErreurConfiguration(f"Bareme invalide: {e}") from e

    return _vers_bareme(modele)


def charger_bareme(chemin: str | Path) -> BaremeAnnuel:
    """Charge et valide un bareme annuel depuis un fichier YAML.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas.
        ErreurConfiguration: Si le contenu est invalide.
    """
    path = Path(chemin)
    if not path.exists():
        raise FileNotFoundError(f"Fichier de bareme introuvable: {chemin}")
    return charger_bareme_texte(path.read_text(encoding="utf-8"))
