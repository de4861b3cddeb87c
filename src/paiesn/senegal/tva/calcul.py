"""Calcul de la TVA senegalaise sur un montant HT.

Ordre de decision:
1. Un taux explicite est utilise tel quel
2. Sinon taux reduit (10 %) pour les secteurs vises, taux normal (18 %) sinon
3. L'exoneration (secteur exonere, exportation, Etat, code d'exoneration)
   est evaluee independamment du taux et annule la TVA
4. TVA = HT x taux, arrondie au centime; TTC = HT + TVA
5. Retenue a la source de 5 % de la TVA si devise locale et HT > 5 000 000

Toute l'arithmetique utilise Decimal avec ROUND_HALF_UP.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field

from paiesn.exceptions import ErreurValidation
from paiesn.models import MontantDecimal
from paiesn.senegal.bareme import TauxTVA
from paiesn.senegal.tva.ninea import valider_ninea

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
JOUR_DECLARATION = 15
REGIME_NORMAL = "REGIME_NORMAL"


class DemandeTVA(BaseModel):
    """Transaction a soumettre au calcul de TVA."""

    model_config = ConfigDict(frozen=True)

    montant_ht: MontantDecimal = Field(gt=0, description="Montant hors taxes")
    devise: str = "XOF"
    taux_tva: MontantDecimal | None = Field(default=None, ge=0, le=1)
    numero_fiscal_client: str | None = None
    date_transaction: datetime.date
    type_transaction: str | None = None
    secteur: str | None = None
    exportation: bool = False
    gouvernemental: bool = False
    code_exoneration: str | None = None
    raison_exoneration: str | None = None


@dataclass(frozen=True)
class VentilationTVA:
    """Repartition de la base HT par regime de taux."""

    base: Decimal
    base_taux_normal: Decimal
    base_taux_reduit: Decimal
    base_exoneree: Decimal
    montant_tva: Decimal
    taux_effectif: Decimal


@dataclass(frozen=True)
class ConformiteTVA:
    """Verification des obligations de la transaction."""

    conforme: bool
    statut: str  # CONFORME ou NON_CONFORME
    problemes: tuple[str, ...]
    recommandations: tuple[str, ...]
    declaration_requise: bool
    date_limite_declaration: datetime.date


@dataclass(frozen=True)
class DeclarationTVA:
    """Informations de declaration a la DGI."""

    periode: str  # MM/AAAA
    regime: str
    soumis_retenue: bool
    taux_retenue: Decimal
    montant_retenue: Decimal
    code_dgi: str


@dataclass(frozen=True)
class ResultatTVA:
    """Resultat complet d'un calcul de TVA."""

    identifiant_calcul: str
    calcule_le: datetime.datetime
    date_transaction: datetime.date
    montant_ht: Decimal
    taux_tva: Decimal
    montant_tva: Decimal
    montant_ttc: Decimal
    devise: str
    exonere: bool
    raison_exoneration: str | None
    numero_fiscal_client: str | None
    numero_fiscal_valide: bool
    secteur: str | None
    ventilation: VentilationTVA
    conformite: ConformiteTVA
    declaration: DeclarationTVA


def _secteur(demande: DemandeTVA) -> str | None:
    return demande.secteur.upper() if demande.secteur else None


def determiner_taux(demande: DemandeTVA, taux: TauxTVA) -> Decimal:
    """Taux explicite, sinon taux reduit du secteur, sinon taux normal."""
    if demande.taux_tva is not None:
        return demande.taux_tva
    if _secteur(demande) in taux.secteurs_taux_reduit:
        return taux.taux_reduit
    return taux.taux_normal


def est_exoneree(demande: DemandeTVA, taux: TauxTVA) -> bool:
    if _secteur(demande) in taux.secteurs_exoneres:
        return True
    if demande.exportation or demande.gouvernemental:
        return True
    return bool(demande.code_exoneration and demande.code_exoneration.strip())


def raison_exoneration(demande: DemandeTVA, taux: TauxTVA) -> str | None:
    """Motif de l'exoneration: raison fournie, sinon deduite de la transaction."""
    if demande.raison_exoneration is not None:
        return demande.raison_exoneration
    if demande.exportation:
        return "Exoneration pour exportation"
    if demande.gouvernemental:
        return "Exoneration pour transaction gouvernementale"
    secteur = _secteur(demande)
    if secteur in taux.secteurs_exoneres:
        return f"Exoneration sectorielle - {secteur}"
    return None


def calculer_date_declaration(date_transaction: datetime.date) -> datetime.date:
    """Date limite de declaration: le 15 du mois suivant la transaction."""
    return date_transaction + relativedelta(months=1, day=JOUR_DECLARATION)


def est_soumis_retenue(demande: DemandeTVA, taux: TauxTVA) -> bool:
    return demande.devise.upper() == taux.devise_locale and demande.montant_ht > taux.seuil_retenue


def code_dgi(demande: DemandeTVA) -> str:
    if demande.exportation:
        return "EXP001"
    if demande.gouvernemental:
        return "GOV001"
    return "STD001"


def _generer_identifiant(maintenant: datetime.datetime) -> str:
    return f"TVA_{maintenant:%Y%m%d%H%M%S}_{uuid.uuid4().hex[:8].upper()}"


def _conformite(demande: DemandeTVA, montant_tva: Decimal, taux: TauxTVA) -> ConformiteTVA:
    problemes = []
    recommandations = []
    sans_numero = not (demande.numero_fiscal_client and demande.numero_fiscal_client.strip())
    if (
        demande.devise.upper() == taux.devise_locale
        and demande.montant_ht > taux.seuil_numero_fiscal
        and sans_numero
    ):
        problemes.append(
            f"Numero fiscal client obligatoire pour les montants > {taux.seuil_numero_fiscal} "
            f"{taux.devise_locale}"
        )
        recommandations.append("Obtenir le numero fiscal du client")

    conforme = not problemes
    return ConformiteTVA(
        conforme=conforme,
        statut="CONFORME" if conforme else "NON_CONFORME",
        problemes=tuple(problemes),
        recommandations=tuple(recommandations),
        declaration_requise=montant_tva > Decimal("0"),
        date_limite_declaration=calculer_date_declaration(demande.date_transaction),
    )


def calculer_tva(demande: DemandeTVA, taux: TauxTVA) -> ResultatTVA:
    """Calcule la TVA, la retenue a la source et les informations de conformite.

    Args:
        demande: Transaction (montant HT, devise, secteur, indicateurs d'exoneration).
        taux: Taux et seuils de TVA du bareme.

    Returns:
        ResultatTVA complet.

    Raises:
        ErreurValidation: Si la devise n'est pas acceptee.
    """
    devise = demande.devise.upper()
    if devise not in taux.devises_acceptees:
        raise ErreurValidation(
            f"Devise non acceptee: {demande.devise}. "
            f"Devises acceptees: {sorted(taux.devises_acceptees)}"
        )

    logger.debug("Calcul de la TVA pour le montant: %s %s", demande.montant_ht, devise)

    numero_valide = True
    if demande.numero_fiscal_client and demande.numero_fiscal_client.strip():
        numero_valide = valider_ninea(demande.numero_fiscal_client)

    taux_applicable = determiner_taux(demande, taux)
    exonere = est_exoneree(demande, taux)

    montant_tva = Decimal("0")
    if not exonere:
        montant_tva = (demande.montant_ht * taux_applicable).quantize(
            TWO_PLACES, rounding=ROUND_HALF_UP
        )
    montant_ttc = demande.montant_ht + montant_tva

    soumis_retenue = est_soumis_retenue(demande, taux)
    montant_retenue = Decimal("0")
    if soumis_retenue:
        montant_retenue = (montant_tva * taux.taux_retenue).quantize(
            TWO_PLACES, rounding=ROUND_HALF_UP
        )

    # La base HT est affectee a une seule categorie
    sans_tva = montant_tva == Decimal("0")
    ventilation = VentilationTVA(
        base=demande.montant_ht,
        base_taux_normal=(
            demande.montant_ht
            if not sans_tva and taux_applicable == taux.taux_normal
            else Decimal("0")
        ),
        base_taux_reduit=(
            demande.montant_ht
            if not sans_tva and taux_applicable == taux.taux_reduit
            else Decimal("0")
        ),
        base_exoneree=demande.montant_ht if sans_tva else Decimal("0"),
        montant_tva=montant_tva,
        taux_effectif=taux_applicable,
    )

    declaration = DeclarationTVA(
        periode=f"{demande.date_transaction:%m/%Y}",
        regime=REGIME_NORMAL,
        soumis_retenue=soumis_retenue,
        taux_retenue=taux.taux_retenue if soumis_retenue else Decimal("0"),
        montant_retenue=montant_retenue,
        code_dgi=code_dgi(demande),
    )

    maintenant = datetime.datetime.now()
    resultat = ResultatTVA(
        identifiant_calcul=_generer_identifiant(maintenant),
        calcule_le=maintenant,
        date_transaction=demande.date_transaction,
        montant_ht=demande.montant_ht,
        taux_tva=taux_applicable,
        montant_tva=montant_tva,
        montant_ttc=montant_ttc,
        devise=devise,
        exonere=exonere,
        raison_exoneration=raison_exoneration(demande, taux) if exonere else None,
        numero_fiscal_client=demande.numero_fiscal_client,
        numero_fiscal_valide=numero_valide,
        secteur=demande.secteur,
        ventilation=ventilation,
        conformite=_conformite(demande, montant_tva, taux),
        declaration=declaration,
    )

    logger.debug(
        "TVA calculee: %s %s (taux: %s%%)", montant_tva, devise, taux_applicable * 100
    )
    return resultat
