"""Rapport de TVA d'une periode de declaration.

Agrege des ResultatTVA deja calcules (ventes HT, TVA collectee, ventes
exonerees) et evalue les obligations de declaration aupres de la DGI.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from paiesn.senegal.bareme import TauxTVA
from paiesn.senegal.tva.calcul import ResultatTVA, calculer_date_declaration

logger = logging.getLogger(__name__)


@dataclass
class RapportTVA:
    """Sommaire TVA pour une periode de declaration."""

    debut: datetime.date
    fin: datetime.date
    periode: str
    devise: str
    total_ht: Decimal
    total_tva: Decimal
    total_ttc: Decimal
    tva_taux_normal: Decimal
    tva_taux_reduit: Decimal
    ventes_exonerees: Decimal
    nb_transactions: int
    moyenne_ttc: Decimal
    declaration_mensuelle_recommandee: bool
    audit_requis: bool
    recommandations: list[str]
    date_limite_declaration: datetime.date


def _libelle_periode(debut: datetime.date, fin: datetime.date) -> str:
    if (debut.year, debut.month) == (fin.year, fin.month):
        return f"{debut:%m/%Y}"
    return f"{debut:%m/%Y} - {fin:%m/%Y}"


def generer_rapport_tva(
    resultats: list[ResultatTVA],
    debut: datetime.date,
    fin: datetime.date,
    taux: TauxTVA,
) -> RapportTVA:
    """Genere le rapport de TVA pour les transactions datees dans [debut, fin].

    Args:
        resultats: Resultats de calcul de TVA (toutes dates confondues).
        debut: Date de debut de la periode (inclusive).
        fin: Date de fin de la periode (inclusive).
        taux: Taux et seuils de TVA du bareme.

    Returns:
        RapportTVA avec les totaux et les recommandations de la periode.
    """
    if fin < debut:
        raise ValueError(f"Periode invalide: {debut} > {fin}")

    retenus = [r for r in resultats if debut <= r.date_transaction <= fin]

    total_ht = Decimal("0")
    total_tva = Decimal("0")
    total_ttc = Decimal("0")
    tva_normal = Decimal("0")
    tva_reduit = Decimal("0")
    exonerees = Decimal("0")

    for resultat in retenus:
        total_ht += resultat.montant_ht
        total_tva += resultat.montant_tva
        total_ttc += resultat.montant_ttc
        if resultat.montant_tva == Decimal("0"):
            exonerees += resultat.montant_ht
        elif resultat.taux_tva == taux.taux_normal:
            tva_normal += resultat.montant_tva
        elif resultat.taux_tva == taux.taux_reduit:
            tva_reduit += resultat.montant_tva

    moyenne = Decimal("0")
    if retenus:
        moyenne = (total_ttc / len(retenus)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    mensuelle = total_tva > taux.seuil_declaration_mensuelle
    audit = total_tva > taux.seuil_audit
    recommandations = []
    if mensuelle:
        recommandations.append("Declaration mensuelle recommandee")
    if audit:
        recommandations.append("Audit fiscal requis: TVA collectee superieure au seuil")

    logger.info(
        "Rapport de TVA %s - %s: %d transactions, TVA %s",
        debut,
        fin,
        len(retenus),
        total_tva,
    )

    return RapportTVA(
        debut=debut,
        fin=fin,
        periode=_libelle_periode(debut, fin),
        devise=taux.devise_locale,
        total_ht=total_ht,
        total_tva=total_tva,
        total_ttc=total_ttc,
        tva_taux_normal=tva_normal,
        tva_taux_reduit=tva_reduit,
        ventes_exonerees=exonerees,
        nb_transactions=len(retenus),
        moyenne_ttc=moyenne,
        declaration_mensuelle_recommandee=mensuelle,
        audit_requis=audit,
        recommandations=recommandations,
        date_limite_declaration=calculer_date_declaration(fin),
    )
