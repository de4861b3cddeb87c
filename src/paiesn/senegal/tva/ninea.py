"""Validation des NINEA (Numero d'Identification Nationale des Entreprises et Associations).

Format sur 13 chiffres: RR AAA NNNNNN CC
- RR: code region (01 a 14)
- AAA: annee d'immatriculation (3 derniers chiffres)
- NNNNNN: numero sequentiel
- CC: cle de controle = 97 - (somme ponderee mod 97)
"""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

REGIONS = {
    "01": "Dakar",
    "02": "Diourbel",
    "03": "Fatick",
    "04": "Kaffrine",
    "05": "Kaolack",
    "06": "Kedougou",
    "07": "Kolda",
    "08": "Louga",
    "09": "Matam",
    "10": "Saint-Louis",
    "11": "Sedhiou",
    "12": "Tambacounda",
    "13": "Thies",
    "14": "Ziguinchor",
}

PONDERATIONS = (2, 3, 4, 5, 6, 7, 2, 3, 4, 5, 6)
TOLERANCE_ANNEES = 10

_FORMAT_NINEA = re.compile(r"^[0-9]{13}$")


@dataclass(frozen=True)
class InfosNinea:
    """Composantes d'un NINEA valide."""

    code_region: str
    region: str
    annee: int
    sequence: int


def _nettoyer(numero: str) -> str:
    return re.sub(r"\s+", "", numero)


def calculer_cle_controle(base: str) -> int:
    """Calcule la cle de controle des 11 premiers chiffres.

    Raises:
        ValueError: Si la base ne contient pas exactement 11 chiffres.
    """
    if len(base) != 11 or not base.isdigit():
        raise ValueError(f"La base doit contenir exactement 11 chiffres: {base!r}")
    somme = sum(int(chiffre) * poids for chiffre, poids in zip(base, PONDERATIONS))
    return 97 - somme % 97


def valider_ninea(numero: str | None, aujourd_hui: datetime.date | None = None) -> bool:
    """Verifie le format, la region, l'annee et la cle de controle d'un NINEA."""
    if numero is None or not numero.strip():
        return False

    propre = _nettoyer(numero)
    if not _FORMAT_NINEA.match(propre):
        logger.debug("Format de NINEA invalide: %s", propre)
        return False

    if propre[:2] not in REGIONS:
        logger.debug("Code region invalide: %s", propre[:2])
        return False

    annee_courante = (aujourd_hui or datetime.date.today()).year % 1000
    if int(propre[2:5]) > annee_courante + TOLERANCE_ANNEES:
        logger.debug("Annee d'immatriculation invalide: %s", propre[2:5])
        return False

    if calculer_cle_controle(propre[:11]) != int(propre[11:]):
        logger.debug("Cle de controle invalide pour le NINEA: %s", propre)
        return False

    return True


def generer_ninea(code_region: str, annee: int, sequence: int) -> str:
    """Construit un NINEA valide (utile pour les jeux de donnees de test).

    Raises:
        ValueError: Si le code region est inconnu ou la sequence hors limites.
    """
    if code_region not in REGIONS:
        raise ValueError(f"Code region invalide: {code_region}")
    if not 0 <= sequence <= 999999:
        raise ValueError(f"Numero sequentiel hors limites: {sequence}")
    base = f"{code_region}{annee % 1000:03d}{sequence:06d}"
    return f"{base}{calculer_cle_controle(base):02d}"


def extraire_infos_ninea(numero: str, aujourd_hui: datetime.date | None = None) -> InfosNinea:
    """Decompose un NINEA valide.

    Raises:
        ValueError: Si le NINEA est invalide.
    """
    if not valider_ninea(numero, aujourd_hui):
        raise ValueError(f"NINEA invalide: {numero}")
    propre = _nettoyer(numero)
    return InfosNinea(
        code_region=propre[:2],
        region=REGIONS[propre[:2]],
        annee=int(propre[2:5]),
        sequence=int(propre[5:11]),
    )
