"""Classification des plages horaires: nuit, week-end, jour ferie.

Les jours feries fixes et mobiles viennent du bareme; les fetes religieuses
(Tabaski, Korite, Maouloud...) sont fournies chaque annee en configuration.
"""

import datetime
from enum import Enum

from paiesn.senegal.bareme import TauxHeuresSup


class CategorieHeure(str, Enum):
    """Categorie de majoration d'une plage travaillee."""

    NORMALE = "normale"
    NUIT = "nuit"
    WEEKEND = "weekend"
    FERIE = "ferie"


def _dans_la_nuit(heure: datetime.time, debut_nuit: datetime.time, fin_nuit: datetime.time) -> bool:
    # La nuit traverse minuit: [22:00, 24:00) + [00:00, 06:00)
    if debut_nuit > fin_nuit:
        return heure >= debut_nuit or heure < fin_nuit
    return debut_nuit <= heure < fin_nuit


def est_heure_de_nuit(
    debut: datetime.time,
    fin: datetime.time,
    debut_nuit: datetime.time = datetime.time(22, 0),
    fin_nuit: datetime.time = datetime.time(6, 0),
) -> bool:
    """Vrai si le debut ou la fin de la plage tombe dans la periode de nuit."""
    return _dans_la_nuit(debut, debut_nuit, fin_nuit) or _dans_la_nuit(fin, debut_nuit, fin_nuit)


def est_jour_ferie(jour: datetime.date, taux: TauxHeuresSup) -> bool:
    """Vrai si la date est un jour ferie fixe ou un jour ferie mobile configure."""
    if (jour.month, jour.day) in taux.jours_feries_fixes:
        return True
    return jour in taux.jours_feries_mobiles


def est_weekend(jour: datetime.date) -> bool:
    return jour.weekday() >= 5


def classer_plage(
    jour: datetime.date,
    debut: datetime.time,
    fin: datetime.time,
    taux: TauxHeuresSup,
) -> CategorieHeure:
    """Determine la majoration applicable a une plage d'heures supplementaires.

    Priorite: ferie > weekend > nuit > normale (la majoration la plus
    favorable au salarie l'emporte).
    """
    if est_jour_ferie(jour, taux):
        return CategorieHeure.FERIE
    if est_weekend(jour):
        return CategorieHeure.WEEKEND
    if est_heure_de_nuit(debut, fin, taux.debut_nuit, taux.fin_nuit):
        return CategorieHeure.NUIT
    return CategorieHeure.NORMALE
