"""Journal d'audit des calculs.

Le service de calcul envoie un EvenementCalcul par appel, reussi ou non.
Le journal est injecte: le moteur de calcul lui-meme reste pur.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

STATUT_SUCCES = "succes"
STATUT_ECHEC = "echec"


@dataclass(frozen=True)
class EvenementCalcul:
    """Trace d'un calcul: entrees, sorties et statut."""

    type_calcul: str
    entrees: dict[str, Any]
    sorties: dict[str, Any]
    statut: str = STATUT_SUCCES
    erreur: str | None = None
    horodatage: datetime.datetime = field(default_factory=datetime.datetime.now)


@runtime_checkable
class JournalAudit(Protocol):
    """Destination des evenements d'audit."""

    def enregistrer(self, evenement: EvenementCalcul) -> None: ...


class JournalAuditMemoire:
    """Conserve les evenements en memoire (tests, traitements par lot)."""

    def __init__(self) -> None:
        self.evenements: list[EvenementCalcul] = []

    def enregistrer(self, evenement: EvenementCalcul) -> None:
        self.evenements.append(evenement)

    def vider(self) -> None:
        self.evenements.clear()


class JournalAuditLogging:
    """Emet un enregistrement de log par evenement."""

    def __init__(self, nom_logger: str = "paiesn.audit") -> None:
        self._logger = logging.getLogger(nom_logger)

    def enregistrer(self, evenement: EvenementCalcul) -> None:
        niveau = logging.INFO if evenement.statut == STATUT_SUCCES else logging.WARNING
        self._logger.log(
            niveau,
            "Calcul %s (%s): entrees=%s sorties=%s erreur=%s",
            evenement.type_calcul,
            evenement.statut,
            evenement.entrees,
            evenement.sorties,
            evenement.erreur,
            extra={"evenement_calcul": evenement},
        )
