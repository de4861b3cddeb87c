"""Memoisation explicite des calculs.

Le cache appartient a l'appelant: la cle est l'operation plus le tuple
complet des entrees (bareme compris), et l'invalidation est explicite.
Un calcul qui leve une exception n'est jamais mis en cache.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StatistiquesCache:
    succes: int
    echecs: int
    taille: int


class CacheCalculs:
    """Table de memoisation protegee par un verrou."""

    def __init__(self) -> None:
        self._valeurs: dict[tuple[str, tuple[Hashable, ...]], Any] = {}
        self._verrou = threading.Lock()
        self._succes = 0
        self._echecs = 0

    def obtenir_ou_calculer(
        self,
        operation: str,
        entrees: tuple[Hashable, ...],
        calcul: Callable[[], T],
    ) -> T:
        """Retourne le resultat memorise, ou execute le calcul et le memorise."""
        cle = (operation, entrees)
        with self._verrou:
            if cle in self._valeurs:
                self._succes += 1
                return self._valeurs[cle]
            self._echecs += 1

        # Calcul hors verrou: deux appels concurrents identiques peuvent
        # calculer deux fois, le resultat etant deterministe.
        valeur = calcul()
        with self._verrou:
            self._valeurs.setdefault(cle, valeur)
        return valeur

    def invalider(self, operation: str | None = None) -> int:
        """Supprime les entrees d'une operation (ou toutes) et retourne leur nombre."""
        with self._verrou:
            if operation is None:
                nombre = len(self._valeurs)
                self._valeurs.clear()
            else:
                cles = [cle for cle in self._valeurs if cle[0] == operation]
                for cle in cles:
                    del self._valeurs[cle]
                nombre = len(cles)
        logger.debug("Cache invalide (%s): %d entrees", operation or "tout", nombre)
        return nombre

    @property
    def statistiques(self) -> StatistiquesCache:
        with self._verrou:
            return StatistiquesCache(
                succes=self._succes, echecs=self._echecs, taille=len(self._valeurs)
            )
