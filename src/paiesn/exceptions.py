"""Erreurs typees du moteur de calcul.

Les erreurs de validation et de configuration heritent aussi de ValueError
pour rester compatibles avec les appelants qui attrapent ValueError.
Les depassements de plafonds d'heures supplementaires ne sont PAS des
erreurs: ils sont journalises et rapportes comme avertissements.
"""

from __future__ import annotations

from decimal import Decimal


class ErreurPaieSN(Exception):
    """Classe de base de toutes les erreurs du moteur."""


class ErreurValidation(ErreurPaieSN, ValueError):
    """Entree invalide (montant negatif, periode absente, etc.)."""


class ErreurConfiguration(ErreurPaieSN, ValueError):
    """Bareme ou fichier de regles mal forme, detecte au chargement."""


class ErreurCalculPaie(ErreurPaieSN):
    """Violation d'un invariant du calcul de paie."""


class ErreurSalaireNetNegatif(ErreurCalculPaie):
    """Le salaire net calcule est negatif: le calcul est refuse."""

    def __init__(self, salaire_brut: Decimal, salaire_net: Decimal) -> None:
        self.salaire_brut = salaire_brut
        self.salaire_net = salaire_net
        super().__init__(
            f"Le salaire net ne peut pas etre negatif "
            f"(brut: {salaire_brut}, net: {salaire_net})"
        )
