"""Module de calcul et de declaration de la TVA."""

from paiesn.senegal.tva.calcul import (
    DemandeTVA,
    ResultatTVA,
    calculer_date_declaration,
    calculer_tva,
)
from paiesn.senegal.tva.ninea import (
    calculer_cle_controle,
    extraire_infos_ninea,
    generer_ninea,
    valider_ninea,
)
from paiesn.senegal.tva.sommaire import RapportTVA, generer_rapport_tva

__all__ = [
    "DemandeTVA",
    "ResultatTVA",
    "calculer_date_declaration",
    "calculer_tva",
    "calculer_cle_controle",
    "extraire_infos_ninea",
    "generer_ninea",
    "valider_ninea",
    "RapportTVA",
    "generer_rapport_tva",
]
