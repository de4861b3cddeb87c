"""Bareme annuel: tranches d'impot, cotisations sociales, heures sup et TVA.

Toutes les valeurs sont en Decimal -- jamais de float.
Source: Code general des impots et Code du travail du Senegal (bareme 2024).

Les tables sont validees a la construction du BaremeAnnuel: une table
mal formee echoue au chargement, jamais pendant un calcul.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from paiesn.exceptions import ErreurConfiguration

DEUX_DECIMALES = Decimal("0.01")
ILLIMITE = Decimal("Infinity")


@dataclass(frozen=True)
class TrancheImposition:
    """Tranche du bareme progressif de l'impot sur le revenu.

    La tranche couvre l'intervalle (minimum, maximum]: un revenu egal au
    maximum appartient a cette tranche, pas a la suivante.
    """

    minimum: Decimal
    maximum: Decimal  # ILLIMITE pour la derniere tranche
    taux: Decimal
    montant_fixe: Decimal  # Impot cumule des tranches inferieures


@dataclass(frozen=True)
class RegleCotisation:
    """Taux et plafond mensuel d'une cotisation sociale."""

    taux: Decimal
    plafond: Decimal


@dataclass(frozen=True)
class TauxCotisations:
    """Cotisations sociales salariales."""

    ipres: RegleCotisation  # Institution de Prevoyance Retraite du Senegal
    css: RegleCotisation  # Caisse de Securite Sociale
    allocations_familiales: RegleCotisation


@dataclass(frozen=True)
class PrimeRendement:
    """Prime de rendement accordee quand un indicateur atteint son seuil."""

    indicateur: str  # productivite, qualite ou assiduite
    seuil: Decimal
    taux: Decimal  # Fraction du salaire de base


@dataclass(frozen=True)
class TauxHeuresSup:
    """Majorations et limites des heures supplementaires."""

    heures_mensuelles: Decimal  # 40h * 52 / 12
    majoration_normale: Decimal
    majoration_nuit: Decimal
    majoration_weekend: Decimal
    majoration_ferie: Decimal
    plafond_hebdomadaire: Decimal
    plafond_annuel: Decimal
    debut_nuit: datetime.time
    fin_nuit: datetime.time
    primes_rendement: tuple[PrimeRendement, ...]
    jours_feries_fixes: tuple[tuple[int, int], ...]  # (mois, jour)
    jours_feries_mobiles: tuple[datetime.date, ...] = ()  # Tabaski, Korite, ...


@dataclass(frozen=True)
class TauxTVA:
    """Taux et seuils de TVA."""

    taux_normal: Decimal
    taux_reduit: Decimal
    taux_retenue: Decimal
    seuil_retenue: Decimal
    seuil_numero_fiscal: Decimal
    devise_locale: str
    devises_acceptees: frozenset[str]
    secteurs_taux_reduit: frozenset[str]
    secteurs_exoneres: frozenset[str]
    seuil_declaration_mensuelle: Decimal
    seuil_audit: Decimal


@dataclass(frozen=True)
class RegleAssiduite:
    """Parametres des retenues pour retards et absences non payees."""

    jours_ouvrables: int = 22  # par mois
    heures_par_jour: int = 8
    tolerance_retard_minutes: int = 5
    seuil_justification_minutes: int = 15  # au-dela: justificatif exige
    seuil_approbation_minutes: int = 30  # au-dela: approbation du responsable


def _arrondir(montant: Decimal) -> Decimal:
    return montant.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


def valider_tranches(tranches: tuple[TrancheImposition, ...]) -> None:
    """Verifie que les tranches partitionnent [0, +inf) sans trou ni chevauchement.

    Verifie aussi que chaque montant fixe egale l'impot cumule (arrondi
    par tranche) des tranches inferieures.

    Raises:
        ErreurConfiguration: Si la table est mal formee.
    """
    if not tranches:
        raise ErreurConfiguration("Le bareme ne contient aucune tranche")

    if tranches[0].minimum != Decimal("0"):
        raise ErreurConfiguration(
            f"La premiere tranche doit commencer a 0 (recu {tranches[0].minimum})"
        )

    cumul = Decimal("0")
    precedente: TrancheImposition | None = None
    for i, tranche in enumerate(tranches):
        if not Decimal("0") <= tranche.taux <= Decimal("1"):
            raise ErreurConfiguration(f"Taux hors limites pour la tranche {i + 1}: {tranche.taux}")
        if tranche.maximum <= tranche.minimum:
            raise ErreurConfiguration(
                f"Tranche {i + 1}: maximum ({tranche.maximum}) <= minimum ({tranche.minimum})"
            )
        derniere = i == len(tranches) - 1
        if tranche.maximum.is_infinite() and not derniere:
            raise ErreurConfiguration(f"Seule la derniere tranche peut etre illimitee (tranche {i + 1})")
        if derniere and not tranche.maximum.is_infinite():
            raise ErreurConfiguration("La derniere tranche doit etre illimitee")

        if precedente is not None:
            if tranche.minimum != precedente.maximum:
                raise ErreurConfiguration(
                    f"Tranches non contigues: {precedente.maximum} suivi de {tranche.minimum}"
                )
            cumul += _arrondir((precedente.maximum - precedente.minimum) * precedente.taux)

        if tranche.montant_fixe != cumul:
            raise ErreurConfiguration(
                f"Montant fixe incoherent pour la tranche {i + 1}: "
                f"{tranche.montant_fixe} (attendu {cumul})"
            )
        precedente = tranche


@dataclass(frozen=True)
class BaremeAnnuel:
    """Ensemble complet des regles pour une annee fiscale."""

    annee: int
    seuil_imposition: Decimal  # Revenu annuel en dessous duquel l'impot est nul
    tranches_impot: tuple[TrancheImposition, ...]
    cotisations: TauxCotisations
    heures_sup: TauxHeuresSup
    tva: TauxTVA
    assiduite: RegleAssiduite = RegleAssiduite()

    def __post_init__(self) -> None:
        valider_tranches(self.tranches_impot)
        if self.heures_sup.heures_mensuelles <= Decimal("0"):
            raise ErreurConfiguration("Le nombre d'heures mensuelles doit etre positif")
        if self.assiduite.jours_ouvrables <= 0 or self.assiduite.heures_par_jour <= 0:
            raise ErreurConfiguration("Les jours ouvrables et heures par jour doivent etre positifs")
        if self.assiduite.tolerance_retard_minutes < 0:
            raise ErreurConfiguration("La tolerance de retard ne peut pas etre negative")


BAREME_2024 = BaremeAnnuel(
    annee=2024,
    seuil_imposition=Decimal("30000"),
    tranches_impot=(
        TrancheImposition(
            minimum=Decimal("0"),
            maximum=Decimal("630000"),
            taux=Decimal("0"),
            montant_fixe=Decimal("0"),
        ),
        TrancheImposition(
            minimum=Decimal("630000"),
            maximum=Decimal("1500000"),
            taux=Decimal("0.20"),
            montant_fixe=Decimal("0"),
        ),
        TrancheImposition(
            minimum=Decimal("1500000"),
            maximum=Decimal("4000000"),
            taux=Decimal("0.30"),
            montant_fixe=Decimal("174000"),
        ),
        TrancheImposition(
            minimum=Decimal("4000000"),
            maximum=Decimal("8000000"),
            taux=Decimal("0.35"),
            montant_fixe=Decimal("924000"),
        ),
        TrancheImposition(
            minimum=Decimal("8000000"),
            maximum=ILLIMITE,
            taux=Decimal("0.40"),
            montant_fixe=Decimal("2324000"),
        ),
    ),
    cotisations=TauxCotisations(
        ipres=RegleCotisation(taux=Decimal("0.06"), plafond=Decimal("1800000")),
        css=RegleCotisation(taux=Decimal("0.07"), plafond=Decimal("1800000")),
        allocations_familiales=RegleCotisation(taux=Decimal("0.07"), plafond=Decimal("1800000")),
    ),
    heures_sup=TauxHeuresSup(
        heures_mensuelles=Decimal("173.33"),
        majoration_normale=Decimal("1.25"),
        majoration_nuit=Decimal("1.50"),
        majoration_weekend=Decimal("1.50"),
        majoration_ferie=Decimal("2.00"),
        plafond_hebdomadaire=Decimal("20"),
        plafond_annuel=Decimal("130"),
        debut_nuit=datetime.time(22, 0),
        fin_nuit=datetime.time(6, 0),
        primes_rendement=(
            PrimeRendement(indicateur="productivite", seuil=Decimal("80"), taux=Decimal("0.05")),
            PrimeRendement(indicateur="qualite", seuil=Decimal("90"), taux=Decimal("0.03")),
            PrimeRendement(indicateur="assiduite", seuil=Decimal("95"), taux=Decimal("0.02")),
        ),
        jours_feries_fixes=(
            (1, 1),  # Jour de l'an
            (4, 4),  # Fete de l'independance
            (5, 1),  # Fete du travail
            (8, 15),  # Assomption
        ),
    ),
    tva=TauxTVA(
        taux_normal=Decimal("0.18"),
        taux_reduit=Decimal("0.10"),
        taux_retenue=Decimal("0.05"),
        seuil_retenue=Decimal("5000000"),
        seuil_numero_fiscal=Decimal("1000000"),
        devise_locale="XOF",
        devises_acceptees=frozenset({"XOF", "EUR", "USD"}),
        secteurs_taux_reduit=frozenset({"AGRICULTURE", "EDUCATION", "HEALTH", "TRANSPORT_PUBLIC"}),
        secteurs_exoneres=frozenset({"BANKING", "INSURANCE", "MEDICAL_SERVICES", "EDUCATION_PUBLIC"}),
        seuil_declaration_mensuelle=Decimal("10000000"),
        seuil_audit=Decimal("50000000"),
    ),
    assiduite=RegleAssiduite(
        jours_ouvrables=22,
        heures_par_jour=8,
        tolerance_retard_minutes=5,
        seuil_justification_minutes=15,
        seuil_approbation_minutes=30,
    ),
)

# Registre multi-annee
BAREMES: dict[int, BaremeAnnuel] = {2024: BAREME_2024}


def obtenir_bareme(annee: int) -> BaremeAnnuel:
    """Retourne le bareme pour une annee donnee.

    Raises:
        ErreurConfiguration: Si aucun bareme n'est disponible pour l'annee.
    """
    if annee not in BAREMES:
        raise ErreurConfiguration(
            f"Bareme non disponible pour l'annee {annee}. "
            f"Annees disponibles: {sorted(BAREMES.keys())}"
        )
    return BAREMES[annee]
