"""Tests pour les heures supplementaires (heures_sup.py) et le calendrier (calendrier.py)."""

import datetime
import logging
from dataclasses import replace
from decimal import Decimal

import pytest
from pydantic import ValidationError

from paiesn.exceptions import ErreurValidation
from paiesn.senegal.bareme import BAREME_2024
from paiesn.senegal.paie.calendrier import (
    CategorieHeure,
    classer_plage,
    est_heure_de_nuit,
    est_jour_ferie,
    est_weekend,
)
from paiesn.senegal.paie.heures_sup import (
    DemandeHeuresSup,
    IndicateursPerformance,
    calculer_heures_sup,
    calculer_heures_sup_simples,
    calculer_prime_rendement,
    taux_horaire_mensuel,
    verifier_plafonds,
)


@pytest.fixture
def taux():
    return BAREME_2024.heures_sup


@pytest.fixture
def demande_detaillee() -> DemandeHeuresSup:
    return DemandeHeuresSup(
        heures_normales=Decimal("10"),
        heures_nuit=Decimal("4"),
        heures_weekend=Decimal("2"),
        heures_feriees=Decimal("3"),
        taux_horaire=Decimal("1000"),
    )


class TestTauxHoraire:
    def test_salaire_500000(self, taux) -> None:
        """500 000 / 173,33 = 2 884,6708... arrondi a 2 884,67."""
        assert taux_horaire_mensuel(Decimal("500000"), taux) == Decimal("2884.67")


class TestHeuresSupSimples:
    def test_dix_heures(self, taux) -> None:
        """10 h x 1 000 x 125 % = 12 500."""
        assert calculer_heures_sup_simples(Decimal("10"), Decimal("1000"), taux) == Decimal("12500.00")

    def test_heures_nulles(self, taux) -> None:
        assert calculer_heures_sup_simples(Decimal("0"), Decimal("1000"), taux) == Decimal("0")

    def test_heures_negatives(self, taux) -> None:
        assert calculer_heures_sup_simples(Decimal("-2"), Decimal("1000"), taux) == Decimal("0")

    def test_taux_negatif_refuse(self, taux) -> None:
        with pytest.raises(ErreurValidation):
            calculer_heures_sup_simples(Decimal("5"), Decimal("-1"), taux)


class TestCalculerHeuresSup:
    def test_quatre_categories(self, taux, demande_detaillee) -> None:
        v = calculer_heures_sup(demande_detaillee, taux)
        assert v.montant_normales == Decimal("12500.00")
        assert v.montant_nuit == Decimal("6000.00")
        assert v.montant_weekend == Decimal("3000.00")
        assert v.montant_feriees == Decimal("6000.00")
        assert v.prime_rendement == Decimal("0")
        assert v.montant_total == Decimal("27500.00")
        assert v.total_heures == Decimal("19")
        assert v.avertissements == ()

    def test_arrondi_par_categorie(self, taux) -> None:
        """0,025 -> 0,03 et 0,015 -> 0,02: total 0,05 (et non 0,04)."""
        demande = DemandeHeuresSup(
            heures_normales=Decimal("2"),
            heures_nuit=Decimal("1"),
            taux_horaire=Decimal("0.01"),
        )
        v = calculer_heures_sup(demande, taux)
        assert v.montant_normales == Decimal("0.03")
        assert v.montant_nuit == Decimal("0.02")
        assert v.montant_total == Decimal("0.05")

    def test_heures_negatives_ignorees(self, taux) -> None:
        demande = DemandeHeuresSup(
            heures_normales=Decimal("4"),
            heures_nuit=Decimal("-3"),
            taux_horaire=Decimal("1000"),
        )
        v = calculer_heures_sup(demande, taux)
        assert v.montant_nuit == Decimal("0")
        assert v.total_heures == Decimal("4")
        assert v.montant_total == Decimal("5000.00")

    def test_avec_primes_de_rendement(self, taux) -> None:
        """Productivite 85 >= 80 (5 %), qualite 89 < 90, assiduite 95 >= 95 (2 %)."""
        demande = DemandeHeuresSup(
            heures_normales=Decimal("10"),
            heures_nuit=Decimal("4"),
            heures_weekend=Decimal("2"),
            heures_feriees=Decimal("3"),
            taux_horaire=Decimal("1000"),
            salaire_base=Decimal("500000"),
            indicateurs=IndicateursPerformance(
                productivite=Decimal("85"),
                qualite=Decimal("89"),
                assiduite=Decimal("95"),
            ),
        )
        v = calculer_heures_sup(demande, taux)
        assert v.prime_rendement == Decimal("35000.00")
        assert v.montant_total == Decimal("62500.00")

    def test_indicateurs_sans_salaire_de_base(self, taux) -> None:
        demande = DemandeHeuresSup(
            heures_normales=Decimal("1"),
            taux_horaire=Decimal("1000"),
            indicateurs=IndicateursPerformance(productivite=Decimal("90")),
        )
        with pytest.raises(ErreurValidation, match="salaire de base"):
            calculer_heures_sup(demande, taux)

    def test_taux_horaire_negatif(self, taux) -> None:
        demande = DemandeHeuresSup(heures_normales=Decimal("1"), taux_horaire=Decimal("-10"))
        with pytest.raises(ErreurValidation):
            calculer_heures_sup(demande, taux)

    def test_float_refuse(self) -> None:
        with pytest.raises(ValidationError):
            DemandeHeuresSup(heures_normales=Decimal("1"), taux_horaire=1000.5)

    def test_demande_figee(self, demande_detaillee) -> None:
        with pytest.raises(ValidationError):
            demande_detaillee.heures_normales = Decimal("99")


class TestPrimeRendement:
    def test_aucun_seuil_atteint(self, taux) -> None:
        indicateurs = IndicateursPerformance(
            productivite=Decimal("79"), qualite=Decimal("89"), assiduite=Decimal("94")
        )
        assert calculer_prime_rendement(Decimal("500000"), indicateurs, taux) == Decimal("0")

    def test_tous_les_seuils(self, taux) -> None:
        """5 % + 3 % + 2 % de 400 000 = 40 000."""
        indicateurs = IndicateursPerformance(
            productivite=Decimal("80"), qualite=Decimal("90"), assiduite=Decimal("95")
        )
        assert calculer_prime_rendement(Decimal("400000"), indicateurs, taux) == Decimal("40000.00")


class TestPlafonds:
    def test_plafond_hebdomadaire(self, taux, caplog) -> None:
        """Le depassement est signale mais le montant n'est pas reduit."""
        demande = DemandeHeuresSup(heures_normales=Decimal("25"), taux_horaire=Decimal("1000"))
        with caplog.at_level(logging.WARNING, logger="paiesn.senegal.paie.heures_sup"):
            v = calculer_heures_sup(demande, taux)
        assert v.montant_total == Decimal("31250.00")
        assert len(v.avertissements) == 1
        assert "hebdomadaire" in v.avertissements[0]
        assert "plafond hebdomadaire" in caplog.text

    def test_plafond_annuel(self, taux, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            avertissements = verifier_plafonds(Decimal("10"), Decimal("125"), taux)
        assert len(avertissements) == 1
        assert "annuel" in avertissements[0]
        assert "135" in caplog.text

    def test_sans_depassement(self, taux) -> None:
        assert verifier_plafonds(Decimal("20"), Decimal("110"), taux) == ()


class TestCalendrier:
    def test_heure_de_nuit_traverse_minuit(self) -> None:
        assert est_heure_de_nuit(datetime.time(23, 0), datetime.time(1, 0))

    def test_fin_a_22h(self) -> None:
        assert est_heure_de_nuit(datetime.time(20, 0), datetime.time(22, 0))

    def test_debut_avant_6h(self) -> None:
        assert est_heure_de_nuit(datetime.time(5, 0), datetime.time(7, 0))

    def test_journee(self) -> None:
        assert not est_heure_de_nuit(datetime.time(6, 0), datetime.time(21, 59))

    def test_jours_feries_fixes(self, taux) -> None:
        assert est_jour_ferie(datetime.date(2024, 4, 4), taux)
        assert est_jour_ferie(datetime.date(2025, 1, 1), taux)
        assert not est_jour_ferie(datetime.date(2024, 4, 5), taux)

    def test_jour_ferie_mobile_configure(self, taux) -> None:
        tabaski = datetime.date(2024, 6, 17)
        assert not est_jour_ferie(tabaski, taux)
        avec_tabaski = replace(taux, jours_feries_mobiles=(tabaski,))
        assert est_jour_ferie(tabaski, avec_tabaski)

    def test_weekend(self) -> None:
        assert est_weekend(datetime.date(2024, 5, 4))  # samedi
        assert est_weekend(datetime.date(2024, 5, 5))  # dimanche
        assert not est_weekend(datetime.date(2024, 5, 6))

    def test_classer_ferie_prioritaire(self, taux) -> None:
        """1er mai 2021 est un samedi: ferie l'emporte sur week-end et nuit."""
        categorie = classer_plage(
            datetime.date(2021, 5, 1), datetime.time(23, 0), datetime.time(2, 0), taux
        )
        assert categorie == CategorieHeure.FERIE

    def test_classer_weekend_avant_nuit(self, taux) -> None:
        categorie = classer_plage(
            datetime.date(2024, 5, 4), datetime.time(22, 0), datetime.time(23, 0), taux
        )
        assert categorie == CategorieHeure.WEEKEND

    def test_classer_nuit(self, taux) -> None:
        categorie = classer_plage(
            datetime.date(2024, 5, 7), datetime.time(22, 30), datetime.time(23, 30), taux
        )
        assert categorie == CategorieHeure.NUIT

    def test_classer_normale(self, taux) -> None:
        categorie = classer_plage(
            datetime.date(2024, 5, 7), datetime.time(18, 0), datetime.time(20, 0), taux
        )
        assert categorie == CategorieHeure.NORMALE
