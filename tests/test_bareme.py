"""Tests pour le registre de baremes et la validation des tranches (bareme.py)."""

from dataclasses import replace
from decimal import Decimal

import pytest

from paiesn.exceptions import ErreurConfiguration
from paiesn.senegal.bareme import (
    BAREME_2024,
    ILLIMITE,
    TrancheImposition,
    obtenir_bareme,
    valider_tranches,
)


def _tranche(minimum, maximum, taux, montant_fixe="0") -> TrancheImposition:
    return TrancheImposition(
        minimum=Decimal(minimum),
        maximum=maximum if isinstance(maximum, Decimal) else Decimal(maximum),
        taux=Decimal(taux),
        montant_fixe=Decimal(montant_fixe),
    )


class TestObtenirBareme:
    def test_bareme_2024(self) -> None:
        bareme = obtenir_bareme(2024)
        assert bareme is BAREME_2024
        assert bareme.annee == 2024

    def test_annee_inconnue(self) -> None:
        with pytest.raises(ErreurConfiguration, match="2099"):
            obtenir_bareme(2099)

    def test_erreur_est_une_value_error(self) -> None:
        """Les appelants qui attrapent ValueError restent compatibles."""
        with pytest.raises(ValueError):
            obtenir_bareme(1990)


class TestBareme2024:
    def test_tranches_contigues(self) -> None:
        tranches = BAREME_2024.tranches_impot
        for precedente, suivante in zip(tranches, tranches[1:]):
            assert suivante.minimum == precedente.maximum

    def test_derniere_tranche_illimitee(self) -> None:
        assert BAREME_2024.tranches_impot[-1].maximum == ILLIMITE
        assert BAREME_2024.tranches_impot[-1].taux == Decimal("0.40")

    def test_montants_fixes(self) -> None:
        fixes = [t.montant_fixe for t in BAREME_2024.tranches_impot]
        assert fixes == [
            Decimal("0"),
            Decimal("0"),
            Decimal("174000"),
            Decimal("924000"),
            Decimal("2324000"),
        ]

    def test_cotisations(self) -> None:
        c = BAREME_2024.cotisations
        assert c.ipres.taux == Decimal("0.06")
        assert c.css.taux == Decimal("0.07")
        assert c.allocations_familiales.taux == Decimal("0.07")
        assert c.ipres.plafond == Decimal("1800000")

    def test_tva(self) -> None:
        assert BAREME_2024.tva.taux_normal == Decimal("0.18")
        assert BAREME_2024.tva.taux_reduit == Decimal("0.10")
        assert "AGRICULTURE" in BAREME_2024.tva.secteurs_taux_reduit
        assert "BANKING" in BAREME_2024.tva.secteurs_exoneres

    def test_bareme_hashable(self) -> None:
        """Le bareme sert de composante de cle de cache."""
        assert hash(BAREME_2024) == hash(obtenir_bareme(2024))


class TestValiderTranches:
    def test_table_valide(self) -> None:
        valider_tranches(
            (
                _tranche("0", "1000", "0"),
                _tranche("1000", ILLIMITE, "0.10"),
            )
        )

    def test_table_vide(self) -> None:
        with pytest.raises(ErreurConfiguration, match="aucune tranche"):
            valider_tranches(())

    def test_premier_minimum_non_nul(self) -> None:
        with pytest.raises(ErreurConfiguration, match="commencer a 0"):
            valider_tranches((_tranche("100", ILLIMITE, "0.10"),))

    def test_trou_entre_tranches(self) -> None:
        with pytest.raises(ErreurConfiguration, match="non contigues"):
            valider_tranches(
                (
                    _tranche("0", "1000", "0"),
                    _tranche("1500", ILLIMITE, "0.10"),
                )
            )

    def test_chevauchement(self) -> None:
        with pytest.raises(ErreurConfiguration, match="non contigues"):
            valider_tranches(
                (
                    _tranche("0", "1000", "0"),
                    _tranche("900", ILLIMITE, "0.10"),
                )
            )

    def test_derniere_tranche_bornee(self) -> None:
        with pytest.raises(ErreurConfiguration, match="illimitee"):
            valider_tranches((_tranche("0", "1000", "0"),))

    def test_tranche_illimitee_pas_en_dernier(self) -> None:
        with pytest.raises(ErreurConfiguration, match="Seule la derniere"):
            valider_tranches(
                (
                    _tranche("0", ILLIMITE, "0"),
                    _tranche("1000", ILLIMITE, "0.10"),
                )
            )

    def test_maximum_inferieur_au_minimum(self) -> None:
        with pytest.raises(ErreurConfiguration, match="maximum"):
            valider_tranches(
                (
                    _tranche("0", "0", "0"),
                    _tranche("0", ILLIMITE, "0.10"),
                )
            )

    def test_taux_hors_limites(self) -> None:
        with pytest.raises(ErreurConfiguration, match="Taux hors limites"):
            valider_tranches((_tranche("0", ILLIMITE, "1.5"),))

    def test_montant_fixe_incoherent(self) -> None:
        with pytest.raises(ErreurConfiguration, match="Montant fixe incoherent"):
            valider_tranches(
                (
                    _tranche("0", "1000", "0.10"),
                    _tranche("1000", ILLIMITE, "0.20", montant_fixe="50"),
                )
            )

    def test_construction_bareme_valide_les_tranches(self) -> None:
        """Une table mal formee echoue a la construction du bareme, pas au calcul."""
        with pytest.raises(ErreurConfiguration):
            replace(BAREME_2024, tranches_impot=(_tranche("0", "1000", "0"),))

    def test_heures_mensuelles_nulles(self) -> None:
        with pytest.raises(ErreurConfiguration, match="heures mensuelles"):
            replace(
                BAREME_2024,
                heures_sup=replace(BAREME_2024.heures_sup, heures_mensuelles=Decimal("0")),
            )
