"""Tests pour la validation des NINEA (tva/ninea.py)."""

import datetime

import pytest
from freezegun import freeze_time

from paiesn.senegal.tva.ninea import (
    calculer_cle_controle,
    extraire_infos_ninea,
    generer_ninea,
    valider_ninea,
)

AUJOURD_HUI = datetime.date(2024, 6, 1)


class TestCleControle:
    def test_cle_connue(self) -> None:
        """Somme ponderee de 01020123456 = 110; 110 mod 97 = 13; cle = 84."""
        assert calculer_cle_controle("01020123456") == 84

    def test_base_trop_courte(self) -> None:
        with pytest.raises(ValueError, match="11 chiffres"):
            calculer_cle_controle("0102")

    def test_base_non_numerique(self) -> None:
        with pytest.raises(ValueError):
            calculer_cle_controle("01020A23456")


class TestValiderNinea:
    def test_valide(self) -> None:
        assert valider_ninea("0102012345684", AUJOURD_HUI)

    def test_espaces_ignores(self) -> None:
        assert valider_ninea("01 020 123456 84", AUJOURD_HUI)

    def test_cle_incorrecte(self) -> None:
        assert not valider_ninea("0102012345685", AUJOURD_HUI)

    def test_region_inconnue(self) -> None:
        numero = "15020123456" + "00"
        assert not valider_ninea(numero, AUJOURD_HUI)

    def test_annee_trop_lointaine(self) -> None:
        """En 2024, l'annee d'immatriculation maximale est 034."""
        assert not valider_ninea(generer_ninea("01", 35, 1), AUJOURD_HUI)
        assert valider_ninea(generer_ninea("01", 34, 1), AUJOURD_HUI)

    def test_longueur_incorrecte(self) -> None:
        assert not valider_ninea("010201234568", AUJOURD_HUI)

    def test_caracteres_non_numeriques(self) -> None:
        assert not valider_ninea("01020123456AB", AUJOURD_HUI)

    def test_vide(self) -> None:
        assert not valider_ninea("", AUJOURD_HUI)
        assert not valider_ninea("   ", AUJOURD_HUI)
        assert not valider_ninea(None, AUJOURD_HUI)

    @freeze_time("2024-06-01")
    def test_date_du_jour_par_defaut(self) -> None:
        assert valider_ninea(generer_ninea("01", 34, 1))
        assert not valider_ninea(generer_ninea("01", 35, 1))


class TestGenererNinea:
    def test_generation(self) -> None:
        assert generer_ninea("01", 2020, 123456) == "0102012345684"

    def test_toutes_les_regions(self) -> None:
        for code in ("01", "07", "14"):
            assert valider_ninea(generer_ninea(code, 2019, 42), AUJOURD_HUI)

    def test_region_invalide(self) -> None:
        with pytest.raises(ValueError, match="region"):
            generer_ninea("99", 2020, 1)

    def test_sequence_hors_limites(self) -> None:
        with pytest.raises(ValueError):
            generer_ninea("01", 2020, 1000000)


class TestExtraireInfos:
    def test_composantes(self) -> None:
        infos = extraire_infos_ninea("0102012345684", AUJOURD_HUI)
        assert infos.code_region == "01"
        assert infos.region == "Dakar"
        assert infos.annee == 20
        assert infos.sequence == 123456

    def test_ninea_invalide(self) -> None:
        with pytest.raises(ValueError, match="NINEA invalide"):
            extraire_infos_ninea("0102012345685", AUJOURD_HUI)
