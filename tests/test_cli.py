"""Tests CLI pour PaieSN (commandes psn)."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from paiesn.cli.app import app

runner = CliRunner()

PROJECT_ROOT = Path(__file__).parent.parent
FICHIER_2024 = PROJECT_ROOT / "rules" / "bareme_2024.yaml"


class TestApplication:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "PaieSN version" in result.output

    def test_aide(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "paie" in result.output
        assert "tva" in result.output

    def test_verbose(self) -> None:
        result = runner.invoke(app, ["--verbose", "impot", "700000"])
        assert result.exit_code == 0
        assert "14000.00" in result.output

    def test_annee_inconnue(self) -> None:
        result = runner.invoke(app, ["--annee", "1999", "impot", "1000000"])
        assert result.exit_code == 1
        assert "Bareme non disponible" in result.output

    def test_bareme_fichier(self) -> None:
        result = runner.invoke(app, ["--bareme", str(FICHIER_2024), "impot", "2000000"])
        assert result.exit_code == 0
        assert "324000.00" in result.output

    def test_bareme_introuvable(self, tmp_path) -> None:
        result = runner.invoke(app, ["--bareme", str(tmp_path / "absent.yaml"), "impot", "1"])
        assert result.exit_code == 1
        assert "introuvable" in result.output


class TestImpotEtCotisations:
    def test_impot(self) -> None:
        result = runner.invoke(app, ["impot", "700000"])
        assert result.exit_code == 0
        assert "14000.00" in result.output

    def test_montant_invalide(self) -> None:
        result = runner.invoke(app, ["impot", "abc"])
        assert result.exit_code == 1
        assert "Montant invalide" in result.output

    def test_cotisations(self) -> None:
        result = runner.invoke(app, ["cotisations", "2000000"])
        assert result.exit_code == 0
        assert "108000.00" in result.output

    def test_cotisations_brut_negatif(self) -> None:
        result = runner.invoke(app, ["cotisations", "--", "-5"])
        assert result.exit_code == 1


class TestHeuresSup:
    def test_categories(self) -> None:
        result = runner.invoke(
            app,
            ["heures-sup", "--taux-horaire", "1000", "--normales", "10", "--feriees", "3"],
        )
        assert result.exit_code == 0
        assert "12500.00" in result.output
        assert "18500.00" in result.output

    def test_avertissement_plafond(self) -> None:
        result = runner.invoke(app, ["heures-sup", "--taux-horaire", "1000", "--normales", "25"])
        assert result.exit_code == 0
        assert "plafond hebdomadaire" in result.output

    def test_primes_sans_salaire(self) -> None:
        result = runner.invoke(
            app, ["heures-sup", "--taux-horaire", "1000", "--productivite", "90"]
        )
        assert result.exit_code == 1


class TestPaie:
    def test_calculer(self) -> None:
        result = runner.invoke(
            app,
            [
                "paie", "calculer", "500000",
                "--heures-sup", "10",
                "--transport", "25000",
                "--repas", "15000",
                "--avance", "50000",
            ],
        )
        assert result.exit_code == 0
        assert "576058.38" in result.output
        assert "248892.93" in result.output

    def test_net_negatif(self) -> None:
        result = runner.invoke(app, ["paie", "calculer", "100000", "--avance", "200000"])
        assert result.exit_code == 1
        assert "salaire net negatif" in result.output

    def test_retenue_negative(self) -> None:
        result = runner.invoke(app, ["paie", "calculer", "100000", "--pret", "-1"])
        assert result.exit_code == 1

    def test_calculer_avec_retards_et_absences(self) -> None:
        result = runner.invoke(
            app,
            ["paie", "calculer", "500000", "--minutes-retard", "35", "--jours-absence", "1"],
        )
        assert result.exit_code == 0
        assert "24384.52" in result.output
        assert "240282.15" in result.output

    def test_absences_negatives(self) -> None:
        result = runner.invoke(app, ["paie", "calculer", "500000", "--jours-absence", "-1"])
        assert result.exit_code == 1

    def test_retard(self) -> None:
        result = runner.invoke(
            app, ["paie", "retard", "500000", "--prevue", "08:00", "--arrivee", "08:40"]
        )
        assert result.exit_code == 0
        assert "1657.25" in result.output
        assert "modere" in result.output

    def test_retard_heure_invalide(self) -> None:
        result = runner.invoke(
            app, ["paie", "retard", "500000", "--prevue", "8h", "--arrivee", "08:40"]
        )
        assert result.exit_code == 1
        assert "Heure invalide" in result.output


class TestTva:
    def test_calculer(self) -> None:
        result = runner.invoke(app, ["tva", "calculer", "500000", "--date", "2024-05-10"])
        assert result.exit_code == 0
        assert "90000.00" in result.output
        assert "590000.00" in result.output
        assert "2024-06-15" in result.output
        assert "CONFORME" in result.output

    def test_exportation(self) -> None:
        result = runner.invoke(
            app, ["tva", "calculer", "10000000", "--export", "--date", "2024-05-10"]
        )
        assert result.exit_code == 0
        assert "EXP001" in result.output
        assert "Numero fiscal client obligatoire" in result.output

    def test_devise_refusee(self) -> None:
        result = runner.invoke(app, ["tva", "calculer", "1000", "--devise", "GBP"])
        assert result.exit_code == 1
        assert "Devise non acceptee" in result.output

    def test_date_invalide(self) -> None:
        result = runner.invoke(app, ["tva", "calculer", "1000", "--date", "10/05/2024"])
        assert result.exit_code == 1

    def test_ninea_valide(self) -> None:
        result = runner.invoke(app, ["tva", "ninea", "0102012345684"])
        assert result.exit_code == 0
        assert "Dakar" in result.output

    def test_ninea_invalide(self) -> None:
        result = runner.invoke(app, ["tva", "ninea", "0102012345685"])
        assert result.exit_code == 1
