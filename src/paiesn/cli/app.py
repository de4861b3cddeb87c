"""Application CLI principale PaieSN."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

import paiesn
from paiesn.audit import JournalAuditLogging
from paiesn.exceptions import ErreurPaieSN
from paiesn.senegal.bareme import BaremeAnnuel, obtenir_bareme
from paiesn.senegal.configuration import charger_bareme
from paiesn.service import ServiceCalcul

app = typer.Typer(
    name="psn",
    help="PaieSN - Paie, impot sur le revenu et TVA au Senegal",
    no_args_is_help=True,
)

console = Console()

# Options globales stockees via le callback
_annee: int = 2024
_bareme_path: Optional[Path] = None


def obtenir_bareme_cli() -> BaremeAnnuel:
    """Bareme selectionne par --bareme (fichier) ou --annee (integre)."""
    if _bareme_path is not None:
        return charger_bareme(_bareme_path)
    return obtenir_bareme(_annee)


def construire_service() -> ServiceCalcul:
    """Service de calcul configure par les options globales; quitte en cas d'erreur."""
    try:
        bareme = obtenir_bareme_cli()
    except (ErreurPaieSN, FileNotFoundError) as e:
        console.print(f"[red]Erreur de bareme: {e}[/red]")
        raise typer.Exit(1) from e
    return ServiceCalcul(bareme, audit=JournalAuditLogging())


def lire_montant(texte: str) -> Decimal:
    """Convertit un argument texte en Decimal; quitte si le montant est illisible."""
    try:
        return Decimal(texte)
    except InvalidOperation as e:
        console.print(f"[red]Montant invalide: {texte}[/red]")
        raise typer.Exit(1) from e


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"PaieSN version {paiesn.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    annee: int = typer.Option(
        2024, "--annee", "-a", help="Annee du bareme integre",
    ),
    bareme: Optional[str] = typer.Option(
        None,
        "--bareme",
        "-b",
        help="Chemin vers un fichier de bareme YAML (remplace --annee)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Afficher les traces de calcul",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Afficher la version de PaieSN",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """PaieSN - Moteur de calcul de paie, d'impot et de TVA pour le Senegal."""
    global _annee, _bareme_path
    _annee = annee
    _bareme_path = Path(bareme) if bareme else None
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@app.command(name="impot")
def impot(
    revenu_annuel: str = typer.Argument(..., help="Revenu imposable annuel (XOF)"),
) -> None:
    """Calculer l'impot annuel sur le revenu avec le detail par tranche."""
    from paiesn.senegal.paie.impot import ventiler_impot_revenu

    montant = lire_montant(revenu_annuel)
    service = construire_service()
    try:
        total = service.impot_revenu(montant)
    except ErreurPaieSN as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title=f"Impot sur le revenu - {montant} XOF", show_header=True, header_style="bold")
    table.add_column("Tranche", style="cyan")
    table.add_column("Taux", justify="right")
    table.add_column("Base", justify="right")
    table.add_column("Impot", justify="right")
    for ligne in ventiler_impot_revenu(montant, service.bareme):
        maximum = ligne.tranche.maximum
        borne = "+" if maximum.is_infinite() else f"{maximum}"
        table.add_row(
            f"{ligne.tranche.minimum} - {borne}",
            f"{ligne.tranche.taux * 100}%",
            f"{ligne.base_imposable}",
            f"{ligne.impot}",
        )
    table.add_section()
    table.add_row("[bold]Impot annuel[/bold]", "", "", f"[bold]{total}[/bold]")
    console.print(table)


@app.command(name="cotisations")
def cotisations(
    salaire_brut: str = typer.Argument(..., help="Salaire brut mensuel (XOF)"),
) -> None:
    """Calculer les cotisations sociales salariales."""
    montant = lire_montant(salaire_brut)
    service = construire_service()
    try:
        resultat = service.cotisations(montant)
    except ErreurPaieSN as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title=f"Cotisations - Brut: {montant} XOF", show_header=True, header_style="bold")
    table.add_column("Cotisation", style="cyan")
    table.add_column("Montant", justify="right")
    table.add_row("IPRES", f"{resultat.ipres}")
    table.add_row("CSS", f"{resultat.css}")
    table.add_row("Allocations familiales", f"{resultat.allocations_familiales}")
    table.add_section()
    table.add_row("[bold]Total[/bold]", f"[bold]{resultat.total}[/bold]")
    console.print(table)


@app.command(name="heures-sup")
def heures_sup(
    taux_horaire: str = typer.Option(..., "--taux-horaire", "-t", help="Taux horaire (XOF)"),
    normales: str = typer.Option("0", "--normales", help="Heures sup en jour ouvrable"),
    nuit: str = typer.Option("0", "--nuit", help="Heures sup de nuit"),
    weekend: str = typer.Option("0", "--weekend", help="Heures sup le week-end"),
    feriees: str = typer.Option("0", "--feriees", help="Heures sup les jours feries"),
    cumul_annuel: str = typer.Option("0", "--cumul-annuel", help="Heures sup deja faites dans l'annee"),
    salaire_base: Optional[str] = typer.Option(None, "--salaire-base", help="Salaire de base (pour les primes)"),
    productivite: Optional[str] = typer.Option(None, "--productivite", help="Score de productivite"),
    qualite: Optional[str] = typer.Option(None, "--qualite", help="Score de qualite"),
    assiduite: Optional[str] = typer.Option(None, "--assiduite", help="Score d'assiduite"),
) -> None:
    """Calculer les heures supplementaires par categorie et les primes de rendement."""
    from pydantic import ValidationError

    from paiesn.senegal.paie.heures_sup import DemandeHeuresSup, IndicateursPerformance

    indicateurs = None
    if any(v is not None for v in (productivite, qualite, assiduite)):
        indicateurs = IndicateursPerformance(
            productivite=lire_montant(productivite or "0"),
            qualite=lire_montant(qualite or "0"),
            assiduite=lire_montant(assiduite or "0"),
        )

    service = construire_service()
    try:
        demande = DemandeHeuresSup(
            heures_normales=lire_montant(normales),
            heures_nuit=lire_montant(nuit),
            heures_weekend=lire_montant(weekend),
            heures_feriees=lire_montant(feriees),
            taux_horaire=lire_montant(taux_horaire),
            salaire_base=lire_montant(salaire_base) if salaire_base is not None else None,
            indicateurs=indicateurs,
            heures_cumul_annuel=lire_montant(cumul_annuel),
        )
        resultat = service.heures_sup(demande)
    except (ErreurPaieSN, ValidationError) as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title=f"Heures supplementaires - Taux horaire: {resultat.taux_horaire} XOF")
    table.add_column("Categorie", style="cyan")
    table.add_column("Heures", justify="right")
    table.add_column("Montant", justify="right")
    table.add_row("Normales (125%)", f"{resultat.heures_normales}", f"{resultat.montant_normales}")
    table.add_row("Nuit (150%)", f"{resultat.heures_nuit}", f"{resultat.montant_nuit}")
    table.add_row("Week-end (150%)", f"{resultat.heures_weekend}", f"{resultat.montant_weekend}")
    table.add_row("Feriees (200%)", f"{resultat.heures_feriees}", f"{resultat.montant_feriees}")
    table.add_row("Prime de rendement", "", f"{resultat.prime_rendement}")
    table.add_section()
    table.add_row(
        "[bold]Total[/bold]", f"{resultat.total_heures}", f"[bold]{resultat.montant_total}[/bold]"
    )
    console.print(table)

    for avertissement in resultat.avertissements:
        console.print(f"[yellow]Attention: {avertissement}[/yellow]")


# Import et enregistrement des sous-commandes
from paiesn.cli.paie import app as paie_app  # noqa: E402
from paiesn.cli.tva import app as tva_app  # noqa: E402

app.add_typer(paie_app, name="paie", help="Calcul de la paie mensuelle")
app.add_typer(tva_app, name="tva", help="Calcul de la TVA et validation NINEA")
