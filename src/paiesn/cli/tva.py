"""Commandes CLI pour la TVA.

Usage:
    psn tva calculer 500000
    psn tva calculer 200000 --secteur AGRICULTURE
    psn tva calculer 10000000 --export
    psn tva ninea 0102012345684
"""

from __future__ import annotations

import datetime
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from paiesn.exceptions import ErreurPaieSN
from paiesn.senegal.tva.calcul import DemandeTVA
from paiesn.senegal.tva.ninea import extraire_infos_ninea, valider_ninea

app = typer.Typer()
console = Console()


@app.command("calculer")
def calculer(
    montant_ht: str = typer.Argument(..., help="Montant hors taxes"),
    devise: str = typer.Option("XOF", "--devise", "-d", help="Devise (XOF, EUR, USD)"),
    taux: Optional[str] = typer.Option(None, "--taux", help="Taux de TVA explicite (ex: 0.18)"),
    secteur: Optional[str] = typer.Option(None, "--secteur", "-s", help="Secteur d'activite"),
    export: bool = typer.Option(False, "--export", help="Transaction d'exportation"),
    gouvernement: bool = typer.Option(False, "--gouvernement", help="Transaction avec l'Etat"),
    code_exoneration: Optional[str] = typer.Option(None, "--code-exoneration", help="Code d'exoneration"),
    numero_fiscal: Optional[str] = typer.Option(None, "--numero-fiscal", "-n", help="NINEA du client"),
    date_transaction: Optional[str] = typer.Option(
        None, "--date", help="Date de la transaction (AAAA-MM-JJ, defaut: aujourd'hui)",
    ),
) -> None:
    """Calculer la TVA d'une transaction."""
    from paiesn.cli.app import construire_service, lire_montant

    try:
        jour = (
            datetime.date.fromisoformat(date_transaction)
            if date_transaction
            else datetime.date.today()
        )
    except ValueError as e:
        console.print(f"[red]Date invalide: {date_transaction}[/red]")
        raise typer.Exit(1) from e

    service = construire_service()
    try:
        demande = DemandeTVA(
            montant_ht=lire_montant(montant_ht),
            devise=devise,
            taux_tva=lire_montant(taux) if taux is not None else None,
            numero_fiscal_client=numero_fiscal,
            date_transaction=jour,
            secteur=secteur,
            exportation=export,
            gouvernemental=gouvernement,
            code_exoneration=code_exoneration,
        )
        resultat = service.tva(demande)
    except (ErreurPaieSN, ValidationError) as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title=f"TVA - {resultat.identifiant_calcul}", show_header=True, header_style="bold")
    table.add_column("Element", style="cyan")
    table.add_column("Valeur", justify="right")
    table.add_row("Montant HT", f"{resultat.montant_ht} {resultat.devise}")
    table.add_row("Taux", f"{resultat.taux_tva * 100}%")
    table.add_row("TVA", f"{resultat.montant_tva}")
    table.add_row("[bold]Montant TTC[/bold]", f"[bold]{resultat.montant_ttc}[/bold]")
    if resultat.exonere:
        table.add_row("Exoneration", resultat.raison_exoneration or "")
    table.add_section()
    table.add_row("Retenue a la source", f"{resultat.declaration.montant_retenue}")
    table.add_row("Periode de declaration", resultat.declaration.periode)
    table.add_row("Code DGI", resultat.declaration.code_dgi)
    table.add_row("Date limite", f"{resultat.conformite.date_limite_declaration}")
    table.add_row("Conformite", resultat.conformite.statut)
    console.print(table)

    for probleme in resultat.conformite.problemes:
        console.print(f"[yellow]Attention: {probleme}[/yellow]")
    if numero_fiscal and not resultat.numero_fiscal_valide:
        console.print(f"[yellow]Attention: NINEA invalide: {numero_fiscal}[/yellow]")


@app.command("ninea")
def ninea(
    numero: str = typer.Argument(..., help="NINEA a verifier (13 chiffres)"),
) -> None:
    """Verifier un NINEA et afficher ses composantes."""
    if not valider_ninea(numero):
        console.print(f"[red]NINEA invalide: {numero}[/red]")
        raise typer.Exit(1)

    infos = extraire_infos_ninea(numero)
    console.print(f"[green]NINEA valide: {numero}[/green]")
    console.print(f"  Region: {infos.region} ({infos.code_region})")
    console.print(f"  Annee d'immatriculation: {infos.annee:03d}")
    console.print(f"  Numero sequentiel: {infos.sequence}")
