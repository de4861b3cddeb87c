"""Commandes CLI pour le calcul de la paie.

Usage:
    psn paie calculer 500000
    psn paie calculer 500000 --heures-sup 10 --transport 25000 --avance 50000
    psn paie calculer 500000 --minutes-retard 35 --jours-absence 1
    psn paie retard 500000 --prevue 08:00 --arrivee 08:40
"""

from __future__ import annotations

import datetime

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from paiesn.exceptions import ErreurPaieSN, ErreurSalaireNetNegatif
from paiesn.senegal.paie.moteur import HeuresPeriode, Primes, ResultatPaie, Retenues
from paiesn.senegal.paie.retenues import (
    calculer_penalite_retard,
    calculer_retard,
    calculer_retenue_absences,
)

app = typer.Typer()
console = Console()


@app.command("calculer")
def calculer(
    salaire_base: str = typer.Argument(..., help="Salaire de base mensuel (XOF)"),
    heures_sup: str = typer.Option("0", "--heures-sup", help="Heures supplementaires du mois"),
    cumul_annuel: str = typer.Option("0", "--cumul-annuel", help="Heures sup deja faites dans l'annee"),
    prime_rendement: str = typer.Option("0", "--prime-rendement", help="Prime de rendement"),
    transport: str = typer.Option("0", "--transport", help="Indemnite de transport"),
    repas: str = typer.Option("0", "--repas", help="Indemnite de repas"),
    logement: str = typer.Option("0", "--logement", help="Indemnite de logement"),
    autres_primes: str = typer.Option("0", "--autres-primes", help="Autres primes"),
    avance: str = typer.Option("0", "--avance", help="Avance sur salaire"),
    pret: str = typer.Option("0", "--pret", help="Remboursement de pret"),
    absence: str = typer.Option("0", "--absence", help="Retenue pour absence"),
    retard: str = typer.Option("0", "--retard", help="Retenue pour retard"),
    autres_retenues: str = typer.Option("0", "--autres-retenues", help="Autres retenues"),
    minutes_retard: int = typer.Option(
        0, "--minutes-retard", help="Minutes de retard du mois (apres tolerance)"
    ),
    jours_absence: int = typer.Option(0, "--jours-absence", help="Jours d'absence non payes"),
    demi_journees: int = typer.Option(0, "--demi-journees", help="Demi-journees d'absence non payees"),
) -> None:
    """Calculer une paie mensuelle complete et afficher la ventilation."""
    from paiesn.cli.app import construire_service, lire_montant

    base = lire_montant(salaire_base)
    service = construire_service()
    assiduite = service.bareme.assiduite
    try:
        montant_retard = lire_montant(retard) + calculer_penalite_retard(
            minutes_retard, base, assiduite
        )
        montant_absence = lire_montant(absence) + calculer_retenue_absences(
            base, jours_absence, demi_journees, assiduite
        )
        resultat = service.paie(
            base,
            heures=HeuresPeriode(
                heures_sup=lire_montant(heures_sup),
                heures_cumul_annuel=lire_montant(cumul_annuel),
            ),
            primes=Primes(
                prime_rendement=lire_montant(prime_rendement),
                transport=lire_montant(transport),
                repas=lire_montant(repas),
                logement=lire_montant(logement),
                autres=lire_montant(autres_primes),
            ),
            retenues=Retenues(
                avance=lire_montant(avance),
                pret=lire_montant(pret),
                absence=montant_absence,
                retard=montant_retard,
                autres=lire_montant(autres_retenues),
            ),
        )
    except ErreurSalaireNetNegatif as e:
        console.print(
            f"[red]Erreur: salaire net negatif ({e.salaire_net}) "
            f"pour un brut de {e.salaire_brut}[/red]"
        )
        raise typer.Exit(code=1) from e
    except (ErreurPaieSN, ValidationError) as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(code=1) from e

    _afficher_ventilation(resultat)
    for avertissement in resultat.avertissements:
        console.print(f"[yellow]Attention: {avertissement}[/yellow]")


def _lire_heure(valeur: str) -> datetime.time:
    try:
        return datetime.time.fromisoformat(valeur)
    except ValueError as e:
        console.print(f"[red]Heure invalide (format HH:MM attendu): {valeur}[/red]")
        raise typer.Exit(code=1) from e


@app.command("retard")
def retard(
    salaire_base: str = typer.Argument(..., help="Salaire de base mensuel (XOF)"),
    prevue: str = typer.Option(..., "--prevue", help="Heure d'arrivee prevue (HH:MM)"),
    arrivee: str = typer.Option(..., "--arrivee", help="Heure d'arrivee reelle (HH:MM)"),
) -> None:
    """Calculer la penalite d'un retard apres tolerance."""
    from paiesn.cli.app import construire_service, lire_montant

    base = lire_montant(salaire_base)
    service = construire_service()
    try:
        calcul = calculer_retard(
            _lire_heure(prevue), _lire_heure(arrivee), base, service.bareme.assiduite
        )
    except ErreurPaieSN as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Retard", show_header=True, header_style="bold")
    table.add_column("Element", style="cyan")
    table.add_column("Valeur", justify="right")
    table.add_row("Minutes retenues", str(calcul.minutes))
    table.add_row("Categorie", calcul.categorie.value)
    table.add_row("Penalite", f"{calcul.penalite}")
    table.add_row("Justificatif requis", "oui" if calcul.justification_requise else "non")
    table.add_row("Approbation requise", "oui" if calcul.approbation_requise else "non")
    table.add_row("Action recommandee", calcul.action_recommandee)
    console.print(table)


def _afficher_ventilation(resultat: ResultatPaie) -> None:
    """Affiche la ventilation complete de la paie avec Rich."""
    table = Table(
        title=f"Paie - Brut: {resultat.brut} XOF",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Element", style="cyan")
    table.add_column("Montant", justify="right")

    # Gains
    table.add_row("Salaire de base", f"{resultat.salaire_base}")
    table.add_row(
        f"Heures sup ({resultat.heures_sup} h a {resultat.taux_horaire})",
        f"{resultat.montant_heures_sup}",
    )
    table.add_row("Primes et indemnites", f"{resultat.total_primes}")
    table.add_row("[bold]Salaire brut[/bold]", f"[bold]{resultat.brut}[/bold]")

    # Retenues
    table.add_section()
    table.add_row("[bold]Retenues[/bold]", "")
    table.add_row("  Impot sur le revenu", f"{resultat.impot_revenu}")
    table.add_row("  IPRES", f"{resultat.cotisations.ipres}")
    table.add_row("  CSS", f"{resultat.cotisations.css}")
    table.add_row("  Allocations familiales", f"{resultat.cotisations.allocations_familiales}")
    table.add_row("  Retenues diverses", f"{resultat.total_retenues_diverses}")
    table.add_row(
        "[bold]Total retenues[/bold]",
        f"[bold red]{resultat.total_retenues}[/bold red]",
    )

    # Net
    table.add_section()
    table.add_row(
        "[bold green]Salaire net[/bold green]",
        f"[bold green]{resultat.net}[/bold green]",
    )

    console.print(table)
