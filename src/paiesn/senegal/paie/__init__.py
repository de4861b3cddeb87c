"""Moteur de paie: impot sur le revenu, cotisations sociales, heures supplementaires."""
