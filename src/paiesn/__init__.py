"""PaieSN - Calculs de paie, d'impot et de TVA selon la legislation senegalaise."""

__version__ = "0.1.0"
