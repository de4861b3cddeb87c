"""Regles fiscales et sociales senegalaises."""
