"""Interface en ligne de commande psn."""
