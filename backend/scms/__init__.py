"""SCMS - moteur devis / commandes."""
