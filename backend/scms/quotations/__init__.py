"""
Module Quotations - Gestion des devis
"""
