"""
Module Stock - Consultation de l'inventaire
"""
