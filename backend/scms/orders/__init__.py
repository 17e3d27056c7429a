"""
Module Orders - Gestion des commandes
"""
