"""
Configuration spécifique au module Orders.
"""
from typing import Dict

# Libellés d'affichage des statuts
ORDER_STATUS_DISPLAY: Dict[str, str] = {
    "Pending": "En attente",
    "Shipped": "Expédiée",
    "Delivered": "Livrée",
    "Cancelled": "Annulée",
}
