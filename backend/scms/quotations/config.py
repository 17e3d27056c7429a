"""
Configuration spécifique au module Quotations.
"""
from typing import Dict

from scms.config import settings

# Durée de validité par défaut d'un devis (en jours)
DEFAULT_VALIDITY_DAYS: int = settings.QUOTATION_VALIDITY_DAYS

# Libellés d'affichage des statuts
QUOTATION_STATUS_DISPLAY: Dict[str, str] = {
    "Pending": "En attente",
    "Approved": "Approuvé",
    "Rejected": "Refusé",
    "Expired": "Expiré",
}
