# backend/courtbook/constants.py
"""
Enumerations shared by models, schemas and services.
"""

from enum import Enum


class PaymentMethod(str, Enum):
    ON_SITE = "on_site"
    CARD_SIMULATED = "card_simulated"
    INSTANT_TRANSFER_SIMULATED = "instant_transfer_simulated"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Role(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
