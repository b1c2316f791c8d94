"""RentRecon - payment reconciliation for multi-tenant rental billing.

Matches incoming mobile-money and bank payments against outstanding tenant
invoices using fuzzy multi-factor scoring.
"""

__version__ = "0.3.0"
__author__ = "RentRecon Contributors"
