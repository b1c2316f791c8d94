"""Application layer for payment reconciliation."""
