"""Command-line interface for RentRecon."""
