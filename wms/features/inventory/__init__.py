"""Inventory module for barcoded stock, scanning, transfers and the movement ledger."""
