"""Warehouses and their floor/zone storage locations."""
