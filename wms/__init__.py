"""Warehouse management backend."""
