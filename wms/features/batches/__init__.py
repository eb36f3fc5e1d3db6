"""Processed batches, box barcodes and printable labels."""
