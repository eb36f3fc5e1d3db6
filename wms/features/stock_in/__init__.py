"""Stock-in module: field submissions, approval and batch processing.

Approved stock-ins are processed into a batch of barcoded boxes placed at
one warehouse location.
"""
