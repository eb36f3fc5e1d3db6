"""Sales orders and their hand-off to stock-out."""
