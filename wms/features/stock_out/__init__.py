"""Stock-out requests: approval and barcode-level deduction."""
