"""Product catalog module: product master data and storefront browsing."""
