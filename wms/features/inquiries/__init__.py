"""Customer inquiry module.

Storefront inquiries are followed up by sales operators and may be
converted into sales orders.
"""
