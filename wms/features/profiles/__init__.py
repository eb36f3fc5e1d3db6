"""Profiles and role-based access.

Callers identify themselves with the X-Profile-ID header; the dependencies
in this package resolve the profile and enforce role requirements.
"""
