"""Role dashboards and downloadable reports."""
