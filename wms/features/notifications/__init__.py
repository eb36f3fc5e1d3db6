"""In-app notifications addressed to a profile or to a whole role."""
