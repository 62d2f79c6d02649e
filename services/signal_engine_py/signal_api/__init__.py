"""HTTP surface for the signal engine."""
