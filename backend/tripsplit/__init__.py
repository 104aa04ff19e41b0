"""Tripsplit backend: shared trip expenses and pairwise settlement."""
