"""Adapters connecting the population engine to infrastructure."""
