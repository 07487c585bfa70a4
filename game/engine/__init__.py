"""Simulation core and pygame front-end helpers for the Eco-Sort platformer."""
