"""Laser mirror puzzles: ray tracing, clue calculation and level generation."""
