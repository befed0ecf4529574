"""Coordinate and colour helpers shared by the loaders and visualizations."""
