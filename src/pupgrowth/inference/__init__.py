# src/pupgrowth/inference/__init__.py
"""
Forecasting from fitted growth models.

Components:
- predictions: Gompertz trajectories with widening confidence bands
- forecast: End-to-end forecast with heuristic fallback and cross-check
"""
