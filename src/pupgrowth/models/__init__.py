# src/pupgrowth/models/__init__.py
"""
Growth models.

Components:
- gompertz: Closed-form Gompertz curve and parameter validation
- breed_prior: Breed-conditioned priors and weight-based classification
- curve_fit: Regularised least-squares Gompertz fitting
- heuristics: Veterinary rule-of-thumb adult weight estimation
"""
