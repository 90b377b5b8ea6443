# src/pupgrowth/evaluation/__init__.py
"""
Evaluation of growth estimates.

Components:
- fit_quality: R², RMSE and MAE of a fitted curve
- validation: Biological plausibility checks and estimate bounding
"""
