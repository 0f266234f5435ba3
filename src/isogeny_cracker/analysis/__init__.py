"""Comparison of attack output against ground truth."""
