"""
Dataset Module

Reference table records, the once-only model statistics store and the
uploaded-table summary.
"""
