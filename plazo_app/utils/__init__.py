"""
Utility functions module.

Date handling for settlement computations and guarded numeric aggregation
over trade legs.
"""
