"""
U-shaped staircase estimator: step geometry, block courses, slab cutting,
labor and transport hours.
"""
