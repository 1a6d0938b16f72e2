"""
Deterministic staircase calculation engine.

Pure Python math. Given the measured fields of a U-shaped flight,
produce block courses, mortar/fill mass, a slab cutting plan with
offcut reuse, and the labor/transport task breakdown.
"""
