"""Classification and expansion engine.

Every function here is pure: a point is classified from the digits in its
label and expanded through its category's displacement catalog. Reading and
writing points lives in ``displaced_points.core.io``.
"""
