"""
latentcorr.stats.common
=======================

Distribution primitives shared by the estimators. The methods here know
nothing about contingency tables.
"""
