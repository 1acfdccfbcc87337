"""
latentcorr.api - Field-Based Facade
===================================

Call the estimators with two raw fields instead of cell counts, mirroring the
way the coefficients are usually requested: "how strongly are these two
yes/no questions related?".

Examples
--------
>>> from latentcorr.api.correlation import r_tetrachoric
>>> smoker = [1, 1, 1, 0, 0, 0, 1, 0]
>>> cough = [1, 1, 0, 0, 0, 1, 1, 0]
>>> -1.0 <= r_tetrachoric(smoker, cough) <= 1.0
True

Architecture
------------
- latentcorr.backends.polars: cross-tabulation of the fields
- latentcorr.stats.methods: the estimators
"""
