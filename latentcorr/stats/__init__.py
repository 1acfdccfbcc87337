"""
Statistical estimators for latent correlations.

1. **Common** (latentcorr.stats.common):
   Distribution primitives reused by several estimators, most notably the
   injectable bivariate normal CDF.

2. **Methods** (latentcorr.stats.methods):
   The estimators themselves: the iterative tetrachoric solvers and the
   closed-form approximations.

Example:
--------
>>> from latentcorr.stats.common.bivariate import OwensTCdf
>>> from latentcorr.stats.methods.tetrachoric import tetrachoric
>>> round(tetrachoric(20, 10, 10, 20, bvn_cdf=OwensTCdf()), 4)
0.5
"""
