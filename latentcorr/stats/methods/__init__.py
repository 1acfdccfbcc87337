"""
latentcorr.stats.methods
========================

Estimators of the latent correlation of a 2x2 table.

Available methods:
- `tetrachoric`: iterative solvers (divgi, search, kirk, brown)
- `approximations`: closed-form approximations and related 2x2 measures
"""
