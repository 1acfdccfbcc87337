"""
latentcorr: latent correlation estimates for 2x2 tables.

Two binary variables are often dichotomized versions of continuous traits.
Assuming the traits are bivariate normal, their correlation can be recovered
from the 2x2 cross table alone: this is the tetrachoric correlation.

latentcorr provides four interchangeable tetrachoric solvers (Divgi, a
digit-by-digit search, Kirk's TET8 and Brown's AS 116), the classic
closed-form approximations (Yule, Pearson, Camp, Becker-Clogg, Bonett-Price,
Digby, Edwards) and a Polars-backed helper that builds the table from two raw
fields.

The library logs through the standard `logging` module under the
``latentcorr`` logger and never configures handlers itself.

Example
-------
>>> import latentcorr
>>> round(latentcorr.tetrachoric(40, 10, 10, 40), 4)
0.809
>>> assert hasattr(latentcorr, "core")
>>> assert hasattr(latentcorr, "stats")
"""

import logging

from latentcorr import api, backends, core, stats
from latentcorr.__version__ import __version__
from latentcorr.core.errors import (
    ConvergenceFailure,
    DegenerateTableError,
    InvalidInputError,
    IterationLimitExceeded,
    OutOfRangeEscape,
    TetrachoricError,
)
from latentcorr.core.names import TetrachoricMethod
from latentcorr.core.table import ContingencyTable
from latentcorr.stats.methods.tetrachoric import (
    TetrachoricResult,
    tetrachoric,
    tetrachoric_result,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ContingencyTable",
    "ConvergenceFailure",
    "DegenerateTableError",
    "InvalidInputError",
    "IterationLimitExceeded",
    "OutOfRangeEscape",
    "TetrachoricError",
    "TetrachoricMethod",
    "TetrachoricResult",
    "__version__",
    "api",
    "backends",
    "core",
    "stats",
    "tetrachoric",
    "tetrachoric_result",
]
