"""
latentcorr.core.names
=====================

Typed names shared across the package.

- `TetrachoricMethod`: an Enum for the available tetrachoric solvers.
- `MethodTag`: the matching `Literal` for string-typed call sites.
- Literal tags for the variants of the closed-form approximations.

Examples
--------
>>> from latentcorr.core.names import TetrachoricMethod
>>> TetrachoricMethod.DIVGI.value
'divgi'
>>> TetrachoricMethod.parse("brown") is TetrachoricMethod.BROWN
True
"""

from __future__ import annotations
from enum import Enum
from typing import Literal, Union


class TetrachoricMethod(str, Enum):
    """Available tetrachoric correlation solvers.

    - DIVGI: closed-form start refined by Newton-Raphson (Divgi, 1979)
    - SEARCH: digit-by-digit search on the bivariate normal CDF
    - KIRK: port of the TET8 subroutine (Kirk, 1973)
    - BROWN: port of Algorithm AS 116 (Brown, 1977)
    """

    DIVGI = "divgi"
    SEARCH = "search"
    KIRK = "kirk"
    BROWN = "brown"

    @classmethod
    def parse(cls, value: Union["TetrachoricMethod", str]) -> "TetrachoricMethod":
        """Return the enum member for `value`, raising ValueError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(repr(m.value) for m in cls)
            raise ValueError(
                f"Unknown tetrachoric method {value!r}; expected one of {valid}"
            ) from None


MethodTag = Literal["divgi", "search", "kirk", "brown"]
MethodLike = Union[TetrachoricMethod, str]

# Variant tags for the closed-form approximations.
CampVariant = Literal["cureton", "camp1", "camp2"]
BeckerCloggVersion = Literal[1, 2]
BonettPriceVersion = Literal[1, 2]
