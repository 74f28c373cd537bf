"""
Special functions used by the clothoid formulas.
"""

from .fresnel import (
    fresnel_cs,
    fresnel_cs_moments,
    lommel_reduced,
    generalized_fresnel_cs,
    generalized_fresnel_cs1,
)
from .trig import (
    range_symm,
    sinc, sinc_d, sinc_dd, sinc_ddd,
    cosc, cosc_d, cosc_dd, cosc_ddd,
    atanc, atanc_d, atanc_dd, atanc_ddd,
)

__all__ = [
    'fresnel_cs',
    'fresnel_cs_moments',
    'lommel_reduced',
    'generalized_fresnel_cs',
    'generalized_fresnel_cs1',
    'range_symm',
    'sinc', 'sinc_d', 'sinc_dd', 'sinc_ddd',
    'cosc', 'cosc_d', 'cosc_dd', 'cosc_ddd',
    'atanc', 'atanc_d', 'atanc_dd', 'atanc_ddd',
]
