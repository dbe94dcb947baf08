# gpclass_jax/gp/kernels/__init__.py

from .base import register, get
from .params import KernelParams
from .se import squared_exponential, gram
from .utils import scaled_sqdist, as_column

# --------------------------------------------------
# Registry
# --------------------------------------------------
register("se", squared_exponential)
register("rbf", squared_exponential)

__all__ = [
    "get",
    "register",
    "KernelParams",
    "squared_exponential",
    "gram",
    "scaled_sqdist",
    "as_column",
]
