"""Bessel J1 and Struve H1 for real arguments.

Both wrap the Cephes-derived routines of scipy.special, which already switch
between a power series near the origin and an asymptotic expansion for large
arguments. The wrappers add the domain checks the impedance models rely on.
"""
from __future__ import annotations
import numpy as np
from scipy import special as _sp

from .errors import NumericDomainError


def _check_finite(name: str, x) -> np.ndarray:
	try:
		arr = np.asarray(x, dtype=float)
	except (TypeError, ValueError):
		raise NumericDomainError(f"{name} must be a real number, got {x!r}") from None
	if not np.all(np.isfinite(arr)):
		raise NumericDomainError(f"{name} must be finite, got {x!r}")
	return arr


def _unwrap(arr: np.ndarray, like):
	if np.ndim(like) == 0:
		return float(arr)
	return arr


def bessel_j1(x):
	"""Cylindrical Bessel function of the first kind, order 1."""
	arr = _check_finite("x", x)
	return _unwrap(_sp.j1(arr), x)


def struve(v, x):
	"""Struve function H_v(x).

	H_v is evaluated at |x| and the sign of x is reapplied, so the result is
	odd in x and struve(v, 0) == 0 for v > -1.
	"""
	_check_finite("v", v)
	arr = _check_finite("x", x)
	H = np.sign(arr) * _sp.struve(v, np.abs(arr))
	return _unwrap(H, x)


def struve1(x):
	"""Shortcut for struve(1, x)."""
	return struve(1.0, x)
