"""Thermoviscous wall losses as a complex wavenumber.

k' = k * (1 + (1 - j) * delta / a)

with delta = 1.045 * sqrt(eta / (rho * omega)) the boundary-layer term of
Benade / Keefe for air (viscous and thermal parts folded into one factor)
and a the duct radius. Time convention exp(+j omega t), waves exp(-j k' x):
the negative imaginary part of k' makes them decay along the duct.
"""
from __future__ import annotations
import numpy as np

from .constants import TWOPI, WALL_LOSS_FACTOR
from .domains import DampingMode
from .errors import InvalidGeometry, InvalidParameter


def boundary_layer(frequency, ac):
	"""delta(f) [m]; zero at f == 0."""
	f = np.asarray(frequency, dtype=float)
	omega = TWOPI * f
	with np.errstate(divide='ignore', invalid='ignore'):
		delta = WALL_LOSS_FACTOR * np.sqrt(ac.eta / (ac.rho * np.where(omega > 0, omega, np.inf)))
	return delta


def wavenumber(frequency, radius: float, ac, segment: int | None = None):
	"""Complex wavenumber for a duct of given radius [m] at frequency [Hz]."""
	f = np.asarray(frequency, dtype=float)
	if not np.all(np.isfinite(f)) or np.any(f < 0):
		raise InvalidParameter("frequency", frequency, "must be finite and >= 0")
	if not (radius > 0.0):
		raise InvalidGeometry(f"radius {radius} must be > 0", segment=segment)
	k = (TWOPI * f / ac.c0) + 0j
	mode = DampingMode.parse(ac.dump_calc)
	if mode is DampingMode.NONE:
		kc = k
	elif mode is DampingMode.WALL:
		kc = k * (1.0 + (1.0 - 1j) * boundary_layer(f, ac) / radius)
	else:
		raise InvalidParameter("dump_calc", ac.dump_calc, "unhandled damping mode")
	if np.ndim(frequency) == 0:
		return complex(kc)
	return kc


def corrected_wavenumber(frequency, segment, ac):
	"""Wavenumber for a BoreSegment, using its mean radius."""
	return wavenumber(frequency, 0.25 * (segment.df + segment.db), ac, segment=segment.index)
