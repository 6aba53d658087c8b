from __future__ import annotations
import numpy as np

from .constants import TWOPI, PIPE_END_CORRECTION
from .domains import RadiationMode
from .errors import InvalidGeometry, InvalidParameter
from .special import bessel_j1, struve


def _ka(frequency: np.ndarray, diameter: float, ac) -> np.ndarray:
	k = TWOPI * frequency / ac.c0
	return k * 0.5 * diameter


def baffled_piston(ka: np.ndarray, rhoc0: float) -> np.ndarray:
	"""Circular piston in an infinite baffle.
	Z = rhoc0 * [ 1 - J1(2ka)/(ka) + j H1(2ka)/(ka) ]
	"""
	x = 2.0 * ka
	with np.errstate(divide='ignore', invalid='ignore'):
		denom = np.where(ka == 0, np.inf, ka)
		Rn = 1.0 - bessel_j1(x) / denom
		Xn = struve(1, x) / denom
	Z = rhoc0 * (Rn + 1j * Xn)
	return np.where(ka == 0, 0j, Z)


def unflanged_pipe(ka: np.ndarray, rhoc0: float) -> np.ndarray:
	"""Open end of an unflanged pipe.

	Low-frequency limits of Levine & Schwinger, R ~ (ka)^2/4 and X ~ 0.6133 ka,
	blended so that R -> rhoc0 and X -> 0 for ka >> 1. Provisional: not yet
	checked against reference output.
	"""
	with np.errstate(divide='ignore', invalid='ignore'):
		Rn = 1.0 / (1.0 + 4.0 / ka**2)
		Xn = 1.0 / (1.0 / (PIPE_END_CORRECTION * ka) + np.pi * ka / 2.0)
	Z = rhoc0 * (Rn + 1j * Xn)
	return np.where(ka == 0, 0j, Z)


def radiation_impedance(mode, frequency, diameter: float, ac):
	"""Specific radiation impedance [Pa*s/m] of the open end, i.e. on the rhoc0 scale.

	frequency may be a scalar or an array; diameter is the bore diameter at
	the open end [m].
	"""
	mode = RadiationMode.parse(mode)
	f = np.asarray(frequency, dtype=float)
	if not np.all(np.isfinite(f)) or np.any(f < 0):
		raise InvalidParameter("frequency", frequency, "must be finite and >= 0")
	if mode is RadiationMode.NONE:
		Z = np.zeros_like(f, dtype=complex)
	else:
		if not (float(diameter) > 0.0):
			raise InvalidGeometry(f"radiating diameter {diameter} must be > 0 for {mode.name} radiation")
		ka = _ka(f, float(diameter), ac)
		if mode is RadiationMode.BAFFLE:
			Z = baffled_piston(ka, ac.rhoc0)
		elif mode is RadiationMode.PIPE:
			Z = unflanged_pipe(ka, ac.rhoc0)
		else:
			raise InvalidParameter("rad_calc", mode, "unhandled radiation mode")
	if np.ndim(frequency) == 0:
		return complex(Z)
	return Z
