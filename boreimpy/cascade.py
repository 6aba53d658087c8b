"""Input impedance of a bore by cascading segment two-ports from the bell to the mouthpiece.

All impedances here are acoustic impedances p/U [Pa*s/m^3]. The characteristic
impedance of a duct of area S is Zc = rhoc0 / S; losses enter only through the
complex wavenumber of walls.wavenumber().
"""
from __future__ import annotations
import numpy as np

from .bore import BoreProfile, BoreSegment
from .domains import SectionVariation
from .errors import InvalidParameter, InvalidGeometry, ReadError
from .radiation import radiation_impedance
from .walls import corrected_wavenumber


def _area(d: float) -> float:
	return np.pi * d * d / 4.0


def cylinder_transform(Z2, k, L: float, S: float, rhoc0: float):
	"""Impedance at the input of a cylinder of length L and area S loaded by Z2."""
	Zc = rhoc0 / S
	c = np.cos(k * L)
	s = np.sin(k * L)
	rigid = np.isinf(Z2)
	if np.any(rigid):
		# U2 = 0 at a rigid end
		Z2 = np.where(rigid, 0j, Z2)
		with np.errstate(divide='ignore', invalid='ignore'):
			Z1 = np.where(rigid, -1j * Zc * c / s, Zc * (Z2 * c + 1j * Zc * s) / (Zc * c + 1j * Z2 * s))
		return Z1
	return Zc * (Z2 * c + 1j * Zc * s) / (Zc * c + 1j * Z2 * s)


def cone_transform(Z2, k, L: float, d1: float, d2: float, rhoc0: float):
	"""Impedance at the input of a conical frustum (diameters d1 -> d2) loaded by Z2.

	Spherical waves about the apex: x*p solves the 1-D wave equation, with x
	the signed distance from the apex (negative for a contracting cone).
	"""
	r1, r2 = 0.5 * d1, 0.5 * d2
	x1 = r1 * L / (r2 - r1)
	x2 = x1 + L
	Omega = np.pi * ((r2 - r1) / L) ** 2   # S(x) = Omega * x^2
	A = 1j * k * rhoc0                       # j*omega*rho with the lossy k
	c = np.cos(k * L)
	s = np.sin(k * L)
	# unit volume velocity at the output, p2 = Z2; unit pressure, U2 = 0 at a rigid end
	rigid = np.isinf(Z2)
	if np.any(rigid):
		Z2 = np.where(rigid, 0j, Z2)
		F2 = np.where(rigid, x2 + 0j, x2 * Z2)
		dF2 = np.where(rigid, 1.0 + 0j, (F2 - A / Omega) / x2)
	else:
		F2 = x2 * Z2
		dF2 = (F2 - A / Omega) / x2
	F1 = F2 * c - dF2 * s / k
	dF1 = F2 * k * s + dF2 * c
	p1 = F1 / x1
	U1 = -(Omega / A) * (x1 * dF1 - F1)
	return p1 / U1


def segment_transform(Z2, frequency, seg: BoreSegment, ac):
	"""Apply the two-port of one segment to the load impedance Z2."""
	L = seg.length
	if L == 0.0:
		return Z2
	k = corrected_wavenumber(frequency, seg, ac)
	mode = SectionVariation.parse(ac.sec_var_calc)
	if mode is SectionVariation.ON:
		conical = seg.df != seg.db and seg.df > 0.0 and seg.db > 0.0
	elif mode is SectionVariation.OFF:
		conical = False
	else:
		raise InvalidParameter("sec_var_calc", ac.sec_var_calc, "unhandled section variation mode")
	if conical:
		return cone_transform(Z2, k, L, seg.df, seg.db, ac.rhoc0)
	d = seg.mean_diameter
	if not (d > 0.0):
		raise InvalidGeometry(f"mean diameter {d} must be > 0", segment=seg.index)
	return cylinder_transform(Z2, k, L, _area(d), ac.rhoc0)


def terminal_impedance(profile: BoreProfile, frequency, ac):
	"""Radiation load at the bell as an acoustic impedance; infinite for a closed end."""
	bell = profile.last()
	if profile.closed_end:
		return np.full(np.shape(frequency), np.inf + 0j)
	try:
		Zr = radiation_impedance(ac.rad_calc, frequency, bell.db, ac)
	except InvalidGeometry as e:
		raise InvalidGeometry(str(e), segment=bell.index) from e
	if np.all(Zr == 0):
		return Zr
	return Zr / _area(bell.db)


def input_impedance(profile: BoreProfile, frequency, ac):
	"""Acoustic input impedance at the mouthpiece face for frequency > 0 [Hz].

	frequency may be a scalar or an array of positive values.
	"""
	if profile is None or len(profile) == 0:
		raise ReadError("no bore profile given")
	f = np.asarray(frequency, dtype=float)
	if not np.all(np.isfinite(f)) or np.any(f <= 0):
		raise InvalidParameter("frequency", frequency, "must be finite and > 0")
	Z = terminal_impedance(profile, f, ac)
	for seg in reversed(profile):
		Z = segment_transform(Z, f, seg, ac)
	if np.ndim(frequency) == 0:
		return complex(Z)
	return np.asarray(Z, dtype=complex)
