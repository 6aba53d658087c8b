from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional
import cmath
import logging
import math
import numpy as np
import pandas as pd

from .air import AcousticConstants
from .bore import BoreProfile
from .cascade import input_impedance
from .constants import DEFAULT_MAX_FREQ, DEFAULT_STEP_FREQ, DEFAULT_TEMPERATURE
from .domains import RadiationMode, DampingMode, SectionVariation
from .errors import BoreImpError, InvalidGeometry, InvalidParameter, NumericDomainError, ReadError
from .readers import read_bore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
	freq: np.ndarray
	Zin: np.ndarray

	@property
	def real(self) -> np.ndarray:
		return self.Zin.real

	@property
	def imag(self) -> np.ndarray:
		return self.Zin.imag

	@property
	def mag(self) -> np.ndarray:
		return magnitude_db(self.Zin)

	def __len__(self) -> int:
		return len(self.freq)

	def rows(self) -> Iterator[tuple[float, float, float, float]]:
		for f, re, im, m in zip(self.freq, self.real, self.imag, self.mag):
			yield float(f), float(re), float(im), float(m)

	def to_frame(self) -> pd.DataFrame:
		return pd.DataFrame({
			"freq": self.freq,
			"real": self.real,
			"imag": self.imag,
			"mag": self.mag,
		})


def frequency_grid(max_freq: float, step_freq: float) -> np.ndarray:
	"""f_i = i * step for i in [0, floor(max/step) + 1)."""
	n = math.floor(max_freq / step_freq) + 1
	return np.arange(n, dtype=float) * step_freq


def magnitude_db(Z):
	"""10*log10(|Z|^2); where |Z|^2 is not positive the raw sum is returned instead."""
	Z = np.asarray(Z, dtype=complex)
	p = Z.real * Z.real + Z.imag * Z.imag
	with np.errstate(divide='ignore', invalid='ignore'):
		mag = np.where(p > 0, 10.0 * np.log10(np.where(p > 0, p, 1.0)), p)
	if mag.ndim == 0:
		return float(mag)
	return mag


def _check_positive(name: str, value) -> float:
	try:
		v = float(value)
	except (TypeError, ValueError):
		raise InvalidParameter(name, value, "must be a number") from None
	if not math.isfinite(v) or v <= 0.0:
		raise InvalidParameter(name, value, "must be finite and > 0")
	return v


class ImpedanceSweepDriver:
	"""Input impedance of a bore on a linear frequency grid.

	Point 0 (DC) is 0 by convention; every other point is the cascade result
	scaled by the mouthpiece area. All parameters are checked on construction,
	so a driver that exists can only fail on numerical grounds.
	"""

	def __init__(self, profile: Optional[BoreProfile], max_freq: float = DEFAULT_MAX_FREQ,
			step_freq: float = DEFAULT_STEP_FREQ, ac: Optional[AcousticConstants] = None):
		if profile is None or len(profile) == 0:
			raise ReadError("no bore profile given")
		self.max_freq = _check_positive("max_freq", max_freq)
		self.step_freq = _check_positive("step_freq", step_freq)
		self.ac = ac if ac is not None else AcousticConstants()
		profile.validate(allow_capped_end=True)
		bell = profile.last()
		if not profile.closed_end and bell.db <= 0.0 and RadiationMode.parse(self.ac.rad_calc) is not RadiationMode.NONE:
			raise InvalidGeometry(
				f"capped bell (db={bell.db}) cannot radiate with {self.ac.rad_calc.name} radiation",
				segment=bell.index)
		self.profile = profile
		self.S = profile.mouthpiece_area
		self.freq = frequency_grid(self.max_freq, self.step_freq)
		log.debug("sweep: %d segments, %d points up to %g Hz", len(profile), len(self.freq), self.max_freq)

	def __len__(self) -> int:
		return len(self.freq)

	def _point(self, f: float) -> complex:
		if f == 0.0:
			return 0j
		try:
			Z = self.S * input_impedance(self.profile, f, self.ac)
		except BoreImpError as e:
			e.add_note(f"at frequency {f} Hz")
			raise
		if not cmath.isfinite(Z):
			raise NumericDomainError(f"input impedance is not finite at {f} Hz")
		return Z

	def iter_points(self) -> Iterator[tuple[float, complex]]:
		"""Lazy (frequency, impedance) pairs; a new iterator starts over from 0 Hz."""
		for f in self.freq:
			yield float(f), self._point(float(f))

	def rows(self) -> Iterator[tuple[float, float, float, float]]:
		for f, Z in self.iter_points():
			yield f, Z.real, Z.imag, magnitude_db(Z)

	def run(self) -> SweepResult:
		"""Evaluate the whole grid at once. Any failing point aborts the sweep."""
		Zin = np.zeros_like(self.freq, dtype=complex)
		f = self.freq[1:]
		if f.size:
			try:
				Z = input_impedance(self.profile, f, self.ac)
			except BoreImpError as e:
				# find the offending point; _point notes its frequency
				for fi in f:
					self._point(float(fi))
				e.add_note(f"while sweeping {float(f[0])} to {float(f[-1])} Hz")
				raise
			bad = ~np.isfinite(Z)
			if np.any(bad):
				f_bad = float(f[np.argmax(bad)])
				raise NumericDomainError(f"input impedance is not finite at {f_bad} Hz")
			Zin[1:] = self.S * Z
		return SweepResult(freq=self.freq.copy(), Zin=Zin)


def _as_profile(source) -> BoreProfile:
	if isinstance(source, BoreProfile):
		return source
	return read_bore(source)


def calcimp(source, max_freq: float = DEFAULT_MAX_FREQ, step_freq: float = DEFAULT_STEP_FREQ,
		temperature: float = DEFAULT_TEMPERATURE, rad_calc=RadiationMode.PIPE,
		dump_calc=DampingMode.WALL, sec_var_calc=SectionVariation.OFF):
	"""Input impedance of a bore file (or BoreProfile).

	Returns (freq, real, imag, mag) NumPy arrays; mag is 10*log10(|Z|^2).
	"""
	ac = AcousticConstants(temperature=temperature, rad_calc=rad_calc,
		dump_calc=dump_calc, sec_var_calc=sec_var_calc)
	res = ImpedanceSweepDriver(_as_profile(source), max_freq, step_freq, ac).run()
	return res.freq, res.real, res.imag, res.mag


def print_men(source) -> pd.DataFrame:
	"""Geometry of a bore file (or BoreProfile): df, db, r [mm] and comment per segment."""
	return _as_profile(source).to_frame()
