from __future__ import annotations
from dataclasses import dataclass, field, replace
import math

from .constants import (
	C_REF, RHO_REF, T_ZERO, ETA_REF, ETA_SLOPE, ETA_T_REF, DEFAULT_TEMPERATURE,
)
from .domains import RadiationMode, DampingMode, SectionVariation
from .errors import InvalidParameter


def speed_of_sound(temperature: float) -> float:
	return C_REF * math.sqrt(temperature / T_ZERO + 1.0)


def air_density(temperature: float) -> float:
	return RHO_REF * T_ZERO / (T_ZERO + temperature)


def air_viscosity(temperature: float) -> float:
	return ETA_REF * (1.0 + ETA_SLOPE * (temperature - ETA_T_REF))


@dataclass(frozen=True)
class AcousticConstants:
	"""Properties of the air column at a given temperature plus the calculation modes.

	c0, rho, rhoc0 and eta are derived from the temperature [degC] on
	construction. Use with_temperature() / with_modes() to get modified copies.
	"""
	temperature: float = DEFAULT_TEMPERATURE
	rad_calc: RadiationMode = RadiationMode.PIPE
	dump_calc: DampingMode = DampingMode.WALL
	sec_var_calc: SectionVariation = SectionVariation.OFF
	c0: float = field(init=False)
	rho: float = field(init=False)
	rhoc0: float = field(init=False)
	eta: float = field(init=False)

	def __post_init__(self):
		try:
			T = float(self.temperature)
		except (TypeError, ValueError):
			raise InvalidParameter("temperature", self.temperature, "must be a number") from None
		if not math.isfinite(T) or T <= -T_ZERO:
			raise InvalidParameter("temperature", self.temperature, "must be finite and above absolute zero")
		# frozen: derived fields go through object.__setattr__
		object.__setattr__(self, "temperature", T)
		object.__setattr__(self, "rad_calc", RadiationMode.parse(self.rad_calc))
		object.__setattr__(self, "dump_calc", DampingMode.parse(self.dump_calc))
		object.__setattr__(self, "sec_var_calc", SectionVariation.parse(self.sec_var_calc))
		c0 = speed_of_sound(T)
		rho = air_density(T)
		object.__setattr__(self, "c0", c0)
		object.__setattr__(self, "rho", rho)
		object.__setattr__(self, "rhoc0", rho * c0)
		object.__setattr__(self, "eta", air_viscosity(T))

	def with_temperature(self, temperature: float) -> "AcousticConstants":
		return replace(self, temperature=temperature)

	def with_modes(self, rad_calc=None, dump_calc=None, sec_var_calc=None) -> "AcousticConstants":
		return replace(
			self,
			rad_calc=self.rad_calc if rad_calc is None else rad_calc,
			dump_calc=self.dump_calc if dump_calc is None else dump_calc,
			sec_var_calc=self.sec_var_calc if sec_var_calc is None else sec_var_calc,
		)
