# import things so they will be available:
# import boreimpy as bi
# bi.calcimp("trumpet.men")

from .errors import BoreImpError, ReadError, InvalidParameter, InvalidGeometry, NumericDomainError
from .domains import RadiationMode, DampingMode, SectionVariation
from .air import AcousticConstants
from .bore import BoreSegment, BoreProfile
from .special import bessel_j1, struve, struve1
from .walls import wavenumber, corrected_wavenumber
from .radiation import radiation_impedance
from .cascade import input_impedance
from .response import ImpedanceSweepDriver, SweepResult, frequency_grid, magnitude_db, calcimp, print_men
from .readers import BoreReader, MensurReader, XmensurReader, YamlBoreReader, read_bore

from .constants import PROGRAMNAME, TWOPI

# calcimp-style mode names
NONE = RadiationMode.NONE
PIPE = RadiationMode.PIPE
BAFFLE = RadiationMode.BAFFLE

__all__ = [
	# errors
	"BoreImpError", "ReadError", "InvalidParameter", "InvalidGeometry", "NumericDomainError",
	# modes and medium
	"RadiationMode", "DampingMode", "SectionVariation", "AcousticConstants",
	"NONE", "PIPE", "BAFFLE",
	# geometry
	"BoreSegment", "BoreProfile",
	"BoreReader", "MensurReader", "XmensurReader", "YamlBoreReader", "read_bore",
	# engine
	"bessel_j1", "struve", "struve1",
	"wavenumber", "corrected_wavenumber", "radiation_impedance", "input_impedance",
	"ImpedanceSweepDriver", "SweepResult", "frequency_grid", "magnitude_db",
	"calcimp", "print_men",
	# constants
	"PROGRAMNAME", "TWOPI",
]
