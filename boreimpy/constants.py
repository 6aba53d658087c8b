PROGRAMNAME = 'BoreImPy'

import numpy as np
TWOPI = 2.0 * np.pi

# Air reference values (calcimp / Ishizaki)
C_REF   = 331.45     # speed of sound at 0 degC [m/s]
RHO_REF = 1.2929     # air density at 0 degC [kg/m^3]
T_ZERO  = 273.16     # 0 degC [K]

# Dynamic viscosity of air (Keefe 1984) [Pa*s], referenced to 26.85 degC
ETA_REF   = 1.846e-5
ETA_SLOPE = 0.0025
ETA_T_REF = 26.85

# Viscothermal boundary-layer factor (viscous + thermal part folded together)
WALL_LOSS_FACTOR = 1.045

# Unflanged pipe end correction coefficient (Levine & Schwinger)
PIPE_END_CORRECTION = 0.6133

# calcimp defaults
DEFAULT_TEMPERATURE = 24.0   # degC
DEFAULT_MAX_FREQ    = 2000.0 # Hz
DEFAULT_STEP_FREQ   = 2.5    # Hz

# mensur files are written in millimetres
MM = 1e-3
