import pytest

from boreimpy import AcousticConstants, BoreProfile, BoreSegment


@pytest.fixture
def lossless():
    return AcousticConstants(temperature=24.0, rad_calc="none", dump_calc="none", sec_var_calc="off")


@pytest.fixture
def cylinder():
    # 10 mm bore, 500 mm long
    return BoreProfile([BoreSegment(0, 0.010, 0.010, 0.500, "tube")])


@pytest.fixture
def two_cones():
    # 5 mm mouthpiece tapering to a 20 mm bell over 500 mm
    return BoreProfile.from_rows([
        (5.0, 12.5, 250.0, "leadpipe"),
        (12.5, 20.0, 250.0, "bell"),
    ], scale=1e-3)
