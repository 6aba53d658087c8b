import numpy as np
import pytest

from boreimpy import (
    AcousticConstants, BoreProfile, BoreSegment, input_impedance,
    InvalidGeometry, InvalidParameter,
)
from boreimpy.cascade import cylinder_transform, cone_transform


def _k(f, ac):
    return 2 * np.pi * f / ac.c0


@pytest.mark.parametrize("f", [2.5, 100.0, 333.3, 1234.5, 1999.0])
def test_lossless_cylinder_closed_form(cylinder, lossless, f):
    Zc = lossless.rhoc0 / (np.pi * 0.010**2 / 4)
    expected = 1j * Zc * np.tan(_k(f, lossless) * 0.5)
    assert input_impedance(cylinder, f, lossless) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize("f", [50.0, 700.0, 1800.0])
def test_lossless_cylinder_with_baffle_load(cylinder, lossless, f):
    ac = lossless.with_modes(rad_calc="baffle")
    from boreimpy import radiation_impedance
    S = np.pi * 0.010**2 / 4
    Zc = ac.rhoc0 / S
    ZL = radiation_impedance("baffle", f, 0.010, ac) / S
    t = np.tan(_k(f, ac) * 0.5)
    expected = Zc * (ZL + 1j * Zc * t) / (Zc + 1j * ZL * t)
    assert input_impedance(cylinder, f, ac) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize("f", [80.0, 440.0, 1500.0])
def test_open_cone_closed_form(lossless, f):
    # Zin = j Zc1 / (cot kL + 1/(k x1)), x1 = distance from the apex to the input
    ac = lossless.with_modes(sec_var_calc="on")
    d1, d2, L = 0.008, 0.024, 0.4
    profile = BoreProfile([BoreSegment(0, d1, d2, L)])
    x1 = (d1 / 2) * L / ((d2 - d1) / 2)
    k = _k(f, ac)
    Zc1 = ac.rhoc0 / (np.pi * d1**2 / 4)
    expected = 1j * Zc1 / (1 / np.tan(k * L) + 1 / (k * x1))
    assert input_impedance(profile, f, ac) == pytest.approx(expected, rel=1e-8)


def test_cone_tends_to_cylinder():
    ac = AcousticConstants(rad_calc="baffle", dump_calc="wall")
    k = 2 * np.pi * 600.0 / ac.c0
    ZL = 1e6 + 3e6j
    d = 0.01
    Zcone = cone_transform(ZL, k, 0.3, d, d * (1 + 1e-7), ac.rhoc0)
    Zcyl = cylinder_transform(ZL, k, 0.3, np.pi * (d * (1 + 0.5e-7))**2 / 4, ac.rhoc0)
    assert Zcone == pytest.approx(Zcyl, rel=1e-5)


def test_contracting_cone_differs_from_expanding_one(lossless):
    ac = lossless.with_modes(sec_var_calc="on")
    up = BoreProfile([BoreSegment(0, 0.01, 0.02, 0.3)])
    down = BoreProfile([BoreSegment(0, 0.02, 0.01, 0.3)])
    Zu = input_impedance(up, 500.0, ac)
    Zd = input_impedance(down, 500.0, ac)
    assert np.isfinite(Zu) and np.isfinite(Zd)
    assert Zu != pytest.approx(Zd)
    # the open-cone formula holds with a signed apex distance
    x1 = 0.01 * 0.3 / (0.005 - 0.01)
    k = _k(500.0, ac)
    Zc1 = ac.rhoc0 / (np.pi * 0.02**2 / 4)
    assert Zd == pytest.approx(1j * Zc1 / (1 / np.tan(k * 0.3) + 1 / (k * x1)), rel=1e-8)


def test_section_variation_off_uses_mean_cylinder(lossless):
    cone = BoreProfile([BoreSegment(0, 0.008, 0.012, 0.4)])
    tube = BoreProfile([BoreSegment(0, 0.010, 0.010, 0.4)])
    assert input_impedance(cone, 321.0, lossless) == pytest.approx(
        input_impedance(tube, 321.0, lossless), rel=1e-12)


@pytest.mark.parametrize("sec_var", ["off", "on"])
def test_zero_length_segment_is_identity(sec_var):
    ac = AcousticConstants(rad_calc="baffle", dump_calc="wall", sec_var_calc=sec_var)
    plain = BoreProfile.from_rows([(6, 9, 200), (9, 14, 300)], scale=1e-3)
    padded = BoreProfile.from_rows([(6, 9, 200), (9, 30, 0, "step"), (9, 14, 300)], scale=1e-3)
    assert input_impedance(padded, 440.0, ac) == input_impedance(plain, 440.0, ac)


def test_vectorised_matches_scalar(two_cones):
    ac = AcousticConstants(rad_calc="baffle", dump_calc="wall", sec_var_calc="on")
    f = np.array([10.0, 250.0, 1000.0])
    Z = input_impedance(two_cones, f, ac)
    for fi, Zi in zip(f, Z):
        assert Zi == pytest.approx(input_impedance(two_cones, fi, ac), rel=1e-12)


def test_wall_losses_damp_resonances(cylinder, lossless):
    lossy = lossless.with_modes(dump_calc="wall")
    # first impedance maximum of an ideally open tube, f = c/(4L)
    f = lossless.c0 / (4 * 0.5)
    assert abs(input_impedance(cylinder, f, lossy)) < abs(input_impedance(cylinder, f, lossless))
    assert input_impedance(cylinder, f, lossy).real > 0


@pytest.mark.parametrize("f", [0.0, -10.0, float("nan")])
def test_frequency_must_be_positive(cylinder, lossless, f):
    with pytest.raises(InvalidParameter):
        input_impedance(cylinder, f, lossless)


def test_capped_bell(lossless):
    capped = BoreProfile.from_rows([(10, 10, 400), (10, 0, 0, "cap")], scale=1e-3)
    assert np.isfinite(input_impedance(capped, 300.0, lossless))
    with pytest.raises(InvalidGeometry) as ei:
        input_impedance(capped, 300.0, lossless.with_modes(rad_calc="baffle"))
    assert ei.value.segment == 1


@pytest.mark.parametrize("f", [100.0, 333.3, 1234.5])
def test_rigid_end_cylinder_closed_form(lossless, f):
    closed = BoreProfile([BoreSegment(0, 0.010, 0.010, 0.500)], closed_end=True)
    Zc = lossless.rhoc0 / (np.pi * 0.010**2 / 4)
    expected = -1j * Zc / np.tan(_k(f, lossless) * 0.5)
    assert input_impedance(closed, f, lossless) == pytest.approx(expected, rel=1e-9)
    # the radiation mode plays no part at a rigid end
    assert input_impedance(closed, f, lossless.with_modes(rad_calc="baffle")) == pytest.approx(expected, rel=1e-9)


def test_rigid_end_cone_tends_to_cylinder(lossless):
    ac = lossless.with_modes(sec_var_calc="on")
    d = 0.012
    cone = BoreProfile([BoreSegment(0, d, d * (1 + 1e-7), 0.3)], closed_end=True)
    cyl = BoreProfile([BoreSegment(0, d, d, 0.3)], closed_end=True)
    f = np.array([150.0, 450.0, 1000.0])
    np.testing.assert_allclose(input_impedance(cone, f, ac), input_impedance(cyl, f, ac), rtol=1e-5)


def test_rigid_end_behind_several_segments(two_cones, lossless):
    rows = [(5.0, 12.5, 250.0), (12.5, 20.0, 250.0)]
    closed = BoreProfile.from_rows(rows, scale=1e-3, closed_end=True)
    for sec_var in ("off", "on"):
        ac = lossless.with_modes(sec_var_calc=sec_var, dump_calc="wall")
        Zc = input_impedance(closed, np.array([200.0, 700.0]), ac)
        Zo = input_impedance(two_cones, np.array([200.0, 700.0]), ac)
        assert np.all(np.isfinite(Zc))
        assert not np.allclose(Zc, Zo)
