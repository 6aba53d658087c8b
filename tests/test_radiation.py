import numpy as np
import pytest

from boreimpy import (
    AcousticConstants, radiation_impedance, bessel_j1, struve,
    InvalidGeometry, InvalidParameter,
)


@pytest.fixture
def ac():
    return AcousticConstants(temperature=20.0)


@pytest.mark.parametrize("f", [0.0, 2.5, 440.0, 1e5])
@pytest.mark.parametrize("d", [0.0, 0.012, 0.3, -1.0])
def test_none_is_zero(ac, f, d):
    assert radiation_impedance("none", f, d, ac) == 0


@pytest.mark.parametrize("mode", ["baffle", "pipe"])
@pytest.mark.parametrize("d", [0.001, 0.012, 0.3])
def test_zero_frequency_is_exactly_zero(ac, mode, d):
    Z = radiation_impedance(mode, 0.0, d, ac)
    assert Z == 0
    assert np.isfinite(Z)


def test_baffle_matches_piston_formula(ac):
    f, d = 1000.0, 0.12
    ka = 2 * np.pi * f / ac.c0 * d / 2
    expected = ac.rhoc0 * (1 - bessel_j1(2 * ka) / ka) + 1j * ac.rhoc0 * struve(1, 2 * ka) / ka
    assert radiation_impedance("baffle", f, d, ac) == pytest.approx(expected, rel=1e-12)


def test_baffle_low_and_high_frequency_limits(ac):
    d = 0.012
    lo = radiation_impedance("baffle", 1.0, d, ac)
    assert abs(lo) < 1e-3 * ac.rhoc0
    hi = radiation_impedance("baffle", 2e5, 1.0, ac)
    assert hi.real == pytest.approx(ac.rhoc0, rel=1e-2)
    assert abs(hi.imag) < 1e-2 * ac.rhoc0


def test_pipe_limits(ac):
    lo = radiation_impedance("pipe", 1.0, 0.012, ac)
    assert abs(lo) < 1e-3 * ac.rhoc0
    assert lo.imag > lo.real > 0
    hi = radiation_impedance("pipe", 1e5, 1.0, ac)
    assert abs(hi - ac.rhoc0) < 1e-2 * ac.rhoc0


def test_pipe_low_frequency_end_correction(ac):
    # X ~ rhoc0 * 0.6133 ka for ka << 1
    f, d = 5.0, 0.012
    ka = 2 * np.pi * f / ac.c0 * d / 2
    Z = radiation_impedance("pipe", f, d, ac)
    assert Z.imag == pytest.approx(ac.rhoc0 * 0.6133 * ka, rel=1e-3)
    assert Z.real == pytest.approx(ac.rhoc0 * ka**2 / 4, rel=1e-3)


def test_vectorised_frequencies(ac):
    f = np.array([0.0, 10.0, 100.0, 1000.0])
    Z = radiation_impedance("baffle", f, 0.05, ac)
    assert Z.shape == f.shape
    assert Z[0] == 0
    for fi, Zi in zip(f[1:], Z[1:]):
        assert Zi == pytest.approx(radiation_impedance("baffle", fi, 0.05, ac), rel=1e-12)


@pytest.mark.parametrize("mode", ["baffle", "pipe"])
@pytest.mark.parametrize("d", [0.0, -0.01])
def test_non_positive_diameter(ac, mode, d):
    with pytest.raises(InvalidGeometry):
        radiation_impedance(mode, 100.0, d, ac)


def test_negative_frequency(ac):
    with pytest.raises(InvalidParameter):
        radiation_impedance("baffle", -1.0, 0.01, ac)
