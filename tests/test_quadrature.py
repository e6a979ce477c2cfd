import math

import numpy as np
import pytest

from orthoquad.core.errors import DegenerateRequest
from orthoquad.core.quadrature import (
    fejer,
    gauss_chebyshev,
    gauss_legendre,
    gauss_quadrature,
    gauss_rule,
    mapped,
    point_masses,
    scaled,
)
from orthoquad.core.recurrence import chebyshev1_recurrence, hermite_recurrence


def test_gauss_legendre_matches_numpy():
    x, w = gauss_legendre(9)
    xn, wn = np.polynomial.legendre.leggauss(9)
    np.testing.assert_allclose(x, xn, atol=1e-13)
    np.testing.assert_allclose(w, wn, atol=1e-13)


def test_gauss_hermite_from_recurrence_matches_numpy():
    x, w = gauss_rule(hermite_recurrence)(10)
    xn, wn = np.polynomial.hermite.hermgauss(10)
    np.testing.assert_allclose(x, xn, atol=1e-12)
    np.testing.assert_allclose(w, wn, atol=1e-12)


def test_gauss_chebyshev_closed_form_matches_golub_welsch():
    x, w = gauss_chebyshev(7)
    xg, wg = gauss_quadrature(*chebyshev1_recurrence(7))
    np.testing.assert_allclose(x, xg, atol=1e-13)
    np.testing.assert_allclose(w, wg, atol=1e-13)


def test_gauss_rule_weights_sum_to_mass():
    alpha, beta = chebyshev1_recurrence(12)
    _, w = gauss_quadrature(alpha, beta)
    assert np.sum(w) == pytest.approx(math.pi, rel=1e-14)


def test_gauss_quadrature_subset_of_nodes():
    alpha, beta = chebyshev1_recurrence(12)
    x, w = gauss_quadrature(alpha, beta, n=5)
    assert x.size == 5
    np.testing.assert_allclose(x, gauss_chebyshev(5)[0], atol=1e-13)


def test_gauss_quadrature_rejects_bad_n():
    alpha, beta = chebyshev1_recurrence(4)
    with pytest.raises(DegenerateRequest):
        gauss_quadrature(alpha, beta, n=5)


def test_fejer_is_exact_to_degree_n_minus_one():
    n = 7
    x, w = fejer(n)
    assert np.all(w > 0.0)
    for k in range(n):
        exact = 2.0 / (k + 1) if k % 2 == 0 else 0.0
        assert np.dot(w, x**k) == pytest.approx(exact, abs=1e-13)


def test_scaled_and_mapped_rules():
    rule = mapped(scaled(gauss_legendre, 3.0), 0.0, 2.0)
    x, w = rule(5)
    assert np.all((x > 0.0) & (x < 2.0))
    # 3 * ∫_0^2 t^2 dt = 8
    assert np.dot(w, x**2) == pytest.approx(8.0, rel=1e-14)


def test_point_masses_ignore_resolution():
    rule = point_masses([0.0, 1.0], [0.5, 0.25])
    x4, w4 = rule(4)
    x40, w40 = rule(40)
    np.testing.assert_array_equal(x4, x40)
    np.testing.assert_array_equal(w4, [0.5, 0.25])
