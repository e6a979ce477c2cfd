import math

import numpy as np
import pytest

from orthoquad import (
    ConvergenceNotReached,
    DegenerateRequest,
    DiscretizationParams,
    InvalidComponentInput,
    NumericalBreakdown,
    compute_recurrence,
    compute_recurrence_from_params,
)
from orthoquad.core.quadrature import (
    gauss_chebyshev,
    gauss_legendre,
    gauss_quadrature,
    gauss_rule,
    point_masses,
    scaled,
)
from orthoquad.core.recurrence import chebyshev1_recurrence, hermite_recurrence, legendre_recurrence
from orthoquad.models.composite_weight import (
    composite_components,
    composite_gauss_rule,
    composite_recurrence,
)


def _abs_t_component(n):
    # w(t) = |t| sampled on Gauss–Legendre nodes: never exact
    x, w = gauss_legendre(n)
    return x, w * np.abs(x)


def test_single_component_reproduces_legendre():
    res = compute_recurrence(10, [gauss_legendre])
    ref_alpha, ref_beta = legendre_recurrence(10)
    assert res.converged
    np.testing.assert_allclose(res.alpha, ref_alpha, atol=1e-13)
    np.testing.assert_allclose(res.beta, ref_beta, rtol=1e-12)


def test_beta0_is_total_component_mass():
    components = [scaled(gauss_legendre, 0.7), scaled(gauss_chebyshev, 0.2), point_masses([0.3], [0.05])]
    res = compute_recurrence(5, components)
    expected = sum(np.sum(rule(res.resolution)[1]) for rule in components)
    assert res.beta[0] == pytest.approx(expected, rel=1e-14)
    assert res.mass == pytest.approx(0.7 * 2.0 + 0.2 * math.pi + 0.05, rel=1e-14)


def test_composite_weight_integral_with_eight_nodes():
    res = compute_recurrence(8, composite_components(0.5))
    assert res.converged
    assert res.resolution <= 18
    x, w = gauss_quadrature(res.alpha, res.beta)
    assert x.size == 8
    assert abs(np.sum(w) - (1.0 + math.pi / 2.0)) < 1e-10


@pytest.mark.parametrize("gamma, reference", [(1.0, legendre_recurrence), (0.0, chebyshev1_recurrence)])
def test_endpoints_reduce_to_single_weight(gamma, reference):
    alpha, beta = compute_recurrence(8, composite_components(gamma))
    ref_alpha, ref_beta = reference(8)
    np.testing.assert_allclose(alpha, ref_alpha, atol=1e-13)
    np.testing.assert_allclose(beta, ref_beta, rtol=1e-12)


def test_coefficients_move_between_chebyshev_and_legendre():
    gammas = np.linspace(0.0, 1.0, 11)
    betas = np.array([compute_recurrence(8, composite_components(g)).beta for g in gammas])
    assert np.all(np.diff(betas[:, 0]) < 0.0)
    assert np.all(np.diff(betas[:, 1]) < 0.0)
    assert np.all((betas[:, 1:] > 0.0) & (betas[:, 1:] <= 1.0))


def test_lanczos_agrees_with_stieltjes():
    a = compute_recurrence(8, composite_components(0.3))
    b = compute_recurrence(8, composite_components(0.3), method="lanczos")
    np.testing.assert_allclose(b.alpha, a.alpha, atol=1e-12)
    np.testing.assert_allclose(b.beta, a.beta, rtol=1e-11)


def test_point_mass_added_to_legendre():
    res = compute_recurrence(4, [gauss_legendre, point_masses([0.0], [1.0])])
    assert res.beta[0] == pytest.approx(3.0, rel=1e-14)
    assert res.alpha[0] == pytest.approx(0.0, abs=1e-15)


def test_repeated_calls_are_bit_identical():
    first = compute_recurrence(8, composite_components(0.5))
    second = compute_recurrence(8, composite_components(0.5))
    assert np.array_equal(first.alpha, second.alpha)
    assert np.array_equal(first.beta, second.beta)


def test_resolution_cap_returns_best_estimate():
    with pytest.warns(ConvergenceNotReached):
        res = compute_recurrence(4, [_abs_t_component], max_resolution=16, tolerance=1e-14)
    assert not res.converged
    assert res.resolution == 16
    assert res.iterations == 3
    assert np.isfinite(res.error)
    assert res.beta[0] == pytest.approx(1.0, rel=1e-2)


def test_negative_weight_component_breaks_down():
    components = [gauss_legendre, scaled(gauss_chebyshev, -1.0)]
    with pytest.raises(NumericalBreakdown):
        compute_recurrence(8, components)


def test_mismatched_component_output():
    with pytest.raises(InvalidComponentInput):
        compute_recurrence(3, [lambda n: (np.zeros(n), np.ones(n - 1))])


def test_empty_component_output():
    with pytest.raises(InvalidComponentInput):
        compute_recurrence(3, [lambda n: ([], [])])


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(N=0),
        dict(N=4, max_resolution=3),
        dict(N=4, tolerance=0.0),
        dict(N=4, method="qr"),
        dict(N=4, growth=1.0),
    ],
)
def test_degenerate_requests(kwargs):
    N = kwargs.pop("N")
    with pytest.raises(DegenerateRequest):
        compute_recurrence(N, [gauss_legendre], **kwargs)


def test_no_components():
    with pytest.raises(DegenerateRequest):
        compute_recurrence(4, [])


def test_params_container_and_progress_output(capsys):
    params = DiscretizationParams(N=6, verbose=True)
    alpha, beta = compute_recurrence_from_params(params, [gauss_legendre])
    assert alpha.size == beta.size == 6
    out = capsys.readouterr().out
    assert "Iter   1" in out
    assert "Iter   2" in out


@pytest.mark.filterwarnings("ignore::orthoquad.core.errors.ConvergenceNotReached")
def test_large_N_legendre():
    res = compute_recurrence(600, [gauss_legendre], max_resolution=1400, tolerance=1e-10)
    ref_alpha, ref_beta = legendre_recurrence(600)
    np.testing.assert_allclose(res.alpha, ref_alpha, atol=1e-9)
    np.testing.assert_allclose(res.beta, ref_beta, rtol=1e-9)


@pytest.mark.filterwarnings("ignore::orthoquad.core.errors.ConvergenceNotReached")
def test_large_N_hermite():
    # monic Hermite norms grow like k!/2^k and overflow near k = 187
    res = compute_recurrence(200, [gauss_rule(hermite_recurrence)], max_resolution=500, tolerance=1e-8)
    ref_alpha, ref_beta = hermite_recurrence(200)
    np.testing.assert_allclose(res.alpha, ref_alpha, atol=1e-6)
    np.testing.assert_allclose(res.beta, ref_beta, rtol=1e-8)


def test_discrete_component_with_too_few_nodes():
    with pytest.raises(InvalidComponentInput):
        compute_recurrence(4, [point_masses([0.0, 1.0], [1.0, 1.0])])


def test_warning_points_at_caller_of_params_wrapper():
    params = DiscretizationParams(N=4, max_resolution=16, tolerance=1e-14)
    with pytest.warns(ConvergenceNotReached) as record:
        compute_recurrence_from_params(params, [_abs_t_component])
    assert record[0].filename == __file__


def test_warning_points_at_caller_of_composite_helpers():
    with pytest.warns(ConvergenceNotReached) as record:
        composite_recurrence(8, 0.5, max_resolution=9)
    assert record[0].filename == __file__

    with pytest.warns(ConvergenceNotReached) as record:
        composite_gauss_rule(8, 0.5, max_resolution=9)
    assert record[0].filename == __file__


def test_warning_points_at_direct_caller():
    with pytest.warns(ConvergenceNotReached) as record:
        compute_recurrence(4, [_abs_t_component], max_resolution=16, tolerance=1e-14)
    assert record[0].filename == __file__
