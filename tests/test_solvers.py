"""
Unit tests: PVL and Local Lax-Friedrichs Riemann solvers.

Run: pytest tests/test_solvers.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from eulerflux.eos import make_eos
from eulerflux.errors import StateTypeError
from eulerflux.pattern import RiemannPattern
from eulerflux.registry import (
    get_riemann_solver,
    list_riemann_solvers,
    register_riemann_solver,
)
from eulerflux.solvers import LINEARIZATIONS, LLFSolver, PVLSolver
from eulerflux.state import ConservativeState, PrimitiveState
from eulerflux.transforms import primitive_to_conservative

AIR = make_eos(gamma=1.4, R=287.0)
HELIUM = make_eos(gamma=5.0 / 3.0, R=2077.0)
X = np.array([1.0, 0.0, 0.0])
OBLIQUE = np.array([0.6, 0.8, 0.0])


def _cons(rho: float, velocity, p: float, eos=AIR) -> ConservativeState:
    return primitive_to_conservative(PrimitiveState(rho, velocity, p), eos)


SOLVERS = [PVLSolver, LLFSolver]

# (eos_left, left, eos_right, right, normal)
PROBLEMS = {
    "sod": (AIR, _cons(1.0, [0.0], 1.0), AIR, _cons(0.125, [0.0], 0.1), X),
    "transonic": (AIR, _cons(1.0, [1.0], 1.0), AIR, _cons(0.125, [0.0], 0.1), X),
    "colliding": (AIR, _cons(1.0, [2.0], 1.0), AIR, _cons(1.0, [-2.0], 1.0), X),
    "expansion": (AIR, _cons(1.0, [-2.0], 1.0), AIR, _cons(0.5, [3.0], 0.4), X),
    "oblique": (
        AIR, _cons(1.0, [0.5, 0.3, -0.2], 1.0),
        AIR, _cons(0.5, [-0.4, 0.1, 0.6], 0.4),
        OBLIQUE,
    ),
    "mixed_eos": (
        AIR, _cons(1.0, [0.2], 1.0),
        HELIUM, _cons(0.2, [-0.1], 0.8, eos=HELIUM),
        X,
    ),
}


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("solver_cls", SOLVERS)
@pytest.mark.parametrize("velocity, normal", [
    ([0.0, 0.0, 0.0], X),
    ([0.3, -0.5, 0.2], X),
    ([-0.7, 0.4, 0.0], X),
    ([3.0, 0.0, 1.0], X),
    ([0.5, -0.2, 0.9], OBLIQUE),
    ([-1.0, 0.6, 0.0], OBLIQUE),
])
def test_equal_states_give_physical_flux(solver_cls, velocity, normal):
    state = _cons(1.3, velocity, 2.0)
    flux = solver_cls().solve(AIR, state, AIR, state, normal)
    expected = state.compute_fluxes(AIR, normal)
    np.testing.assert_allclose(flux.array(), expected.array(), rtol=1e-12, atol=1e-12)


@pytest.mark.parametrize("solver_cls", SOLVERS)
@pytest.mark.parametrize("name", list(PROBLEMS))
def test_swapping_sides_negates_flux(solver_cls, name):
    eos_l, left, eos_r, right, normal = PROBLEMS[name]
    solver = solver_cls()
    forward = solver.solve(eos_l, left, eos_r, right, normal)
    backward = solver.solve(eos_r, right, eos_l, left, -normal)
    np.testing.assert_allclose(forward.array(), -backward.array(), rtol=1e-12, atol=1e-12)


# ---------------------------------------------------------------------------
# Solver-specific values
# ---------------------------------------------------------------------------

def test_pvl_sod_flux_from_left_star_state():
    eos_l, left, eos_r, right, normal = PROBLEMS["sod"]
    flux = PVLSolver().solve(eos_l, left, eos_r, right, normal)

    pattern = RiemannPattern(eos_l, left, eos_r, right, normal)
    pattern.compute_waves()
    assert flux.density == pytest.approx(pattern.r_star_left * pattern.u_star, rel=1e-12)
    assert flux.momentum[0] == pytest.approx(
        pattern.r_star_left * pattern.u_star ** 2 + pattern.p_star, rel=1e-12
    )


@pytest.mark.parametrize("name", list(PROBLEMS))
def test_llf_matches_rusanov_formula(name):
    eos_l, left, eos_r, right, normal = PROBLEMS[name]
    flux = LLFSolver().solve(eos_l, left, eos_r, right, normal)

    pattern = RiemannPattern(eos_l, left, eos_r, right, normal)
    pattern.compute_waves_extrema()
    lmax = max(abs(pattern.s1), abs(pattern.s4))
    f_l = left.compute_fluxes(eos_l, normal).array()
    f_r = right.compute_fluxes(eos_r, normal).array()
    expected = 0.5 * (f_l + f_r) - 0.5 * lmax * (right.array() - left.array())
    np.testing.assert_allclose(flux.array(), expected, rtol=1e-12, atol=1e-14)


def test_stationary_contact_pvl_exact_llf_diffusive():
    left, right = _cons(1.0, [0.0], 1.0), _cons(0.5, [0.0], 1.0)
    pvl = PVLSolver().solve(AIR, left, AIR, right, X)
    llf = LLFSolver().solve(AIR, left, AIR, right, X)

    assert pvl.density == 0.0
    assert pvl.energy == 0.0
    np.testing.assert_allclose(pvl.momentum, [1.0, 0.0, 0.0])

    # LLF smears the density jump
    assert llf.density > 0.0
    np.testing.assert_allclose(llf.momentum, [1.0, 0.0, 0.0])


@pytest.mark.parametrize("u", [1.0, 3.0, 5.0])
def test_pvl_symmetric_expansion_gives_pressure_flux(u):
    left, right = _cons(1.0, [-u], 1.0), _cons(1.0, [u], 1.0)
    flux = PVLSolver().solve(AIR, left, AIR, right, X)
    llf = LLFSolver().solve(AIR, left, AIR, right, X)
    assert np.all(np.isfinite(flux.array()))
    assert flux.density == 0.0
    assert flux.momentum[0] > 0.0
    assert llf.density == 0.0


def test_pvl_vacuum_gives_zero_flux():
    left, right = _cons(1.0, [-7.0], 1.0), _cons(1.0, [7.0], 1.0)
    with pytest.warns(RuntimeWarning, match="vacuum"):
        forward = PVLSolver().solve(AIR, left, AIR, right, X)
    with pytest.warns(RuntimeWarning, match="vacuum"):
        backward = PVLSolver().solve(AIR, right, AIR, left, -X)
    np.testing.assert_array_equal(forward.array(), np.zeros(5))
    np.testing.assert_array_equal(backward.array(), np.zeros(5))


@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_supersonic_flow_upwinding(solver_cls):
    left, right = _cons(1.0, [5.0], 1.0), _cons(0.5, [5.0], 1.0)
    flux = solver_cls().solve(AIR, left, AIR, right, X)
    if solver_cls is PVLSolver:
        assert flux == left.compute_fluxes(AIR, X)
    else:
        assert flux.density != left.compute_fluxes(AIR, X).density


@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_fluxes_output_argument(solver_cls):
    eos_l, left, eos_r, right, normal = PROBLEMS["sod"]
    out = ConservativeState(density=42.0)
    returned = solver_cls().solve(eos_l, left, eos_r, right, normal, fluxes=out)
    assert returned is out
    assert out == solver_cls().solve(eos_l, left, eos_r, right, normal)


# ---------------------------------------------------------------------------
# Argument checking
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_primitive_input_raises(solver_cls):
    prim = PrimitiveState(1.0, [0.0, 0.0, 0.0], 1.0)
    cons = _cons(1.0, [0.0], 1.0)
    solver = solver_cls()
    with pytest.raises(StateTypeError, match=f"{solver.label} solver"):
        solver.solve(AIR, prim, AIR, cons, X)
    with pytest.raises(StateTypeError):
        solver.solve(AIR, cons, AIR, prim, X)


@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_non_eos_raises(solver_cls):
    cons = _cons(1.0, [0.0], 1.0)
    with pytest.raises(StateTypeError, match="equation of state"):
        solver_cls().solve("air", cons, AIR, cons, X)


@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_non_unit_normal_raises(solver_cls):
    cons = _cons(1.0, [0.0], 1.0)
    with pytest.raises(ValueError, match="unit"):
        solver_cls().solve(AIR, cons, AIR, cons, [1.0, 1.0, 0.0])


# ---------------------------------------------------------------------------
# Configuration and lifecycle
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_linearization_configs_agree(solver_cls):
    eos_l, left, eos_r, right, normal = PROBLEMS["oblique"]
    results = [
        solver_cls(config).solve(eos_l, left, eos_r, right, normal)
        for config in LINEARIZATIONS
    ]
    assert all(r == results[0] for r in results[1:])


@pytest.mark.parametrize("solver_cls", SOLVERS)
def test_unknown_config_raises(solver_cls):
    with pytest.raises(ValueError, match="Available"):
        solver_cls("roe")
    solver = solver_cls()
    with pytest.raises(ValueError):
        solver.initialize("p23")
    assert solver.config == "up23"


def test_initialize_and_destroy():
    solver = PVLSolver()
    assert solver.config == "up23"
    solver.initialize("upr23")
    assert solver.config == "upr23"
    solver.destroy()
    assert solver.config == "up23"


def test_description():
    solver = LLFSolver("u23")
    assert solver.description(prefix="# ") == "# LLF solver\n# config = u23"


def test_registry_lookup():
    assert get_riemann_solver("pvl") is PVLSolver
    assert get_riemann_solver("llf") is LLFSolver
    with pytest.raises(KeyError, match="Available: llf, pvl"):
        get_riemann_solver("hllc")


def test_registry_listing_and_duplicates():
    assert list_riemann_solvers() == ["llf", "pvl"]
    with pytest.raises(ValueError, match="already registered"):
        register_riemann_solver("pvl")(PVLSolver)
    assert get_riemann_solver("pvl") is PVLSolver


# ---------------------------------------------------------------------------
# Many faces
# ---------------------------------------------------------------------------

def test_solve_faces_matches_single_solves():
    solver = PVLSolver()
    names = ["sod", "transonic", "colliding", "oblique"]
    lefts = [PROBLEMS[n][1] for n in names]
    rights = [PROBLEMS[n][3] for n in names]
    normals = [PROBLEMS[n][4] for n in names]

    fluxes = solver.solve_faces(AIR, lefts, AIR, rights, normals)
    assert len(fluxes) == len(names)
    for flux, left, right, normal in zip(fluxes, lefts, rights, normals):
        assert flux == solver.solve(AIR, left, AIR, right, normal)


def test_solve_faces_with_per_face_eos():
    eos_l, left, eos_r, right, normal = PROBLEMS["mixed_eos"]
    solver = LLFSolver()
    fluxes = solver.solve_faces([eos_l, eos_r], [left, right], [eos_r, eos_l], [right, left],
                                [normal, -normal])
    np.testing.assert_allclose(fluxes[0].array(), -fluxes[1].array(), rtol=1e-12, atol=1e-12)


def test_shared_solver_across_threads():
    solver = PVLSolver()
    problems = list(PROBLEMS.values()) * 8
    serial = [solver.solve(*problem) for problem in problems]
    with ThreadPoolExecutor(max_workers=4) as pool:
        parallel = list(pool.map(lambda problem: solver.solve(*problem), problems))
    assert all(a == b for a, b in zip(serial, parallel))
