import numpy as np
import pytest

from hit_spectra import CFLTimeStep, ConstantTimeStep, Precision, SolverError, SpectralLES, checkpoint_name

from conftest import shear_mode


def _random_field(N, seed=0):
    return np.random.default_rng(seed).normal(size=(N, N, N, 3))


def test_zero_field_stays_zero():
    sim = SpectralLES(8, nu=0.01, Cs=0.17)
    sim.sim_step(1.0, time_step=ConstantTimeStep(0.25))
    assert np.all(sim.velocity == 0.0)
    assert sim.kinetic_energy() == 0.0


def test_constant_time_step_is_respected():
    sim = SpectralLES(8, nu=0.01)
    sim.set_velocity(0.1 * shear_mode(8, 8.0))
    sim.sim_step(2.0, time_step=ConstantTimeStep(0.5))
    assert sim.nstep == 4
    assert sim.time == pytest.approx(2.0)


def test_sim_time_in_convective_units():
    sim = SpectralLES(8, length_scale=2.0, velocity_scale=4.0)
    sim.step(0.5)
    assert sim.sim_time() == pytest.approx(1.0)


def test_second_window_continues_from_current_time():
    sim = SpectralLES(8, length_scale=1.0, velocity_scale=1.0)
    step = ConstantTimeStep(0.5)
    sim.sim_step(1.0, time_step=step)
    sim.sim_step(sim.sim_time() + 1.5, time_step=step)
    assert sim.nstep == 5
    assert sim.sim_time() == pytest.approx(2.5)


def test_set_velocity_removes_divergence():
    sim = SpectralLES(16, precision=Precision.FLOAT64)
    sim.set_velocity(_random_field(16))
    assert sim.divergence_max() < 1e-10


def test_gradient_field_is_projected_out():
    # grad of sin(x) cos(y)
    N = 8
    x = np.arange(N) * 2 * np.pi / N
    grad = np.zeros((N, N, N, 3))
    grad[..., 0] = (np.cos(x)[:, None] * np.cos(x)[None, :])[..., None]
    grad[..., 1] = (-np.sin(x)[:, None] * np.sin(x)[None, :])[..., None]
    sim = SpectralLES(N, L=2 * np.pi, precision=Precision.FLOAT64)
    sim.set_velocity(grad)
    np.testing.assert_allclose(sim.velocity, 0.0, atol=1e-12)


def test_viscous_decay_of_shear_mode():
    N, nu = 8, 0.05
    sim = SpectralLES(N, nu=nu, precision=Precision.FLOAT64)
    sim.set_velocity(shear_mode(N, float(N), m=1))
    E0 = sim.kinetic_energy()
    sim.sim_step(2.0, time_step=ConstantTimeStep(0.1))
    k = 2 * np.pi / N
    assert sim.kinetic_energy() / E0 == pytest.approx(np.exp(-2 * nu * k**2 * sim.time), rel=1e-6)


def test_smagorinsky_adds_dissipation():
    u0 = 0.5 * _random_field(16, seed=4)
    energies = []
    for Cs in (0.0, 0.17):
        sim = SpectralLES(16, nu=0.001, Cs=Cs, precision=Precision.FLOAT64)
        sim.set_velocity(u0)
        sim.sim_step(0.5, time_step=ConstantTimeStep(0.05))
        energies.append(sim.kinetic_energy())
    assert energies[1] < energies[0]
    assert SpectralLES(8, Cs=0.17).les and not SpectralLES(8).les


@pytest.mark.parametrize("dt", [0.0, -0.1, float("nan"), float("inf")])
def test_invalid_time_step(dt):
    with pytest.raises(SolverError):
        SpectralLES(8).step(dt)


def test_non_finite_state_is_fatal():
    sim = SpectralLES(8, precision=Precision.FLOAT64)
    sim.U_hat[0, 1, 0, 0] = np.nan
    with pytest.raises(SolverError):
        sim.step(0.1)
    assert sim.nstep == 0


def test_wrong_shape_rejected():
    with pytest.raises(SolverError):
        SpectralLES(8).set_velocity(np.zeros((8, 8, 8)))


def test_cfl_step_capped_for_quiescent_flow():
    assert CFLTimeStep(dt_max=0.25)(SpectralLES(8)) == 0.25


def test_cfl_step_shrinks_with_velocity():
    sim = SpectralLES(8, nu=0.01)
    sim.set_velocity(shear_mode(8, 8.0))
    slow = CFLTimeStep(cfl=0.5)(sim)
    sim.set_velocity(4.0 * shear_mode(8, 8.0))
    fast = CFLTimeStep(cfl=0.5)(sim)
    assert 0 < fast < slow


def test_checkpoint_round_trip(tmp_path, capsys):
    sim = SpectralLES(8, length_scale=2.0, velocity_scale=3.0, precision=Precision.FLOAT64)
    sim.set_velocity(_random_field(8, seed=2))
    sim.step(0.1)
    path = tmp_path / "data" / checkpoint_name(8, sim.sim_time())
    sim.save(path)
    assert f"Checkpoint stored in {path}" in capsys.readouterr().out

    other = SpectralLES(8, length_scale=2.0, velocity_scale=3.0, precision=Precision.FLOAT64)
    other.load(path)
    np.testing.assert_allclose(other.velocity, sim.velocity, atol=1e-12)
    assert other.time == pytest.approx(sim.time)


def test_checkpoint_name():
    assert checkpoint_name(32, 42.0) == "flow_N32_t42.00.npz"


def test_load_missing_checkpoint(tmp_path):
    with pytest.raises(FileNotFoundError):
        SpectralLES(8).load(tmp_path / "flow_N8_t42.00.npz")


def test_load_mismatched_grid(tmp_path):
    path = tmp_path / "flow.npz"
    SpectralLES(8).save(path)
    with pytest.raises(SolverError):
        SpectralLES(16).load(path)


def test_load_foreign_archive(tmp_path):
    path = tmp_path / "other.npz"
    np.savez(path, theta=np.zeros(3))
    with pytest.raises(SolverError):
        SpectralLES(8).load(path)


def test_load_corrupt_file(tmp_path):
    path = tmp_path / "flow_N8_t42.00.npz"
    path.write_bytes(b"not a checkpoint")
    with pytest.raises(SolverError):
        SpectralLES(8).load(path)


def test_load_plain_array_file(tmp_path):
    path = tmp_path / "flow.npy"
    np.save(path, np.zeros((8, 8, 8, 3)))
    with pytest.raises(SolverError):
        SpectralLES(8).load(path)


@pytest.mark.parametrize("scales", [dict(length_scale=4.0, velocity_scale=3.0), dict(length_scale=2.0, velocity_scale=1.0)])
def test_load_mismatched_scales(tmp_path, scales):
    path = tmp_path / "flow.npz"
    sim = SpectralLES(8, length_scale=2.0, velocity_scale=3.0)
    sim.set_velocity(_random_field(8, seed=4))
    sim.save(path)
    other = SpectralLES(8, **scales)
    with pytest.raises(SolverError):
        other.load(path)
    assert other.time == 0.0


def test_odd_resolution_rejected():
    with pytest.raises(ValueError):
        SpectralLES(7)


def test_unknown_dealias_mode():
    with pytest.raises(ValueError):
        SpectralLES(8, dealias="three_halves")
