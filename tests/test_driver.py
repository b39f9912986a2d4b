import numpy as np
import pytest

from hit_spectra import ExperimentConfig, HITConfig, build_simulation, figure_name, run
from hit_spectra.solver import checkpoint_name

L = 9 * 2 * np.pi / 100


def _experiment(cbc_table, tmp_path, **kwargs):
    defaults = dict(
        N=8,
        modes=32,
        save=True,
        data_dir=cbc_table.parent,
        plots_dir=tmp_path / "plots",
        dpi=50,
        verbose=False,
    )
    defaults.update(kwargs)
    return ExperimentConfig(**defaults)


def test_experiment_constants():
    exp = ExperimentConfig()
    assert exp.reynolds == pytest.approx(0.0508 * 10 / 1.48e-5)
    assert exp.length_scale == pytest.approx(0.0508 / L * 32)
    assert exp.nu_numerical == pytest.approx(exp.length_scale / exp.reynolds)
    cfg = exp.hit_config()
    assert cfg.velocity_scale == 10.0
    assert cfg.cbc_path.name == "cbc_spectrum.dat"


def test_figure_name():
    assert figure_name(32, 2048, 0.17, "two_thirds", 171.0) == "Ek_N32_modes2048_Cs0.17_two_thirds_t171.00.png"


def test_build_generates_divergence_free_field(cbc_table):
    cfg = HITConfig(cbc_path=cbc_table, nu=1e-4, precision="float64")
    sim = build_simulation(L, 8, 32, cfg, Cs=0.17, seed=3)
    assert sim.kinetic_energy() > 0
    assert sim.divergence_max() < 1e-8
    assert sim.les


def test_build_requires_reference_or_checkpoint():
    with pytest.raises(ValueError):
        build_simulation(L, 8, 32, HITConfig())
    with pytest.raises(ValueError):
        build_simulation(L, 8, 32, HITConfig(load=True))


def test_build_restores_checkpoint(cbc_table, tmp_path):
    cfg = HITConfig(cbc_path=cbc_table, precision="float64")
    sim = build_simulation(L, 8, 32, cfg, seed=1)
    path = tmp_path / checkpoint_name(8, 42.0)
    sim.save(path)
    restored = build_simulation(L, 8, 32, HITConfig(load=True, precision="float64"), checkpoint=path)
    np.testing.assert_allclose(restored.velocity, sim.velocity, atol=1e-12)


def test_run_three_stations(cbc_table, tmp_path, capsys):
    exp = _experiment(cbc_table, tmp_path)
    sim, fig = run(exp)

    assert sim.sim_time() >= exp.t2_ctu - exp.t0_ctu
    assert sum("CBC" in label for label in fig.labels) == 1
    assert fig.n_spectra == 3

    figures = list((tmp_path / "plots").glob("Ek_N8_modes32_Cs0.17_two_thirds_t*.png"))
    assert len(figures) == 1
    checkpoints = sorted(cbc_table.parent.glob("flow_N8_t*.npz"))
    assert len(checkpoints) == 3
    assert (cbc_table.parent / "flow_N8_t42.00.npz") in checkpoints

    out = capsys.readouterr().out
    assert out.startswith("N=8, LES=True, Cs=0.17, scheme=two_thirds")
    assert "Figure stored in" in out


def test_run_from_saved_checkpoint(cbc_table, tmp_path):
    run(_experiment(cbc_table, tmp_path, t1_ctu=60.0, t2_ctu=70.0))
    sim, fig = run(_experiment(cbc_table, tmp_path, load=True, save=False, t1_ctu=60.0, t2_ctu=70.0))
    assert sim.sim_time() >= 70.0 - 42.0
    assert fig.n_spectra == 3


def test_invalid_windows():
    with pytest.raises(ValueError):
        ExperimentConfig(t1_ctu=30.0)
