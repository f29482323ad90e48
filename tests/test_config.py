import pytest

from reef_metrics.config import DEFAULT_CONFIG, KernelConfig, config_from_mapping, load_kernel_config
from reef_metrics.diversity import coral_diversity, compute_diversity


def test_defaults():
    cfg = KernelConfig()
    cfg.validate()
    assert cfg.to_dict() == {"eps": 1e-12, "delta": 1e-9, "index": "shannon", "validate_values": True, "n_workers": 1}


@pytest.mark.parametrize(
    "kwargs",
    [{"eps": -1.0}, {"delta": -1e-9}, {"delta": float("nan")}, {"index": "chao1"}, {"n_workers": 0}],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        KernelConfig(**kwargs).validate()


def test_invalid_config_is_rejected_by_kernel():
    with pytest.raises(ValueError):
        compute_diversity(1, 1, 1, [0.5], [0.0], config=KernelConfig(n_workers=0))


def test_load_missing_or_none_returns_defaults(tmp_path):
    assert load_kernel_config(None) == DEFAULT_CONFIG
    assert load_kernel_config(tmp_path / "absent.yaml") == DEFAULT_CONFIG


def test_load_kernel_section(tmp_path):
    p = tmp_path / "kernel.yaml"
    p.write_text("kernel:\n  index: pielou\n  eps: 1.0e-10\n  n_workers: 3\n", encoding="utf-8")
    cfg = load_kernel_config(p)
    assert cfg.index == "pielou"
    assert cfg.eps == pytest.approx(1e-10)
    assert cfg.n_workers == 3
    assert cfg.delta == DEFAULT_CONFIG.delta


def test_load_top_level_keys(tmp_path):
    p = tmp_path / "kernel.yaml"
    p.write_text("validate_values: false\ndelta: 0.001\n", encoding="utf-8")
    cfg = load_kernel_config(str(p))
    assert cfg.validate_values is False
    assert cfg.delta == pytest.approx(1e-3)


def test_load_rejects_unknown_keys_and_bad_values(tmp_path):
    p = tmp_path / "kernel.yaml"
    p.write_text("kernel:\n  tolerance: 1.0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_kernel_config(p)
    p.write_text("kernel:\n  index: hill\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_kernel_config(p)
    p.write_text("- eps\n- delta\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_kernel_config(p)


def test_loaded_delta_changes_acceptance():
    cfg = config_from_mapping({"delta": 0.1})
    out = [0.0]
    compute_diversity(1, 2, 1, [0.5, 0.55], out, config=cfg)
    assert out[0] > 0.0
    with pytest.raises(ValueError):
        coral_diversity(1, 2, 1, [0.5, 0.55], out)
