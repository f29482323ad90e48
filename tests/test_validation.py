import logging

import numpy as np
import pytest

from reef_metrics.config import KernelConfig
from reef_metrics.diversity import compute_diversity, coral_diversity
from reef_metrics.errors import BufferTooSmall, DiversityError, InvalidCoverValue, InvalidDimension, NullBuffer
from reef_metrics.validation import validate_cover_ranges, validate_dimensions


def _make_output(n: int) -> np.ndarray:
    return np.full(n, -1.0)


@pytest.mark.parametrize(
    "dims",
    [(-1, 2, 2), (2, -3, 2), (2, 2, -1), (True, 2, 2), (2.0, 2, 2), ("2", 2, 2), (2**31, 1, 1)],
)
def test_invalid_dimensions(dims):
    with pytest.raises(InvalidDimension):
        coral_diversity(*dims, [0.1] * 8, _make_output(8))


def test_zero_groups_is_invalid_only_for_non_empty_calls():
    with pytest.raises(InvalidDimension) as exc:
        coral_diversity(2, 0, 3, [], _make_output(6))
    assert exc.value.name == "n_groups"
    assert validate_dimensions(0, 0, 3) == (0, 0, 3)
    assert validate_dimensions(np.int32(2), np.int64(3), 4) == (2, 3, 4)


def test_null_buffers():
    with pytest.raises(NullBuffer) as exc:
        coral_diversity(1, 2, 1, None, _make_output(1))
    assert exc.value.name == "relative_taxa_cover"
    with pytest.raises(NullBuffer) as exc:
        coral_diversity(1, 2, 1, [0.1, 0.2], None)
    assert exc.value.name == "output_taxa_cover"


def test_short_buffers():
    with pytest.raises(BufferTooSmall) as exc:
        coral_diversity(2, 2, 2, [0.1] * 7, _make_output(4))
    assert (exc.value.required, exc.value.actual) == (8, 7)
    with pytest.raises(BufferTooSmall) as exc:
        coral_diversity(2, 2, 2, [0.1] * 8, _make_output(3))
    assert exc.value.name == "output_taxa_cover"


def test_output_must_be_flat_and_writable():
    with pytest.raises(TypeError):
        coral_diversity(1, 2, 2, [0.1] * 4, np.zeros((1, 2)))
    ro = np.zeros(2)
    ro.setflags(write=False)
    with pytest.raises(TypeError):
        coral_diversity(1, 2, 2, [0.1] * 4, ro)


@pytest.mark.parametrize(
    "value,reason",
    [(float("nan"), "non-finite"), (float("inf"), "non-finite"), (-0.1, "negative"), (1.5, "above")],
)
def test_element_errors_report_position(value, reason):
    cover = [0.1, 0.2, 0.1, 0.2, 0.1, 0.2]  # n_tsteps=1, n_groups=3, n_locs=2
    cover[3] = value  # t=0, g=1, l=1
    out = _make_output(2)
    with pytest.raises(InvalidCoverValue) as exc:
        coral_diversity(1, 3, 2, cover, out)
    err = exc.value
    assert reason in err.reason
    assert (err.t, err.g, err.l, err.index) == (0, 1, 1, 3)
    assert isinstance(err, DiversityError) and isinstance(err, ValueError)
    assert np.all(out == -1.0)


def test_overfull_cell_reports_output_index():
    # n_tsteps=2, n_groups=2, n_locs=2; cell (t=1, l=0) sums to 1.2
    cover = [0.2, 0.2, 0.3, 0.3, 0.6, 0.1, 0.6, 0.1]
    out = _make_output(4)
    with pytest.raises(InvalidCoverValue) as exc:
        coral_diversity(2, 2, 2, cover, out)
    err = exc.value
    assert err.g is None
    assert (err.t, err.l, err.index) == (1, 0, 2)
    assert err.value == pytest.approx(1.2)
    assert np.all(out == -1.0)


def test_round_off_slack_is_accepted():
    cover = [0.5, 0.5 + 1e-12]
    out = _make_output(1)
    coral_diversity(1, 2, 1, cover, out)
    assert out[0] == pytest.approx(np.log(2.0))


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="reef_metrics.validation"):
        with pytest.raises(InvalidCoverValue):
            coral_diversity(1, 2, 1, [0.5, -0.5], _make_output(1))
    assert any("t=0 g=1 l=0" in r.getMessage() for r in caplog.records)


def test_value_scan_can_be_skipped_for_trusted_callers():
    out = _make_output(1)
    compute_diversity(1, 1, 1, [1.5], out, config=KernelConfig(validate_values=False))
    assert out[0] == 0.0
    with pytest.raises(InvalidDimension):
        compute_diversity(-1, 1, 1, [1.5], out, config=KernelConfig(validate_values=False))


def test_validate_cover_ranges_report():
    cover = np.array([0.2, 0.3, -0.1, np.nan, 0.9, 0.4])  # n_tsteps=1, n_groups=2, n_locs=3
    rep = validate_cover_ranges(cover, 1, 2, 3)
    assert rep["n_elements"] == 6.0
    assert rep["negative_rate"] == pytest.approx(1 / 6)
    assert rep["non_finite_rate"] == pytest.approx(1 / 6)
    assert rep["above_range_rate"] == 0.0
    assert rep["min"] == pytest.approx(-0.1)
    assert rep["max"] == pytest.approx(0.9)
    assert rep["overfull_cell_rate"] == pytest.approx(1 / 3)
    assert rep["cell_sum_max"] == pytest.approx(1.2)


def test_validate_cover_ranges_empty():
    rep = validate_cover_ranges([], 0, 3, 5)
    assert rep["n_elements"] == 0.0
    assert np.isnan(rep["min"])
