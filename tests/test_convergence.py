import time

import pytest

from lloydkit import (
    IterationHistory, IterationInfo, ClusterSetInfo, ClusterInfo, ConfigurationError,
    FixedIterationCountCondition, ConvergenceCondition, NoImprovementCondition,
    VarianceVariationCondition, DeadlineCondition, CombinedCondition, NeverCondition
)


def _history(totals, moved=None, spreads=None):
    """History whose iteration i has total distance totals[i].

    Each iteration holds 10 points; ``moved[i]`` of them changed cluster and
    ``spreads[i]`` offsets half of the distances to control the variance.
    """
    history = IterationHistory()
    for i, total in enumerate(totals):
        spread = spreads[i] if spreads is not None else 0.0
        distances = {f"p{j}": total / 10 + (spread if j % 2 else -spread) for j in range(10)}
        info = ClusterSetInfo({"a": ClusterInfo("a", distances)},
                              point_location_change=moved[i] if moved is not None else 0)
        history.record(IterationInfo(i, info))
    return history


def test_fixed_iteration_count():
    cond = FixedIterationCountCondition(3)
    assert not cond.is_satisfied(_history([5, 4, 3]))
    assert cond.is_satisfied(_history([5, 4, 3, 2]))
    with pytest.raises(ConfigurationError):
        FixedIterationCountCondition(0)


def test_convergence_ignores_first_pass():
    cond = ConvergenceCondition(0.2)
    assert not cond.is_satisfied(_history([5, 4], moved=[0, 0]))
    assert cond.is_satisfied(_history([5, 4, 4], moved=[0, 10, 1]))
    assert not cond.is_satisfied(_history([5, 4, 4], moved=[0, 10, 2]))


@pytest.mark.parametrize("rate", [0.0, -0.1, 1.5])
def test_convergence_rejects_bad_rate(rate):
    with pytest.raises(ConfigurationError):
        ConvergenceCondition(rate)


def test_no_improvement_waits_for_patience():
    cond = NoImprovementCondition(patience=2)
    assert not cond.is_satisfied(_history([9, 8, 8]))
    assert cond.is_satisfied(_history([9, 8, 8, 8]))
    assert not cond.is_satisfied(_history([9, 8, 8, 7]))


def test_no_improvement_never_compares_against_seeding():
    cond = NoImprovementCondition()
    # Iteration 0 has no members, so its total says nothing
    assert not cond.is_satisfied(_history([0, 5]))
    assert cond.is_satisfied(_history([0, 5, 5]))


def test_no_improvement_relative_tolerance():
    cond = NoImprovementCondition(rel_tol=0.01)
    assert cond.is_satisfied(_history([0, 100, 99.5]))
    assert not cond.is_satisfied(_history([0, 100, 98]))


def test_no_improvement_rejects_bad_params():
    with pytest.raises(ConfigurationError):
        NoImprovementCondition(patience=0)
    with pytest.raises(ConfigurationError):
        NoImprovementCondition(rel_tol=-1)


def test_variance_variation():
    cond = VarianceVariationCondition(0.05, period=1)
    assert not cond.is_satisfied(_history([1, 1, 1], spreads=[0.0, 1.0, 0.5]))
    assert cond.is_satisfied(_history([1, 1, 1], spreads=[0.0, 1.0, 1.0]))


def test_deadline():
    history = _history([1, 1])
    assert DeadlineCondition(0).is_satisfied(history)
    assert not DeadlineCondition(3600).is_satisfied(history)
    with pytest.raises(ConfigurationError):
        DeadlineCondition(-1)


def test_deadline_never_stops_before_first_pass():
    # Iteration 0 is seeding only
    assert not DeadlineCondition(0).is_satisfied(_history([1]))


def test_deadline_measures_from_history_creation():
    history = _history([1, 1])
    time.sleep(0.02)
    assert DeadlineCondition(0.01).is_satisfied(history)


def test_combined_any_and_all():
    history = _history([5, 4, 3])
    fixed = FixedIterationCountCondition(2)
    never = NeverCondition()
    assert CombinedCondition([fixed, never], mode='any').is_satisfied(history)
    assert not CombinedCondition([fixed, never], mode='all').is_satisfied(history)
    with pytest.raises(ConfigurationError):
        CombinedCondition([fixed], mode='xor')
    with pytest.raises(ConfigurationError):
        CombinedCondition([])


def test_conditions_do_not_mutate_history():
    history = _history([5, 4, 4])
    for cond in (FixedIterationCountCondition(1), ConvergenceCondition(0.5),
                 NoImprovementCondition(), VarianceVariationCondition(0.1)):
        cond.is_satisfied(history)
    assert len(history) == 3
