"""
Termination conditions for the refine loop.

Each condition is a pure predicate over the iteration history:
- Fixed iteration count
- Rate of points changing cluster
- Improvement of the total distance to centers
- Variation of the point distance variance
- Wall-clock deadline

Iteration 0 (seeding) carries no point assignments, so conditions that
compare consecutive iterations only look at iterations 1 and later.
"""

from typing import List

from ..base.interfaces import TerminationCondition
from ..base.exceptions import ConfigurationError
from ..iteration.history import IterationHistory


class FixedIterationCountCondition(TerminationCondition):
    """Stop once ``max_iteration_count`` refine iterations have run."""

    def __init__(self, max_iteration_count: int):
        if max_iteration_count < 1:
            raise ConfigurationError(
                f"max_iteration_count must be positive, got {max_iteration_count}")
        self.max_iteration_count = max_iteration_count

    def is_satisfied(self, history: IterationHistory) -> bool:
        return history.iteration_count >= self.max_iteration_count

    def __repr__(self) -> str:
        return f"FixedIterationCountCondition({self.max_iteration_count})"


class ConvergenceCondition(TerminationCondition):
    """Convergence based on fraction of points that change clusters."""

    def __init__(self, rate: float):
        """
        Args:
            rate: Stop when fewer than this fraction of points moved
        """
        if not 0.0 < rate <= 1.0:
            raise ConfigurationError(f"rate must be in (0, 1], got {rate}")
        self.rate = rate

    def is_satisfied(self, history: IterationHistory) -> bool:
        # The first pass moves every point out of "unassigned"
        if history.iteration_count <= 1:
            return False
        return history.most_recent_cluster_set_info.point_location_change_rate < self.rate

    def __repr__(self) -> str:
        return f"ConvergenceCondition(rate={self.rate})"


class NoImprovementCondition(TerminationCondition):
    """Convergence based on the total point-to-center distance.

    An iteration counts as "no improvement" when the total distance fell by
    at most ``max(abs_tol, rel_tol * previous_total)``.
    """

    def __init__(self, patience: int = 1, rel_tol: float = 0.0, abs_tol: float = 0.0):
        """
        Args:
            patience: Number of consecutive non-improving iterations
            rel_tol: Relative tolerance for the decrease
            abs_tol: Absolute tolerance for the decrease
        """
        if patience < 1:
            raise ConfigurationError(f"patience must be positive, got {patience}")
        if rel_tol < 0 or abs_tol < 0:
            raise ConfigurationError("Tolerances must be non-negative")
        self.patience = patience
        self.rel_tol = rel_tol
        self.abs_tol = abs_tol

    def is_satisfied(self, history: IterationHistory) -> bool:
        last = history.iteration_count
        if last - self.patience < 1:
            return False

        for index in range(last - self.patience + 1, last + 1):
            previous = history[index - 1].cluster_set_info.total_point_distance_from_center
            current = history[index].cluster_set_info.total_point_distance_from_center
            threshold = max(self.abs_tol, self.rel_tol * abs(previous))
            if previous - current > threshold:
                return False
        return True

    def __repr__(self) -> str:
        return (f"NoImprovementCondition(patience={self.patience}, "
                f"rel_tol={self.rel_tol}, abs_tol={self.abs_tol})")


class VarianceVariationCondition(TerminationCondition):
    """Stop when the point distance variance stabilized over ``period`` iterations."""

    def __init__(self, variation: float, period: int = 1):
        if variation <= 0:
            raise ConfigurationError(f"variation must be positive, got {variation}")
        if period < 1:
            raise ConfigurationError(f"period must be positive, got {period}")
        self.variation = variation
        self.period = period

    def is_satisfied(self, history: IterationHistory) -> bool:
        last = history.iteration_count
        if last - self.period < 1:
            return False

        for index in range(last - self.period + 1, last + 1):
            previous = history[index - 1].cluster_set_info.point_distance_from_cluster_variance
            current = history[index].cluster_set_info.point_distance_from_cluster_variance
            change = abs(current - previous)
            if previous > 1e-12:
                change /= previous
            if change >= self.variation:
                return False
        return True

    def __repr__(self) -> str:
        return f"VarianceVariationCondition(variation={self.variation}, period={self.period})"


class DeadlineCondition(TerminationCondition):
    """Stop once ``seconds`` of wall-clock time have passed since the run began."""

    def __init__(self, seconds: float):
        if seconds < 0:
            raise ConfigurationError(f"seconds must be non-negative, got {seconds}")
        self.seconds = seconds

    def is_satisfied(self, history: IterationHistory) -> bool:
        # Points are only assigned from iteration 1 on
        if history.iteration_count < 1:
            return False
        return history.elapsed >= self.seconds

    def __repr__(self) -> str:
        return f"DeadlineCondition(seconds={self.seconds})"


class CombinedCondition(TerminationCondition):
    """Combine multiple termination conditions with AND/OR logic."""

    def __init__(self, conditions: List[TerminationCondition], mode: str = 'any'):
        """
        Args:
            conditions: List of termination conditions
            mode: 'any' (OR) or 'all' (AND)
        """
        if mode not in ['any', 'all']:
            raise ConfigurationError(f"Mode must be 'any' or 'all', got {mode}")
        if not conditions:
            raise ConfigurationError("CombinedCondition needs at least one condition")
        self.conditions = list(conditions)
        self.mode = mode

    def is_satisfied(self, history: IterationHistory) -> bool:
        results = (condition.is_satisfied(history) for condition in self.conditions)
        if self.mode == 'any':
            return any(results)
        return all(results)

    def __repr__(self) -> str:
        return f"CombinedCondition({self.conditions!r}, mode={self.mode!r})"


class NeverCondition(TerminationCondition):
    """Never satisfied; only useful inside a CombinedCondition."""

    def is_satisfied(self, history: IterationHistory) -> bool:
        return False
