"""
Exception and warning types raised by the clustering engine.
"""


class ClusteringError(Exception):
    """Base class for all errors raised by lloydkit."""


class InvalidInputError(ClusteringError, ValueError):
    """Points or cluster counts handed to the engine are unusable.

    Raised for an empty point set, inconsistent point dimensions,
    non-finite coordinates, duplicate point ids or a non-positive
    cluster count. No partial run is attempted.
    """


class ConfigurationError(ClusteringError, ValueError):
    """A clustering strategy or one of its policies is inconsistent."""


class NumericInstabilityWarning(RuntimeWarning):
    """Empty clusters had to be kept because pruning would go below the floor."""
