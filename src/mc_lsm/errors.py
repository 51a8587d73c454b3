"""
Exception taxonomy for the simulation engines.

Configuration and convergence errors are meant to reach the caller; numerical
invariant violations indicate a defect and should never be caught and ignored.
"""


class MCPricingError(Exception):
    """Base class for all errors raised by the pricing engines."""

    pass


class ConfigurationError(MCPricingError, ValueError):
    """Raised when an engine or driver is configured inconsistently."""

    pass


class ConvergenceError(MCPricingError, RuntimeError):
    """
    Raised when the sample budget is exhausted before reaching the tolerance.

    Attributes
    ----------
    error_estimate : float
        Error estimate when the budget ran out
    tolerance : float
        Requested absolute tolerance
    samples : int
        Samples drawn so far
    max_samples : int
        Sample budget
    """

    def __init__(
        self,
        error_estimate: float,
        tolerance: float,
        samples: int,
        max_samples: int
    ) -> None:
        self.error_estimate = error_estimate
        self.tolerance = tolerance
        self.samples = samples
        self.max_samples = max_samples
        super().__init__(
            f"max number of samples ({max_samples}) reached after {samples} samples, "
            f"while error ({error_estimate:.6g}) is still above tolerance ({tolerance:.6g})"
        )


class NumericalInvariantError(MCPricingError, ArithmeticError):
    """Raised on NaN samples, negative variance or negative sample counts."""

    pass


class InsufficientSamplesError(MCPricingError, ValueError):
    """Raised when a statistic is requested from too few samples."""

    pass


class SimulationCancelledError(MCPricingError):
    """Raised when a cancellation token is set between two batches."""

    pass
