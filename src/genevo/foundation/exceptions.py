"""
genevo exception hierarchy.

Every error raised by the engine derives from GenevoError, so callers can catch
one base class. Errors carry a human-readable message, an optional suggestion
and a details dict with machine-readable context.

Example:
    try:
        result = simulator.step()
    except PopulationTooSmallError as e:
        print(f"Generation {e.details['iteration']} collapsed: {e}")
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class GenevoError(Exception):
    """
    Base exception for all genevo errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(GenevoError, ValueError):
    """Raised when configuration is invalid or incomplete."""

    pass


class MissingConfigError(ConfigurationError):
    """Raised when a builder is asked to build without a required component."""

    def __init__(self, field: str, config_class: str | None = None, method: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Call {method or 'with_' + field}(...) before building"
        if config_class:
            suggestion += f" on {config_class}"
        super().__init__(message, suggestion, {"field": field})


class InvalidOperatorError(ConfigurationError):
    """Raised when an unknown operator name is requested from the registry."""

    def __init__(
        self,
        operator_type: str,
        operator_name: str,
        available: list[str] | None = None,
    ) -> None:
        message = f"Unknown {operator_type} operator '{operator_name}'."
        suggestion = f"Available {operator_type} operators: {', '.join(available)}" if available else None
        super().__init__(
            message,
            suggestion,
            {"operator_type": operator_type, "operator_name": operator_name},
        )


# =============================================================================
# Algorithm Errors
# =============================================================================


class AlgorithmError(GenevoError):
    """Base class for errors raised while processing a generation."""

    pass


class EmptyPopulationError(AlgorithmError):
    """Raised when a generation is started with no individuals at all."""

    def __init__(self, iteration: int, min_size: int) -> None:
        message = (
            f"Population of generation {iteration} is empty. "
            f"The required minimum size for populations is {min_size}."
        )
        suggestion = "Check that the reinsertion operator keeps the population size, then reset the algorithm"
        super().__init__(message, suggestion, {"iteration": iteration, "min_size": min_size})


class PopulationTooSmallError(AlgorithmError):
    """Raised when a generation is started with fewer individuals than required."""

    def __init__(self, iteration: int, size: int, min_size: int) -> None:
        message = (
            f"Population of generation {iteration} has a size of {size} "
            f"which is smaller than the required minimum size of {min_size}"
        )
        suggestion = "Use a larger initial population or lower the minimum population size"
        super().__init__(
            message,
            suggestion,
            {"iteration": iteration, "size": size, "min_size": min_size},
        )


# =============================================================================
# Simulation Errors
# =============================================================================


class SimulationError(GenevoError):
    """Base class for simulation driver errors."""

    pass


class SimulationAlreadyRunningError(SimulationError):
    """Raised when the driver is asked to start while a run is in progress."""

    def __init__(self, mode: str, started_at: datetime | None, suggestion: str | None = None) -> None:
        message = f"Simulation already running in {mode} mode since {started_at}"
        super().__init__(message, suggestion, {"mode": mode, "started_at": started_at})


class UnexpectedSimulationError(SimulationError):
    """Raised on internal invariant violations of the simulation driver."""

    def __init__(self, message: str = "Unexpected error! No loop of the simulation has ever been processed!") -> None:
        super().__init__(message)


__all__ = [
    "GenevoError",
    "ConfigurationError",
    "MissingConfigError",
    "InvalidOperatorError",
    "AlgorithmError",
    "EmptyPopulationError",
    "PopulationTooSmallError",
    "SimulationError",
    "SimulationAlreadyRunningError",
    "UnexpectedSimulationError",
]
