"""Block-oriented linear filters that keep their state between calls."""

from __future__ import annotations

from collections.abc import Sequence


class _StatefulFilter:
    """Common coefficient handling for direct-form filters."""

    def __init__(self, order: int, max_step: int) -> None:
        if order < 0:
            raise ValueError("filter order must not be negative")
        if max_step < 0:
            raise ValueError("maximum step size must not be negative")
        self.order = order
        self.max_step = max_step
        self.coefficients: list[float] = [0.0] * (order + 1)

    def _check_coefficients(self, coefficients: Sequence[float]) -> list[float]:
        values = [float(c) for c in coefficients]
        if len(values) != self.order + 1:
            raise ValueError(
                f"expected {self.order + 1} coefficients, got {len(values)}"
            )
        return values

    def _check_block(self, samples: Sequence[float]) -> list[float]:
        values = [float(s) for s in samples]
        if len(values) > self.max_step:
            raise ValueError(
                f"block of {len(values)} samples exceeds maximum step {self.max_step}"
            )
        return values


class AllZeroFilter(_StatefulFilter):
    """FIR filter: y[n] = sum(c[j] * x[n - j])."""

    def __init__(self, order: int, max_step: int) -> None:
        super().__init__(order, max_step)
        self._memory: list[float] = [0.0] * (order + 1)

    def set_coefficients(self, coefficients: Sequence[float], clear: bool = False) -> None:
        """Load order + 1 coefficients; optionally clear the filter state."""
        self.coefficients = self._check_coefficients(coefficients)
        if clear:
            self._memory = [0.0] * (self.order + 1)

    def process(self, samples: Sequence[float]) -> list[float]:
        """Filter one block of samples and return the output block."""
        block = self._check_block(samples)
        span = self.order + 1
        work = self._memory + block
        coeffs = self.coefficients
        output = [
            work[i] * coeffs[0]
            + sum(c * work[i - j] for j, c in enumerate(coeffs[1:], start=1))
            for i in range(span, len(work))
        ]
        self._memory = work[len(block):len(block) + span]
        return output


class AllPoleFilter(_StatefulFilter):
    """Recursive filter: y[n] = x[n] - sum(c[j] * y[n - j]) for j >= 1."""

    def __init__(self, order: int, max_step: int) -> None:
        super().__init__(order, max_step)
        self._history: list[float] = [0.0] * order

    def set_coefficients(self, coefficients: Sequence[float], clear: bool = False) -> None:
        """Load order + 1 coefficients; optionally clear the filter state."""
        self.coefficients = self._check_coefficients(coefficients)
        if clear:
            self._history = [0.0] * self.order

    def process(self, samples: Sequence[float]) -> list[float]:
        """Filter one block of samples and return the output block."""
        block = self._check_block(samples)
        work = list(self._history)
        feedback = self.coefficients[1:]
        for x in block:
            s = x
            for j, c in enumerate(feedback, start=1):
                s -= c * work[-j]
            work.append(s)
        output = work[self.order:]
        self._history = work[len(work) - self.order:] if self.order else []
        return output


class IIRFilter:
    """Cascade of an all-zero section followed by an all-pole section."""

    def __init__(self, numerator_order: int, denominator_order: int, max_step: int) -> None:
        self.zeros = AllZeroFilter(numerator_order, max_step)
        self.poles = AllPoleFilter(denominator_order, max_step)

    def set_coefficients(
        self,
        numerator: Sequence[float],
        denominator: Sequence[float],
        clear: bool = False,
    ) -> None:
        """Load both coefficient sets; optionally clear both states."""
        self.zeros.set_coefficients(numerator, clear)
        self.poles.set_coefficients(denominator, clear)

    def process(self, samples: Sequence[float]) -> list[float]:
        """Filter one block of samples and return the output block."""
        return self.poles.process(self.zeros.process(samples))