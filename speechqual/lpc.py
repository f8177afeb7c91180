"""Linear prediction analysis: autocorrelation, Levinson recursion and LSP conversion."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from speechqual.quant import LPC_ORDER, LsfQuantizer

WINDOW_SIZE = 240
ANALYSIS_START = 160
GRID_POINTS = 60

INITIAL_LSP: tuple[float, ...] = (
    0.9595, 0.8413, 0.6549, 0.4154, 0.1423,
    -0.1423, -0.4154, -0.6549, -0.8413, -0.9595,
)

_HAMMING_PART = 200
_LAG_BANDWIDTH_HZ = 60.0
_LAG_SAMPLE_RATE = 8000.0
_WHITE_NOISE_CORRECTION = 1.0001
_MIN_PREDICTION_ERROR = 0.001
_BISECTION_STEPS = 4


def autocorrelation(signal: Sequence[float], order: int) -> list[float]:
    """Autocorrelation lags 0..order; lag 0 is raised to at least 1."""
    if order < 0:
        raise ValueError("order must not be negative")
    values = [float(s) for s in signal]
    size = len(values)
    result = [
        sum(a * b for a, b in zip(values[: size - lag], values[lag:]))
        for lag in range(order + 1)
    ]
    if result[0] < 1.0:
        result[0] = 1.0
    return result


def levinson(autocorr: Sequence[float], order: int) -> tuple[list[float], list[float], float]:
    """Levinson-Durbin recursion.

    Returns the predictor polynomial (order + 1 values, leading 1), the
    reflection coefficients (order values) and the prediction error.
    """
    if order < 1:
        raise ValueError("order must be at least 1")
    if len(autocorr) < order + 1:
        raise ValueError(f"need {order + 1} autocorrelation lags, got {len(autocorr)}")
    r = [float(v) for v in autocorr]
    reflection = [0.0] * order
    lpc = [0.0] * (order + 1)

    reflection[0] = -r[1] / r[0]
    lpc[0] = 1.0
    lpc[1] = reflection[0]
    error = r[0] + r[1] * reflection[0]

    for i in range(2, order + 1):
        s = sum(r[i - j] * lpc[j] for j in range(i))
        k = -s / error
        reflection[i - 1] = k
        for j in range(1, i // 2 + 1):
            mirror = i - j
            updated = lpc[j] + k * lpc[mirror]
            lpc[mirror] += k * lpc[j]
            lpc[j] = updated
        lpc[i] = k
        error += k * s
        if error <= 0.0:
            error = _MIN_PREDICTION_ERROR
    return lpc, reflection, error


def chebyshev(x: float, coefficients: Sequence[float], n: int) -> float:
    """Evaluate the Chebyshev series used for root search at cos-domain point x."""
    if n < 1:
        raise ValueError("series length must be at least 1")
    if len(coefficients) < n + 1:
        raise ValueError(f"need {n + 1} coefficients, got {len(coefficients)}")
    x2 = 2.0 * x
    b2 = 1.0
    b1 = x2 + coefficients[1]
    for i in range(2, n):
        b1, b2 = x2 * b1 - b2 + coefficients[i], b1
    return x * b1 - b2 + 0.5 * coefficients[n]


def _check_even_order(order: int) -> int:
    if order < 2 or order % 2:
        raise ValueError("order must be an even number of at least 2")
    return order // 2


def lpc_to_lsp(lpc: Sequence[float], old_lsp: Sequence[float], order: int = LPC_ORDER) -> list[float]:
    """Convert a predictor polynomial to line spectrum pairs (cosine domain).

    If not all roots are found, a copy of ``old_lsp`` is returned.
    """
    half = _check_even_order(order)
    if len(lpc) < order + 1:
        raise ValueError(f"need {order + 1} predictor coefficients, got {len(lpc)}")
    if len(old_lsp) < order:
        raise ValueError(f"need {order} previous LSP values, got {len(old_lsp)}")

    symmetric = [1.0]
    antisymmetric = [1.0]
    for i in range(1, half + 1):
        j = order + 1 - i
        symmetric.append(lpc[i] + lpc[j] - symmetric[-1])
        antisymmetric.append(lpc[i] - lpc[j] + antisymmetric[-1])
    polynomials = (symmetric, antisymmetric)
    current = 0

    lsp: list[float] = []
    x_low = math.cos(0.0)
    y_low = chebyshev(x_low, polynomials[current], half)
    step = 0
    while len(lsp) < order and step < GRID_POINTS:
        step += 1
        x_high, y_high = x_low, y_low
        x_low = math.cos(math.pi / GRID_POINTS * step)
        y_low = chebyshev(x_low, polynomials[current], half)
        if y_low * y_high <= 0.0:
            step -= 1
            for _ in range(_BISECTION_STEPS):
                x_mid = 0.5 * (x_low + x_high)
                y_mid = chebyshev(x_mid, polynomials[current], half)
                if y_low * y_mid <= 0.0:
                    x_high, y_high = x_mid, y_mid
                else:
                    x_low, y_low = x_mid, y_mid
            root = x_low - y_low * (x_high - x_low) / (y_high - y_low)
            lsp.append(root)
            current = 1 - current
            x_low = root
            y_low = chebyshev(x_low, polynomials[current], half)

    if len(lsp) < order:
        return [float(v) for v in old_lsp[:order]]
    return lsp


def _lsp_polynomial(roots: Sequence[float], half: int) -> list[float]:
    poly = [0.0] * (half + 1)
    poly[0] = 1.0
    poly[1] = -2.0 * roots[0]
    for i in range(2, half + 1):
        t = -2.0 * roots[i - 1]
        poly[i] = t * poly[i - 1] + 2.0 * poly[i - 2]
        for j in range(i - 1, 1, -1):
            poly[j] += t * poly[j - 1] + poly[j - 2]
        poly[1] += t
    return poly


def lsp_to_lpc(lsp: Sequence[float], order: int = LPC_ORDER) -> list[float]:
    """Convert line spectrum pairs (cosine domain) back to a predictor polynomial."""
    half = _check_even_order(order)
    if len(lsp) < order:
        raise ValueError(f"need {order} LSP values, got {len(lsp)}")
    values = [float(v) for v in lsp[:order]]
    sym = _lsp_polynomial(values[0::2], half)
    anti = _lsp_polynomial(values[1::2], half)
    for i in range(half, 0, -1):
        sym[i] += sym[i - 1]
        anti[i] -= anti[i - 1]
    lpc = [0.0] * (order + 1)
    lpc[0] = 1.0
    for i in range(1, half + 1):
        lpc[i] = 0.5 * (sym[i] + anti[i])
        lpc[order + 1 - i] = 0.5 * (sym[i] - anti[i])
    return lpc


def _analysis_window(size: int) -> list[float]:
    window = []
    for i in range(size):
        if i < _HAMMING_PART:
            window.append(0.54 - 0.46 * math.cos(2 * math.pi * i / 399))
        else:
            window.append(math.cos(2 * math.pi * (i - _HAMMING_PART) / 159))
    return window


class LpcBuffer:
    """Sliding analysis buffer: shifts in one step of samples and windows it."""

    def __init__(self, step_size: int) -> None:
        if not 0 < step_size <= WINDOW_SIZE - ANALYSIS_START:
            raise ValueError(
                f"step size must lie between 1 and {WINDOW_SIZE - ANALYSIS_START}"
            )
        self.step_size = step_size
        self.window_size = WINDOW_SIZE
        self.order = LPC_ORDER
        self.delay = WINDOW_SIZE - step_size - ANALYSIS_START
        self.window = _analysis_window(WINDOW_SIZE)
        self.time_buffer = [0.0] * WINDOW_SIZE
        self.windowed = [0.0] * WINDOW_SIZE

    @property
    def analysis_signal(self) -> list[float]:
        """The step of samples that the current analysis frame describes."""
        return self.time_buffer[ANALYSIS_START:ANALYSIS_START + self.step_size]

    def update(self, samples: Sequence[float]) -> list[float]:
        """Shift in one step of samples and return the windowed buffer."""
        block = [float(s) for s in samples]
        if len(block) != self.step_size:
            raise ValueError(f"expected {self.step_size} samples, got {len(block)}")
        self.time_buffer = self.time_buffer[self.step_size:] + block
        self.windowed = [s * w for s, w in zip(self.time_buffer, self.window)]
        return list(self.windowed)


@dataclass(frozen=True)
class LpcResult:
    """Outcome of analysing one windowed frame."""

    order: int
    lpc: list[float]
    reflection: list[float]
    quantized_lpc: list[float]
    prediction_error: float
    lsp: list[float]
    quantized_lsp: list[float]


def _lag_window(order: int) -> list[float]:
    lags = [_WHITE_NOISE_CORRECTION]
    for i in range(1, order + 1):
        factor = (2 * math.pi * _LAG_BANDWIDTH_HZ / _LAG_SAMPLE_RATE) * i
        lags.append(math.exp(-0.5 * factor * factor))
    return lags


class LpcAnalyzer:
    """Frame-by-frame LPC analysis with quantisation of the line spectrum pairs."""

    def __init__(
        self,
        quantizer: LsfQuantizer,
        order: int = LPC_ORDER,
        window_size: int = WINDOW_SIZE,
    ) -> None:
        if order != LPC_ORDER:
            raise ValueError(f"only order {LPC_ORDER} is supported")
        if window_size < 1:
            raise ValueError("window size must be positive")
        self.quantizer = quantizer
        self.order = order
        self.window_size = window_size
        self.lag_window = _lag_window(order)
        self.lsp = list(INITIAL_LSP)
        quantizer.reset()

    def analyse(self, windowed_signal: Sequence[float]) -> LpcResult:
        """Analyse one windowed frame of ``window_size`` samples."""
        if len(windowed_signal) < self.window_size:
            raise ValueError(
                f"expected {self.window_size} samples, got {len(windowed_signal)}"
            )
        r = autocorrelation(windowed_signal[: self.window_size], self.order)
        r = [value * lag for value, lag in zip(r, self.lag_window)]
        lpc, reflection, error = levinson(r, self.order)
        old_lsp = list(self.lsp)
        self.lsp = lpc_to_lsp(lpc, old_lsp, self.order)
        quantized_lsp = self.quantizer.quantize_lsp(self.lsp)
        quantized_lpc = lsp_to_lpc(quantized_lsp, self.order)
        return LpcResult(
            order=self.order,
            lpc=lpc,
            reflection=reflection,
            quantized_lpc=quantized_lpc,
            prediction_error=error,
            lsp=list(self.lsp),
            quantized_lsp=quantized_lsp,
        )