"""Predictive two-stage vector quantisation of line spectrum frequencies."""

from __future__ import annotations

import math
from collections.abc import Sequence

LPC_ORDER = 10
PREDICTOR_ORDER = 4

PREDICTOR_1: tuple[tuple[float, ...], ...] = (
    (0.2570, 0.2780, 0.2800, 0.2736, 0.2757, 0.2764, 0.2675, 0.2678, 0.2779, 0.2647),
    (0.2142, 0.2194, 0.2331, 0.2230, 0.2272, 0.2252, 0.2148, 0.2123, 0.2115, 0.2096),
    (0.1670, 0.1523, 0.1567, 0.1580, 0.1601, 0.1569, 0.1589, 0.1555, 0.1474, 0.1571),
    (0.1238, 0.0925, 0.0798, 0.0923, 0.0890, 0.0828, 0.1010, 0.0988, 0.0872, 0.1060),
)

PREDICTOR_2: tuple[tuple[float, ...], ...] = (
    (0.2360, 0.2405, 0.2499, 0.2495, 0.2517, 0.2591, 0.2636, 0.2625, 0.2551, 0.2310),
    (0.1285, 0.0925, 0.0779, 0.1060, 0.1183, 0.1176, 0.1277, 0.1268, 0.1193, 0.1211),
    (0.0981, 0.0589, 0.0401, 0.0654, 0.0761, 0.0728, 0.0841, 0.0826, 0.0776, 0.0891),
    (0.0923, 0.0486, 0.0287, 0.0498, 0.0526, 0.0482, 0.0621, 0.0636, 0.0584, 0.0794),
)

_LOW_EDGE = math.pi * 0.04
_HIGH_EDGE = math.pi * 0.92
_MID_BAND_EMPHASIS = 1.2

Matrix = Sequence[Sequence[float]]


def _vector(values: Sequence[float], what: str) -> list[float]:
    result = [float(v) for v in values]
    if len(result) != LPC_ORDER:
        raise ValueError(f"{what} must have {LPC_ORDER} values, got {len(result)}")
    return result


def _matrix(rows: Matrix, what: str, height: int | None = None) -> tuple[tuple[float, ...], ...]:
    table = tuple(tuple(float(v) for v in row) for row in rows)
    if not table:
        raise ValueError(f"{what} is empty")
    if height is not None and len(table) != height:
        raise ValueError(f"{what} must have {height} rows, got {len(table)}")
    if any(len(row) != LPC_ORDER for row in table):
        raise ValueError(f"every row of {what} must have {LPC_ORDER} values")
    return table


def _weight(gap: float) -> float:
    return 1.0 if gap > 0.0 else gap * gap * 10.0 + 1.0


def calc_weights(lsf: Sequence[float]) -> list[float]:
    """Distortion weights that emphasise closely spaced frequencies."""
    lsf = _vector(lsf, "lsf")
    weights = [_weight(lsf[1] - _LOW_EDGE - 1.0)]
    weights.extend(_weight(upper - lower - 1.0) for upper, lower in zip(lsf[2:], lsf[:-2]))
    weights.append(_weight(_HIGH_EDGE - lsf[LPC_ORDER - 2] - 1.0))
    weights[4] *= _MID_BAND_EMPHASIS
    weights[5] *= _MID_BAND_EMPHASIS
    return weights


def weighted_distortion(
    original: Sequence[float], quantized: Sequence[float], weights: Sequence[float]
) -> float:
    """Weighted squared error between two vectors."""
    return sum(
        (o - q) * (o - q) * w for o, q, w in zip(original, quantized, weights, strict=True)
    )


def ma_predict(lsf: Sequence[float], coefficients: Matrix, history: Matrix) -> list[float]:
    """Normalised residual of lsf after moving-average prediction."""
    lsf = _vector(lsf, "lsf")
    coefficients = _matrix(coefficients, "coefficients", PREDICTOR_ORDER)
    history = _matrix(history, "history", PREDICTOR_ORDER)
    residual = []
    for value, coeff_column, hist_column in zip(lsf, zip(*coefficients), zip(*history)):
        norm = sum(coeff_column)
        for c, h in zip(coeff_column, hist_column):
            value -= h * c
        residual.append(value / (1.0 - norm))
    return residual


def inverse_ma_predict(residual: Sequence[float], coefficients: Matrix, history: Matrix) -> list[float]:
    """Rebuild lsf from a normalised residual and the predictor history."""
    residual = _vector(residual, "residual")
    coefficients = _matrix(coefficients, "coefficients", PREDICTOR_ORDER)
    history = _matrix(history, "history", PREDICTOR_ORDER)
    lsf = []
    for value, coeff_column, hist_column in zip(residual, zip(*coefficients), zip(*history)):
        predicted = sum(h * c for c, h in zip(coeff_column, hist_column))
        lsf.append(predicted + value * (1.0 - sum(coeff_column)))
    return lsf


def vq_quantize(
    residual: Sequence[float],
    weights: Sequence[float],
    codebook1: Matrix,
    codebook2: Matrix,
) -> list[float]:
    """Two-stage quantiser: full first stage, weighted split second stage."""
    residual = _vector(residual, "residual")
    weights = _vector(weights, "weights")
    codebook1 = _matrix(codebook1, "codebook1")
    codebook2 = _matrix(codebook2, "codebook2")

    stage1 = min(
        codebook1, key=lambda row: sum((r - c) * (r - c) for r, c in zip(residual, row))
    )
    target = [r - s for r, s in zip(residual, stage1)]
    half = LPC_ORDER // 2

    def split_distance(row: tuple[float, ...], part: slice) -> float:
        return sum(
            w * (t - c) * (t - c)
            for w, t, c in zip(weights[part], target[part], row[part])
        )

    lower = slice(0, half)
    upper = slice(half, LPC_ORDER)
    lower_row = min(codebook2, key=lambda row: split_distance(row, lower))
    upper_row = min(codebook2, key=lambda row: split_distance(row, upper))
    return [s + c for s, c in zip(stage1[lower], lower_row[lower])] + [
        s + c for s, c in zip(stage1[upper], upper_row[upper])
    ]


class LsfQuantizer:
    """Switched-predictor LSF quantiser that keeps its prediction history."""

    def __init__(self, codebook1: Matrix, codebook2: Matrix) -> None:
        self.codebook1 = _matrix(codebook1, "codebook1")
        self.codebook2 = _matrix(codebook2, "codebook2")
        self.history: list[list[float]] = []
        self.reset()

    def reset(self) -> None:
        """Return the predictor history to evenly spaced frequencies."""
        initial = [math.pi / (LPC_ORDER + 1) * (j + 1) for j in range(LPC_ORDER)]
        self.history = [list(initial) for _ in range(PREDICTOR_ORDER)]

    def quantize_lsf(self, lsf: Sequence[float]) -> list[float]:
        """Quantise line spectrum frequencies (radians) and update the history."""
        lsf = _vector(lsf, "lsf")
        weights = calc_weights(lsf)
        candidates = []
        for predictor in (PREDICTOR_1, PREDICTOR_2):
            residual = ma_predict(lsf, predictor, self.history)
            quantized_residual = vq_quantize(residual, weights, self.codebook1, self.codebook2)
            rebuilt = inverse_ma_predict(quantized_residual, predictor, self.history)
            distortion = weighted_distortion(lsf, rebuilt, weights)
            candidates.append((distortion, rebuilt, quantized_residual))
        first, second = candidates
        _, rebuilt, quantized_residual = second if first[0] > second[0] else first
        self.history = [quantized_residual] + self.history[:-1]
        return rebuilt

    def quantize_lsp(self, lsp: Sequence[float]) -> list[float]:
        """Quantise line spectrum pairs (cosine domain)."""
        lsp = _vector(lsp, "lsp")
        return [math.cos(f) for f in self.quantize_lsf([math.acos(p) for p in lsp])]