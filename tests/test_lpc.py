import math
import random

import pytest

from speechqual.lpc import (
    INITIAL_LSP,
    LpcAnalyzer,
    LpcBuffer,
    autocorrelation,
    chebyshev,
    levinson,
    lpc_to_lsp,
    lsp_to_lpc,
)
from speechqual.quant import LsfQuantizer

CODEBOOK1 = [[0.0] * 10, [0.1] * 10, [-0.1] * 10]
CODEBOOK2 = [[0.0] * 10, [0.01] * 10, [-0.01] * 10]


def _noise(seed, count, scale=1000.0):
    rng = random.Random(seed)
    return [rng.uniform(-scale, scale) for _ in range(count)]


def _speechlike(count):
    return [
        3000.0 * math.sin(2 * math.pi * 300 * n / 8000)
        + 1500.0 * math.sin(2 * math.pi * 1100 * n / 8000)
        + 500.0 * math.sin(2 * math.pi * 2500 * n / 8000 + 0.3)
        for n in range(count)
    ]


def _windowed_frame():
    buffer = LpcBuffer(40)
    signal = _speechlike(240)
    frame = []
    for start in range(0, 240, 40):
        frame = buffer.update(signal[start:start + 40])
    return frame


def test_autocorrelation_of_silence_is_clamped():
    assert autocorrelation([0.0, 0.0, 0.0], 2) == [1.0, 0.0, 0.0]


def test_autocorrelation_zero_lag_dominates():
    r = autocorrelation(_noise(1, 200), 10)
    assert len(r) == 11
    assert all(abs(v) <= r[0] for v in r)


def test_autocorrelation_ignores_zero_padding_and_scales_quadratically():
    signal = _noise(2, 100)
    r = autocorrelation(signal, 5)
    assert autocorrelation([0.0] * 7 + signal + [0.0] * 3, 5) == pytest.approx(r)
    assert autocorrelation([2 * s for s in signal], 5) == pytest.approx([4 * v for v in r])


def test_autocorrelation_negative_order():
    with pytest.raises(ValueError):
        autocorrelation([1.0, 2.0], -1)


def test_levinson_solves_normal_equations():
    r = autocorrelation(_noise(3, 240), 10)
    lpc, reflection, error = levinson(r, 10)
    assert lpc[0] == 1.0
    assert len(lpc) == 11 and len(reflection) == 10
    for i in range(1, 11):
        total = sum(lpc[j] * r[abs(i - j)] for j in range(11))
        assert total == pytest.approx(0.0, abs=1e-6 * r[0])
    assert error == pytest.approx(sum(a * v for a, v in zip(lpc, r)), rel=1e-9)
    assert all(abs(k) < 1.0 for k in reflection)
    assert reflection[-1] == pytest.approx(lpc[10])


def test_levinson_first_order_reflection():
    lpc, reflection, error = levinson([2.0, 1.0], 1)
    assert reflection == pytest.approx([-0.5])
    assert lpc == pytest.approx([1.0, -0.5])
    assert error == pytest.approx(1.5)


@pytest.mark.parametrize("autocorr, order", [([1.0, 0.5], 0), ([1.0, 0.5], 2)])
def test_levinson_rejects_bad_input(autocorr, order):
    with pytest.raises(ValueError):
        levinson(autocorr, order)


@pytest.mark.parametrize("angle", [0.0, 0.4, 1.3, 2.5, math.pi])
def test_chebyshev_first_order_is_double_angle(angle):
    assert chebyshev(math.cos(angle), [1.0, 0.0], 1) == pytest.approx(math.cos(2 * angle))


def test_chebyshev_needs_enough_coefficients():
    with pytest.raises(ValueError):
        chebyshev(0.5, [1.0, 0.0], 2)


def test_flat_predictor_has_uniformly_spaced_lsp():
    lsp = lpc_to_lsp([1.0] + [0.0] * 10, INITIAL_LSP, 10)
    expected = [math.cos((k + 1) * math.pi / 11) for k in range(10)]
    assert lsp == pytest.approx(expected, abs=1e-3)


def test_uniform_lsp_give_flat_predictor():
    lsp = [math.cos((k + 1) * math.pi / 11) for k in range(10)]
    assert lsp_to_lpc(lsp, 10) == pytest.approx([1.0] + [0.0] * 10, abs=1e-9)


def test_lsp_round_trip():
    lpc = lsp_to_lpc(INITIAL_LSP, 10)
    assert lpc[0] == 1.0
    assert lpc_to_lsp(lpc, [0.0] * 10, 10) == pytest.approx(list(INITIAL_LSP), abs=1e-3)


def test_lpc_to_lsp_falls_back_to_old_values():
    old = [0.9, 0.7, 0.5, 0.3, 0.1, -0.1, -0.3, -0.5, -0.7, -0.9]
    lpc = [1.0, 1.0, 0.0, 0.0, 0.0, 100.0, 0.0, 0.0, 0.0, 0.0, 0.0]
    assert lpc_to_lsp(lpc, old, 10) == old


def test_lsp_conversion_rejects_odd_order():
    with pytest.raises(ValueError):
        lsp_to_lpc([0.5] * 9, 9)
    with pytest.raises(ValueError):
        lpc_to_lsp([1.0] * 10, [0.0] * 9, 9)


def test_buffer_window_and_delay():
    buffer = LpcBuffer(40)
    assert buffer.delay == 40
    assert buffer.window[0] == pytest.approx(0.08)
    assert buffer.window[200] == pytest.approx(1.0)
    windowed = buffer.update([1.0] * 40)
    assert buffer.time_buffer[-40:] == [1.0] * 40
    assert buffer.time_buffer[:200] == [0.0] * 200
    assert windowed[-40:] == pytest.approx(buffer.window[-40:])


def test_buffer_analysis_signal_lags_one_step():
    buffer = LpcBuffer(40)
    first = [float(i) for i in range(40)]
    second = [float(-i) for i in range(40)]
    buffer.update(first)
    buffer.update(second)
    assert buffer.analysis_signal == first


def test_buffer_rejects_bad_sizes():
    with pytest.raises(ValueError):
        LpcBuffer(0)
    with pytest.raises(ValueError):
        LpcBuffer(81)
    with pytest.raises(ValueError):
        LpcBuffer(40).update([0.0] * 39)


def test_analyzer_requires_order_ten():
    with pytest.raises(ValueError):
        LpcAnalyzer(LsfQuantizer(CODEBOOK1, CODEBOOK2), 8, 240)


def test_analyzer_on_silence_gives_flat_predictor():
    analyzer = LpcAnalyzer(LsfQuantizer(CODEBOOK1, CODEBOOK2), 10, 240)
    result = analyzer.analyse([0.0] * 240)
    assert result.lpc == pytest.approx([1.0] + [0.0] * 10)
    assert result.reflection == pytest.approx([0.0] * 10)
    assert result.quantized_lpc[0] == 1.0
    assert len(result.quantized_lpc) == 11


def test_analyzer_on_speechlike_frame():
    frame = _windowed_frame()
    analyzer = LpcAnalyzer(LsfQuantizer(CODEBOOK1, CODEBOOK2), 10, 240)
    result = analyzer.analyse(frame)
    assert result.order == 10
    assert result.lpc[0] == 1.0
    assert all(abs(k) < 1.0 for k in result.reflection)
    assert all(a > b for a, b in zip(result.lsp, result.lsp[1:]))
    assert analyzer.lsp == result.lsp
    assert result.quantized_lpc == pytest.approx(lsp_to_lpc(result.quantized_lsp, 10))


def test_analyzer_is_deterministic_and_resets_quantizer():
    frame = _windowed_frame()
    quantizer = LsfQuantizer(CODEBOOK1, CODEBOOK2)
    first = LpcAnalyzer(quantizer, 10, 240).analyse(frame)
    second = LpcAnalyzer(quantizer, 10, 240).analyse(frame)
    assert first == second


def test_analyzer_rejects_short_frame():
    analyzer = LpcAnalyzer(LsfQuantizer(CODEBOOK1, CODEBOOK2), 10, 240)
    with pytest.raises(ValueError):
        analyzer.analyse([0.0] * 100)