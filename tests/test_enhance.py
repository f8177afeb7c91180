import math

import pytest

from speechqual.enhance import EnhancementResult, enhance_speech, extract_frames
from speechqual.quant import LsfQuantizer


def _quantizer() -> LsfQuantizer:
    codebook1 = [
        [0.0] * 10,
        [0.1 * (j + 1) for j in range(10)],
        [0.05 * (j + 1) for j in range(10)],
    ]
    codebook2 = [
        [0.0] * 10,
        [0.01] * 10,
        [-0.01] * 10,
    ]
    return LsfQuantizer(codebook1, codebook2)


def _test_signal(length: int) -> list[float]:
    return [
        1000.0 * math.sin(2 * math.pi * 440 * n / 8000)
        + 300.0 * math.sin(2 * math.pi * 1300 * n / 8000)
        for n in range(length)
    ]


def test_extract_frames_drops_short_tail():
    signal = list(range(100))
    frames = list(extract_frames(signal, 40))
    assert frames == [[float(v) for v in range(40)], [float(v) for v in range(40, 80)]]


def test_extract_frames_exact_multiple():
    frames = list(extract_frames([1.0] * 120, 40))
    assert len(frames) == 3
    assert all(len(f) == 40 for f in frames)


def test_extract_frames_rejects_bad_step():
    with pytest.raises(ValueError):
        list(extract_frames([1.0, 2.0], 0))


def test_short_signal_has_no_enhanced_samples():
    result = enhance_speech([5.0] * 30, _quantizer())
    assert isinstance(result, EnhancementResult)
    assert result.sample_count == 0
    assert result.enhanced == [0.0] * 30


def test_delay_comes_from_lpc_buffer():
    result = enhance_speech([0.0] * 80, _quantizer())
    assert result.delay == 240 - 40 - 160


def test_silence_stays_silent():
    result = enhance_speech([0.0] * 100, _quantizer())
    assert result.sample_count == 80
    assert len(result.enhanced) == 100
    assert all(v == 0.0 for v in result.enhanced)


def test_tail_beyond_last_frame_is_zero():
    result = enhance_speech(_test_signal(430), _quantizer())
    assert result.sample_count == 400
    assert result.enhanced[400:] == [0.0] * 30
    assert all(math.isfinite(v) for v in result.enhanced)
    assert any(v != 0.0 for v in result.enhanced[:400])


def test_repeatable_with_same_quantizer():
    quantizer = _quantizer()
    signal = _test_signal(800)
    first = enhance_speech(signal, quantizer)
    second = enhance_speech(signal, quantizer)
    assert first.enhanced == second.enhanced
    assert first.sample_count == second.sample_count == 800


def test_empty_signal():
    result = enhance_speech([], _quantizer())
    assert result.enhanced == []
    assert result.sample_count == 0