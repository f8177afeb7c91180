"""Reference signal estimation by LPC analysis and resynthesis."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from speechqual.filters import AllPoleFilter, AllZeroFilter, IIRFilter
from speechqual.lpc import LpcAnalyzer, LpcBuffer
from speechqual.quant import LsfQuantizer

STEP_SIZE = 40
FILTER_BUFFER_DELAY = 0

PREPROCESS_NUMERATOR: tuple[float, ...] = (0.92727435, -1.8544941, 0.92727435)
PREPROCESS_DENOMINATOR: tuple[float, ...] = (1.0, -1.9059465, 0.91140240)


@dataclass(frozen=True)
class EnhancementResult:
    """Resynthesised signal, the number of samples it covers and its delay."""

    enhanced: list[float]
    sample_count: int
    delay: int


def extract_frames(signal: Sequence[float], step: int) -> Iterator[list[float]]:
    """Yield consecutive full blocks of ``step`` samples; a short tail is dropped."""
    if step <= 0:
        raise ValueError("step must be positive")
    values = [float(s) for s in signal]
    for start in range(0, len(values) - step + 1, step):
        yield values[start:start + step]


def enhance_speech(signal: Sequence[float], quantizer: LsfQuantizer) -> EnhancementResult:
    """High-pass, analyse and resynthesise a signal from quantised LPC parameters.

    The returned signal has the length of the input; samples beyond the last
    full frame are zero.
    """
    samples = [float(s) for s in signal]
    total = len(samples)

    lpc_buffer = LpcBuffer(STEP_SIZE)
    analyzer = LpcAnalyzer(quantizer, lpc_buffer.order, lpc_buffer.window_size)
    residual_filter = AllZeroFilter(lpc_buffer.order, STEP_SIZE)
    synthesis_filter = AllPoleFilter(lpc_buffer.order, STEP_SIZE)
    preprocess = IIRFilter(2, 2, STEP_SIZE)
    preprocess.set_coefficients(PREPROCESS_NUMERATOR, PREPROCESS_DENOMINATOR, True)

    synthesised: list[float] = []
    for frame in extract_frames(samples, STEP_SIZE):
        filtered = preprocess.process(frame)
        windowed = lpc_buffer.update(filtered)
        result = analyzer.analyse(windowed)

        residual_filter.set_coefficients(result.lpc, False)
        residual = residual_filter.process(lpc_buffer.analysis_signal)

        synthesis_filter.set_coefficients(result.quantized_lpc, False)
        synthesised.extend(synthesis_filter.process(residual))

    count = len(synthesised)
    enhanced = synthesised + [0.0] * (total - count)
    return EnhancementResult(
        enhanced=enhanced,
        sample_count=count,
        delay=FILTER_BUFFER_DELAY + lpc_buffer.delay,
    )