"""Detection of speech pauses and local background noise level."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from speechqual.stats import RunningStatistics

MAX_NUMBER_OF_VOWELS = 1000
ENVELOPE_STEP = 160

_MIN_ENV_DURING_SPEECH = 700.0
_MIN_PEAK_GAIN = 2.2
_MAX_TIME_TO_PEAK_SECS = 0.1
_MAX_VOWEL_DURATION_SECS = 0.4
_DURATION_INTERVAL = 1.0
_MIN_COUNT = 2
_DURATION_SILENCE = 0.2


class TooManyVowelsError(ValueError):
    """Raised when the signal holds more vowel events than can be tracked."""


@dataclass(frozen=True)
class LocalNoiseResult:
    """Measures of the pauses found between vowels."""

    fraction_zeroed_no_vowels: float
    local_back_noise: float
    mean_dist_samples: float
    back_mean: float
    back_log: float


def _envelopes(samples: Sequence[float]) -> list[float]:
    count = len(samples) // ENVELOPE_STEP
    result = []
    for index in range(count):
        block = samples[index * ENVELOPE_STEP:(index + 1) * ENVELOPE_STEP]
        mean_square = sum(h * h for h in block) / ENVELOPE_STEP
        result.append(math.sqrt(mean_square) + _MIN_ENV_DURING_SPEECH)
    return result


def _find_vowels(envelopes: list[float], sample_rate: float) -> list[tuple[float, float]]:
    count = len(envelopes)
    max_to_peak = int(sample_rate * _MAX_TIME_TO_PEAK_SECS / ENVELOPE_STEP)
    max_in_vowel = int(sample_rate * _MAX_VOWEL_DURATION_SECS / ENVELOPE_STEP)
    vowels: list[tuple[float, float]] = []
    index = 0
    while index < count:
        current = envelopes[index]
        peak = index + 1
        to_peak = 0
        max_envelope = envelopes[0]
        while (
            peak < count
            and envelopes[peak] < _MIN_PEAK_GAIN * current
            and to_peak < max_to_peak
        ):
            peak += 1
            to_peak += 1
            if peak < count and envelopes[peak] > max_envelope:
                max_envelope = envelopes[peak]

        if peak < count and envelopes[peak] >= _MIN_PEAK_GAIN * current:
            in_vowel = to_peak + 1
            recede_gain = math.sqrt(max_envelope / current)
            recede = peak + 1
            if recede < count and envelopes[recede] > max_envelope:
                max_envelope = envelopes[recede]
            while (
                recede < count
                and envelopes[recede] > recede_gain * current
                and in_vowel < max_in_vowel
            ):
                recede += 1
                in_vowel += 1
                if recede < count and envelopes[recede] > max_envelope:
                    max_envelope = envelopes[recede]
                recede_gain = math.sqrt(max_envelope / current)

            if recede < count and envelopes[recede] <= recede_gain * current:
                vowels.append(
                    (index * ENVELOPE_STEP / sample_rate, recede * ENVELOPE_STEP / sample_rate)
                )
                if len(vowels) >= MAX_NUMBER_OF_VOWELS:
                    raise TooManyVowelsError(
                        f"more than {MAX_NUMBER_OF_VOWELS - 1} vowels in the signal"
                    )
                index = recede
        index += 1
    return vowels


def local_background_noise(
    samples: Sequence[float],
    skip_start: int = 0,
    skip_end: int = 0,
    sample_rate: float = 8000,
) -> LocalNoiseResult:
    """Find pauses between vowels and measure the energy found in them."""
    samples = [float(s) for s in samples]
    total = len(samples)
    span = total - skip_start - skip_end
    if skip_start < 0 or skip_end < 0 or span <= 0:
        raise ValueError("skipped samples leave nothing to analyse")

    envelopes = _envelopes(samples)
    vowels = _find_vowels(envelopes, sample_rate)
    made_zero = [False] * total
    statistics = RunningStatistics("LocalBackgroundNoise")

    end_time = (len(envelopes) - 0.1) * ENVELOPE_STEP / sample_rate
    silence_length = int(_DURATION_SILENCE * sample_rate / ENVELOPE_STEP)

    offset = 0.0
    while offset < 0.99 * _DURATION_INTERVAL:
        interval_start = offset
        while interval_start + _DURATION_INTERVAL < end_time:
            interval_end = interval_start + _DURATION_INTERVAL
            count = sum(
                (interval_start <= t1 < interval_end) + (interval_start <= t2 < interval_end)
                for t1, t2 in vowels
            )
            if count < 2 * _MIN_COUNT:
                first = int(interval_start * sample_rate / ENVELOPE_STEP)
                last = int(interval_end * sample_rate / ENVELOPE_STEP)
                min_rms = 1e38
                best = -1
                for candidate in range(first, last - silence_length):
                    window = envelopes[candidate:candidate + silence_length]
                    rms = math.sqrt(sum(h * h for h in window) / (silence_length + 1))
                    if rms < min_rms:
                        min_rms = rms
                        best = candidate
                if best >= 0:
                    if envelopes[best] > 0:
                        start_sample = best * ENVELOPE_STEP
                        stop_sample = start_sample + silence_length * ENVELOPE_STEP
                        made_zero[start_sample:stop_sample] = [True] * (
                            stop_sample - start_sample
                        )
                        statistics.add_range(samples, start_sample, stop_sample, True)
                    envelopes[best:best + silence_length] = [0.0] * silence_length
            interval_start += _DURATION_INTERVAL
        offset += _DURATION_INTERVAL / 4

    zeroed = sum(made_zero[skip_start:total - skip_end])
    fraction = zeroed / span
    moments = statistics.moments()
    return LocalNoiseResult(
        fraction_zeroed_no_vowels=fraction,
        local_back_noise=fraction if fraction > 0 else 0.0,
        mean_dist_samples=moments.count / span,
        back_mean=moments.mean,
        back_log=10.0 * math.log10(abs(moments.mean) + 1.0),
    )