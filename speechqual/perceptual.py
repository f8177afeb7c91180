"""Perceptual (Bark scale) transforms and disturbance aggregation."""

from __future__ import annotations

import math
from collections.abc import Sequence

CENTRE_OF_BAND_BARK: tuple[float, ...] = (
    0.078672, 0.316341, 0.636559, 0.961246, 1.290450, 1.624217, 1.962597,
    2.305636, 2.653383, 3.005889, 3.363201, 3.725371, 4.092449, 4.464486,
    4.841533, 5.223642, 5.610866, 6.003256, 6.400869, 6.803755, 7.211971,
    7.625571, 8.044611, 8.469146, 8.899232, 9.334927, 9.776288, 10.223374,
    10.676242, 11.134952, 11.599563, 12.070135, 12.546731, 13.029408,
    13.518232, 14.013264, 14.514566, 15.022202, 15.536238, 16.056736,
    16.583761, 17.117382,
)

WIDTH_OF_BAND_BARK: tuple[float, ...] = (
    0.157344, 0.317994, 0.322441, 0.326934, 0.331474, 0.336061, 0.340697,
    0.345381, 0.350114, 0.354897, 0.359729, 0.364611, 0.369544, 0.374529,
    0.379565, 0.384653, 0.389794, 0.394989, 0.400236, 0.405538, 0.410894,
    0.416306, 0.421773, 0.427297, 0.432877, 0.438514, 0.444209, 0.449962,
    0.455774, 0.461645, 0.467577, 0.473569, 0.479621, 0.485736, 0.491912,
    0.498151, 0.504454, 0.510819, 0.517250, 0.523745, 0.530308, 0.536934,
)

POWER_DENSITY_CORRECTION: tuple[float, ...] = (
    100.000000, 99.999992, 100.000000, 100.000008, 100.000008, 100.000015,
    99.999992, 99.999969, 50.000027, 100.000000, 99.999969, 100.000015,
    99.999947, 100.000061, 53.047077, 110.000046, 117.991989, 65.000000,
    68.760147, 69.999931, 71.428818, 75.000038, 76.843384, 80.968781,
    88.646126, 63.864388, 68.155350, 72.547775, 75.584831, 58.379192,
    80.950836, 64.135651, 54.384785, 73.821884, 64.437073, 59.176456,
    65.521278, 61.399822, 58.144047, 57.004543, 64.126297, 59.248363,
)

HZ_BANDS_PER_BARK_BAND: tuple[int, ...] = (
    1, 1, 1, 1, 1, 1, 1, 1, 2, 1, 1, 1, 1, 1, 2, 1, 1, 2, 2, 2, 2,
    2, 2, 2, 2, 3, 3, 3, 3, 4, 3, 4, 5, 4, 5, 6, 6, 7, 8, 9, 9, 11,
)

ABSOLUTE_THRESHOLD_POWER: tuple[float, ...] = (
    407380384.000000, 19498450.000000, 562341.437500, 38904.519531,
    9332.543945, 3090.295898, 831.763855, 363.078094, 141.253769,
    77.624718, 38.904518, 24.547091, 15.135613, 10.000000, 7.762471,
    5.754399, 4.466836, 3.630781, 3.090296, 2.630268, 2.344229, 2.137962,
    2.041738, 1.995262, 1.995262, 1.995262, 1.995262, 2.089296, 2.290868,
    2.454709, 2.691535, 2.951209, 3.162278, 3.467369, 3.715352, 3.890451,
    3.981072, 3.981072, 4.073803, 4.168694, 4.168694, 4.168694,
)

NUMBER_OF_BARK_BANDS = len(CENTRE_OF_BAND_BARK)
HZ_BANDS_USED = sum(HZ_BANDS_PER_BARK_BAND)

_ZWICKER_POWER = 0.23
_MAX_ASYMMETRY = 5.0
_MIN_ASYMMETRY = 0.5
_FRAMES_PER_SPLIT_SECOND = 20


def _check_bark(values: Sequence[float], what: str) -> None:
    if len(values) != NUMBER_OF_BARK_BANDS:
        raise ValueError(
            f"{what} must have {NUMBER_OF_BARK_BANDS} Bark bands, got {len(values)}"
        )


def frequency_warping(hz_spectrum: Sequence[float]) -> list[float]:
    """Map a linear-frequency power spectrum onto Bark pitch power densities."""
    if len(hz_spectrum) < HZ_BANDS_USED:
        raise ValueError(
            f"spectrum needs at least {HZ_BANDS_USED} bands, got {len(hz_spectrum)}"
        )
    densities = []
    position = 0
    for count, correction in zip(HZ_BANDS_PER_BARK_BAND, POWER_DENSITY_CORRECTION):
        total = sum(hz_spectrum[position:position + count])
        position += count
        densities.append(total * correction)
    return densities


def total_audible(pitch_power_density: Sequence[float], factor: float) -> float:
    """Sum of band powers (excluding band 0) above factor times the hearing threshold."""
    _check_bark(pitch_power_density, "pitch power density")
    return sum(
        power
        for power, threshold in zip(pitch_power_density[1:], ABSOLUTE_THRESHOLD_POWER[1:])
        if power > factor * threshold
    )


def intensity_warping(pitch_power_density: Sequence[float]) -> list[float]:
    """Map Bark band powers to loudness densities (Zwicker's law)."""
    _check_bark(pitch_power_density, "pitch power density")
    loudness = []
    for power, centre, threshold in zip(
        pitch_power_density, CENTRE_OF_BAND_BARK, ABSOLUTE_THRESHOLD_POWER
    ):
        h = 9.0 / (centre + 2.0) if centre < 7.0 else 1.0
        exponent = _ZWICKER_POWER * math.pow(h, 0.15)
        if power > threshold:
            loudness.append(
                math.pow(threshold / 0.5, exponent)
                * (math.pow(0.5 + 0.5 * power / threshold, exponent) - 1.0)
            )
        else:
            loudness.append(0.0)
    return loudness


def difference(signal1: Sequence[float], signal2: Sequence[float]) -> list[float]:
    """Band-wise signal1 - signal2."""
    return [a - b for a, b in zip(signal1, signal2, strict=True)]


def minimum_weighted(
    factor1: float,
    signal1: Sequence[float],
    factor2: float,
    signal2: Sequence[float],
) -> list[float]:
    """Band-wise minimum of the two scaled signals."""
    return [
        min(factor1 * a, factor2 * b) for a, b in zip(signal1, signal2, strict=True)
    ]


def max_with(
    shift: int, factor: float, signal: Sequence[float], result: Sequence[float]
) -> list[float]:
    """Return result raised band-wise to factor * signal shifted by ``shift`` bands."""
    out = list(result)
    for index in range(max(-shift, 0), len(out) - max(shift, 0)):
        out[index] = max(out[index], factor * signal[index + shift])
    return out


def mask_with(mask: Sequence[float], disturbance: Sequence[float]) -> list[float]:
    """Pull disturbance values towards zero by the mask level (dead zone)."""
    out = []
    for level, value in zip(mask, disturbance, strict=True):
        if value > level:
            out.append(value - level)
        elif value < -level:
            out.append(value + level)
        else:
            out.append(0.0)
    return out


def maximum(signal: Sequence[float]) -> float:
    """Largest value of a non-empty sequence."""
    if not signal:
        raise ValueError("maximum of an empty signal")
    return max(signal)


def bark_integral(signal: Sequence[float]) -> float:
    """Integral of a Bark density over the Bark axis."""
    _check_bark(signal, "signal")
    return sum(value * width for value, width in zip(signal, WIDTH_OF_BAND_BARK))


def multiply_with_asymmetry_factor(
    distorted: Sequence[float],
    enhanced: Sequence[float],
    disturbance: Sequence[float],
) -> list[float]:
    """Weight disturbance by the clipped enhanced/distorted power ratio."""
    out = []
    for d, e, value in zip(distorted, enhanced, disturbance, strict=True):
        h = math.pow((e + 1.0) / (d + 1.0), 0.23)
        if h > _MAX_ASYMMETRY:
            h = _MAX_ASYMMETRY
        if h < _MIN_ASYMMETRY:
            h = 0.0
        out.append(value * h)
    return out


def bark_lp(disturbance: Sequence[float], power: float) -> float:
    """Aggregate a disturbance density over frequency with an Lp norm."""
    _check_bark(disturbance, "disturbance")
    total_weight = 0.0
    result = 0.0
    for value, width in zip(disturbance[1:], WIDTH_OF_BAND_BARK[1:]):
        result += math.pow(abs(value) * width, power)
        total_weight += width
    result /= total_weight
    return math.pow(result, 1.0 / power) * total_weight


def lpq_weight(
    frame_disturbance: Sequence[float],
    power_split_second: float,
    power_time: float,
    start: int,
    stop: int,
) -> float:
    """Two-stage Lp aggregation over overlapping split-second blocks of frames."""
    if start > stop:
        raise ValueError("start frame lies after stop frame")
    result_time = 0.0
    blocks = 0
    for block_start in range(start, stop + 1, _FRAMES_PER_SPLIT_SECOND // 2):
        block_end = min(block_start + _FRAMES_PER_SPLIT_SECOND, stop + 1)
        frames = frame_disturbance[block_start:block_end]
        block = sum(math.pow(v, power_split_second) for v in frames) / len(frames)
        block = math.pow(block, 1.0 / power_split_second)
        result_time += math.pow(block, power_time)
        blocks += 1
    return math.pow(result_time / blocks, 1.0 / power_time)


def fraction_in_between(
    hz_spectrum: Sequence[float],
    lower_hz: float,
    upper_hz: float,
    sample_rate: float,
) -> float:
    """Share, in dB, of spectrum power between lower_hz and upper_hz inclusive."""
    if not hz_spectrum:
        raise ValueError("empty spectrum")
    resolution = sample_rate / len(hz_spectrum)
    total = 0.0
    selected = 0.0
    for index, power in enumerate(hz_spectrum):
        total += power
        if lower_hz <= index * resolution <= upper_hz:
            selected += power
    if total == 0.0:
        raise ValueError("spectrum has no power")
    if selected == 0.0:
        return -math.inf
    return 10.0 * math.log10(selected / total)