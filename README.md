# speechqual

Pure-Python building blocks for judging the quality of a narrow-band speech
recording from the recording alone. The package has no third-party
dependencies; signals are plain sequences of floats, by default sampled at
8 kHz.

## What is inside

| Module | Purpose |
| --- | --- |
| `speechqual.filters` | Stateful `AllZeroFilter` (FIR), `AllPoleFilter` and `IIRFilter` that process a signal block by block. |
| `speechqual.stats` | `RunningStatistics`, which gathers sum, minimum and maximum of values and returns `Moments` (mean, standard deviation, count); ranges of a vector that overlap ranges already added are clipped. |
| `speechqual.perceptual` | Hz-to-Bark frequency warping, loudness (intensity) warping, masking helpers, disturbance aggregation over frequency (`bark_lp`) and time (`lpq_weight`), and `fraction_in_between` for the share of power in a band. |
| `speechqual.quant` | Predictive two-stage vector quantisation of line spectral frequencies (`LsfQuantizer`), with its weighting, prediction and distortion helpers. |
| `speechqual.background` | `local_background_noise`, which finds pauses between vowel-like bursts and returns a `LocalNoiseResult`. |
| `speechqual.lpc` | `autocorrelation`, `levinson`, `chebyshev`, `lpc_to_lsp`, `lsp_to_lpc`, the sliding analysis window `LpcBuffer` and the frame analyser `LpcAnalyzer`, which returns an `LpcResult`. |
| `speechqual.enhance` | `extract_frames` and `enhance_speech`, which passes a signal through LPC analysis and quantised resynthesis and returns an `EnhancementResult`. |

## Filtering a signal

Every filter keeps its state between calls, so a long signal can be fed in
blocks no longer than the `max_step` it was built with (a longer block raises
`ValueError`):

```python
from speechqual.filters import IIRFilter

highpass = IIRFilter(2, 2, 40)
highpass.set_coefficients(
    [0.92727435, -1.8544941, 0.92727435],
    [1.0, -1.9059465, 0.9114024],
    True,
)
block = [0.0] * 39 + [1000.0]
filtered = highpass.process(block)
```

## Collecting statistics

```python
from speechqual.stats import RunningStatistics

stats = RunningStatistics("pauses", 100)
samples = [3.0, -1.0, 2.0, 4.0, -2.0, 1.0]
stats.add_range(samples, 0, 4, True)   # adds squared values of samples[0:4]
stats.add_range(samples, 2, 6, True)   # clipped to samples[4:6]
print(stats.moments())                 # Moments(mean=..., std=..., count=6)
```

At most `max_ranges` ranges are accepted; later calls to `add_range` are
ignored.

## Perceptual measures

```python
from speechqual.perceptual import frequency_warping, intensity_warping, bark_integral

hz_spectrum = [0.0] + [1.0e4] * 128      # at least 128 bands are needed
pitch_power = frequency_warping(hz_spectrum)   # 42 Bark bands
loudness = intensity_warping(pitch_power)
print(bark_integral(loudness))
```

`fraction_in_between` returns the share in dB; it raises `ValueError` for a
spectrum without power and returns `-inf` when the band holds none.

## Background noise

```python
import math
from speechqual.background import local_background_noise

signal = [3000.0 * math.sin(0.3 * n) * (n // 4000 % 2) for n in range(40000)]
result = local_background_noise(signal, 0, 0, 8000)
print(result.fraction_zeroed_no_vowels, result.back_log)
```

Skip counts that leave no samples raise `ValueError`; a signal holding too many
vowel events raises `TooManyVowelsError`.

## LPC analysis, LSF quantisation and resynthesis

`LsfQuantizer` needs two codebooks of ten-element rows: the first stage picks
one full row, the second picks the lower and upper halves of its refinement
independently. The package ships no trained codebooks; supply your own. A
trivial pair is enough to try things out:

```python
import math
from speechqual.quant import LsfQuantizer
from speechqual.enhance import enhance_speech

codebook1 = [[0.0] * 10]
codebook2 = [[0.0] * 10]
quantizer = LsfQuantizer(codebook1, codebook2)

signal = [1000.0 * math.sin(0.2 * n) for n in range(8000)]
result = enhance_speech(signal, quantizer)
print(result.sample_count, result.delay)   # samples resynthesised, delay of 40
```

`enhance_speech` works in frames of 40 samples. The returned `enhanced` list
has the length of the input; samples after the last whole frame are zero, and
`sample_count` tells how many were resynthesised. Building an `LpcAnalyzer`
(as `enhance_speech` does) resets the quantizer's predictor history, which can
also be done directly with `quantizer.reset()`.

## What the package does not do

It provides the building blocks only: it does not read or write audio files,
has no command-line tool, and does not combine these measures into an overall
quality score.

## Tests

The test suite uses pytest, available through the `test` extra.