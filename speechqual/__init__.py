"""Filters, statistics, perceptual transforms, LPC analysis, LSF quantisation, speech resynthesis and background noise estimation for speech quality assessment."""

__version__ = "0.1.0"

__all__ = [
    "background",
    "enhance",
    "filters",
    "lpc",
    "perceptual",
    "quant",
    "stats",
]