"""Pitch estimation with the McLeod Pitch Method (MPM).

MPM is described by Philip McLeod and Geoff Wyvill in "A Smarter Way to Find
Pitch" (2005). Per frame it:

1. Computes the Normalized Square Difference Function (NSDF) for lags
   0..W/2.
2. Collects the key maxima: the highest maximum of every positive lobe
   after the first negative-going zero crossing.
3. Picks the first key maximum reaching clarity_threshold times the highest
   key maximum, which avoids locking onto a sub-harmonic period.
4. Refines that lag with parabolic interpolation.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np
from scipy import signal

from .framing import Frame
from ..core import TranscriptionConfig

logger = logging.getLogger(__name__)

_EPS = np.finfo(np.float64).eps


@dataclass(frozen=True)
class PitchEstimate:
    """Pitch estimate for one frame. frequency is None when unpitched."""

    frequency: Optional[float]
    clarity: float = 0.0  # NSDF value of the chosen peak, in [0, 1]
    lag: float = 0.0  # Refined period in samples
    rms: float = 0.0  # Frame energy

    @property
    def is_pitched(self) -> bool:
        return self.frequency is not None

    @classmethod
    def unpitched(cls, clarity: float = 0.0, rms: float = 0.0) -> "PitchEstimate":
        return cls(frequency=None, clarity=clarity, lag=0.0, rms=rms)


class PitchEstimator:
    """Estimates the fundamental frequency of single frames using MPM.

    Instances hold configuration only, so one estimator can be shared by
    several threads.
    """

    def __init__(
        self,
        sr: int,
        clarity_threshold: float = 0.93,
        min_clarity: float = 0.5,
        silence_threshold: float = 0.01,
        fmin: Optional[float] = None,
        fmax: Optional[float] = None,
    ):
        """
        Initialize PitchEstimator.

        Args:
            sr: Sample rate of the frames
            clarity_threshold: Peak-picking coefficient k (0-1)
            min_clarity: Clarity below which the frame is reported unpitched
            silence_threshold: Frame RMS below which the frame is silent
            fmin: Lowest frequency to report (Hz), None for no limit
            fmax: Highest frequency to report (Hz), None for no limit
        """
        self.sr = sr
        self.clarity_threshold = clarity_threshold
        self.min_clarity = min_clarity
        self.silence_threshold = silence_threshold
        self.fmin = fmin
        self.fmax = fmax

    @classmethod
    def from_config(cls, config: TranscriptionConfig, sr: int) -> "PitchEstimator":
        return cls(
            sr=sr,
            clarity_threshold=config.clarity_threshold,
            min_clarity=config.min_clarity,
            silence_threshold=config.silence_threshold,
            fmin=config.fmin,
            fmax=config.fmax,
        )

    def estimate(self, frame: Union[Frame, np.ndarray]) -> PitchEstimate:
        """
        Estimate the pitch of one frame.

        Args:
            frame: Frame or 1-D sample array

        Returns:
            PitchEstimate, unpitched for silent, aperiodic or out-of-range frames
        """
        samples = frame.samples if isinstance(frame, Frame) else frame
        samples = np.asarray(samples, dtype=np.float64)

        if len(samples) == 0:
            return PitchEstimate.unpitched()

        rms = float(np.sqrt(np.mean(samples**2)))
        if rms < self.silence_threshold:
            return PitchEstimate.unpitched(rms=rms)

        nsdf = self.nsdf(samples)
        key_maxima = self.key_maxima(nsdf)
        if not key_maxima:
            return PitchEstimate.unpitched(rms=rms)

        peak = self.select_peak(nsdf, key_maxima)
        lag, value = self.interpolate_peak(nsdf, peak)
        clarity = float(np.clip(value, 0.0, 1.0))

        if clarity < self.min_clarity or lag <= 0:
            return PitchEstimate.unpitched(clarity=clarity, rms=rms)

        frequency = self.sr / lag
        if (self.fmin is not None and frequency < self.fmin) or (
            self.fmax is not None and frequency > self.fmax
        ):
            return PitchEstimate.unpitched(clarity=clarity, rms=rms)

        return PitchEstimate(frequency=frequency, clarity=clarity, lag=lag, rms=rms)

    @staticmethod
    def nsdf(samples: np.ndarray) -> np.ndarray:
        """
        Normalized Square Difference Function for lags 0..len(samples) // 2.

        NSDF(t) = 2 * sum(x[n] * x[n+t]) / sum(x[n]**2 + x[n+t]**2), summed
        over the overlap of the frame with its shifted copy. Lags whose
        overlap carries no energy are 0.

        Returns:
            Array of len(samples) // 2 + 1 values in [-1, 1]
        """
        samples = np.asarray(samples, dtype=np.float64)
        n = len(samples)
        max_lag = n // 2
        lags = np.arange(max_lag + 1)

        # Full autocorrelation; index n - 1 is lag 0
        acf = signal.correlate(samples, samples, mode="full", method="fft")
        acf = acf[n - 1 : n + max_lag]

        # sum(x[n]**2) over [0, n - t) plus sum(x[n]**2) over [t, n)
        energy = np.concatenate(([0.0], np.cumsum(samples**2)))
        m = energy[n - lags] + (energy[n] - energy[lags])

        nsdf = np.zeros(max_lag + 1, dtype=np.float64)
        np.divide(2.0 * acf, m, out=nsdf, where=m > _EPS)
        return nsdf

    @staticmethod
    def key_maxima(nsdf: np.ndarray) -> List[int]:
        """
        Lags of the key maxima of an NSDF curve.

        Only lobes after the first negative-going zero crossing count, so
        the trivial peak at lag 0 is ignored. A lobe's maximum must be a
        local maximum strictly inside the curve; a flat-topped peak counts
        once, at its middle sample.
        """
        n = len(nsdf)
        if n < 3:
            return []

        non_positive = np.flatnonzero(nsdf <= 0)
        if len(non_positive) == 0:
            return []
        first_crossing = int(non_positive[0])

        positive = nsdf > 0
        # Lobe ids increase at every positive-going zero crossing
        lobe_ids = np.cumsum(np.diff(positive.astype(np.int8), prepend=0) == 1)

        peaks, _ = signal.find_peaks(nsdf)
        peaks = peaks[(peaks > first_crossing) & positive[peaks]]

        best = {}
        for index in peaks:
            lobe = int(lobe_ids[index])
            if lobe not in best or nsdf[index] > nsdf[best[lobe]]:
                best[lobe] = int(index)

        return sorted(best.values())

    def select_peak(self, nsdf: np.ndarray, key_maxima: List[int]) -> int:
        """First key maximum reaching clarity_threshold times the highest one."""
        cutoff = self.clarity_threshold * max(nsdf[i] for i in key_maxima)
        for index in key_maxima:
            if nsdf[index] >= cutoff:
                return index
        # Unreachable for 0 < k <= 1; the highest key maximum always qualifies
        return key_maxima[int(np.argmax(nsdf[key_maxima]))]

    @staticmethod
    def interpolate_peak(nsdf: np.ndarray, index: int) -> Tuple[float, float]:
        """
        Parabolic interpolation through a peak and its two neighbours.

        Returns:
            Tuple of (refined lag, interpolated NSDF value)
        """
        if index <= 0 or index >= len(nsdf) - 1:
            return float(index), float(nsdf[index])

        y0, y1, y2 = nsdf[index - 1], nsdf[index], nsdf[index + 1]
        curvature = y0 - 2.0 * y1 + y2
        if abs(curvature) < _EPS:
            return float(index), float(y1)

        delta = 0.5 * (y0 - y2) / curvature
        value = y1 - 0.25 * (y0 - y2) * delta
        return float(index + delta), float(value)

    def estimate_many(self, frames) -> List[PitchEstimate]:
        """Estimate every frame in order."""
        estimates = [self.estimate(frame) for frame in frames]
        logger.debug(
            "Estimated %d frames, %d pitched",
            len(estimates),
            sum(e.is_pitched for e in estimates),
        )
        return estimates
