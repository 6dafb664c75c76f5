"""Engine-wide defaults shared by the models, the orchestrator and the config layer."""

from __future__ import annotations

# Runner defaults
DEFAULT_RUNNER_WEIGHT_KG = 65.0
DEFAULT_REFERENCE_AGE = 25

# Reference effort used for the headline impact figures (5:00/km)
REFERENCE_PACE_SEC_PER_KM = 300.0

# Altitude deltas at or below this are treated as measurement noise
ALTITUDE_NOISE_THRESHOLD_M = 100.0

# Riegel fatigue exponent for distance projection
RIEGEL_EXPONENT = 1.06
