"""
Numerical settings for the interconnection operators.
"""

from dataclasses import dataclass
from enum import Enum


class WellPosednessPolicy(Enum):
    """What to do when a feedback loop matrix is (nearly) singular."""
    RAISE = "raise"
    WARN = "warn"
    IGNORE = "ignore"


@dataclass
class InterconnectionConfig:
    """Configuration for feedback and LFT interconnections."""
    well_posedness: WellPosednessPolicy = WellPosednessPolicy.RAISE
    rcond_tol: float = 1e-12
