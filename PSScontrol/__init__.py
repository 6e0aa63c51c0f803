"""
PSScontrol: interconnection of LTI systems in partitioned state-space form.

Series, parallel and feedback compositions of partitioned systems, the lower
LFT built on them, and block-diagonal / stacked system concatenation on top
of python-control.
"""

from .blkdiag import blkdiag
from .config import InterconnectionConfig, WellPosednessPolicy
from .connections import append, hcat, hvcat, parallel, series, vcat
from .errors import (IllPosedInterconnectionError, InterconnectionError, PartitionError,
                     SamplingTimeMismatchError, ShapeMismatchError)
from .feedback import feedback, lft
from .logging_config import setup_logging
from .partitioned import PartitionedStateSpace, pss_parallel, pss_series
from .sampling import common_dt

__version__ = "0.1.0"

__all__ = [
    'blkdiag', 'PartitionedStateSpace', 'pss_parallel', 'pss_series',
    'feedback', 'lft', 'series', 'parallel', 'append', 'vcat', 'hcat', 'hvcat',
    'common_dt', 'InterconnectionConfig', 'WellPosednessPolicy',
    'InterconnectionError', 'ShapeMismatchError', 'PartitionError',
    'SamplingTimeMismatchError', 'IllPosedInterconnectionError',
    'setup_logging'
]
