"""
Clear sky models and clear sky detection for global horizontal irradiance.
"""
from .criteria import calculate_criteria, evaluate_criteria
from .detection import clear_points, detect_clear_points
from .errors import (ClearSkiesError, InvalidThresholdCount,
                     InvalidWindowLength, LengthMismatch, ScanCancelled)
from .models import LOCATIONS, MODELS, ClearSky, clear_sky, rmse
from .solar import exrad, zenith
from .thresholds import CRITERIA, RENO_THRESHOLDS, WINDOW_LENGTH

__all__ = [
    "calculate_criteria",
    "evaluate_criteria",
    "clear_points",
    "detect_clear_points",
    "ClearSkiesError",
    "InvalidThresholdCount",
    "InvalidWindowLength",
    "LengthMismatch",
    "ScanCancelled",
    "LOCATIONS",
    "MODELS",
    "ClearSky",
    "clear_sky",
    "rmse",
    "exrad",
    "zenith",
    "CRITERIA",
    "RENO_THRESHOLDS",
    "WINDOW_LENGTH",
]
