#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Empirical clear sky models for global horizontal irradiance.

Every model shares the signature

    model(dayofyear, year, tz, latitude, longitude, interval=1,
          elevation=None, parameters=None)

and returns the clear sky GHI (Wm-2) for every ``interval`` minutes of every
day, starting at local midnight. ``parameters`` is a mapping that overrides
the model's defaults by name.

References
----------
Reno, M. J., Hansen, C. W. and Stein, J. S. 2012:
    Global Horizontal Irradiance Clear Sky Models: Implementation and
    Analysis. Sandia report SAND2012-2389, pp. 12-20.

Ineichen, P. and Perez, R. 2002:
    A new airmass independent formulation for the Linke turbidity
    coefficient. Solar Energy. 73, 151-157.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .detection import detect_clear_points
from .solar import MINUTES_PER_DAY, exrad, recycle, zenith

logger = logging.getLogger(__name__)


def _parameters(defaults, parameters):
    if parameters is None:
        return dict(defaults)
    if not isinstance(parameters, Mapping):
        raise ValueError("parameters must be named")
    merged = dict(defaults)
    merged.update(parameters)
    return merged


def _geometry(dayofyear, year, tz, latitude, longitude, interval):
    dayofyear, year = recycle(dayofyear, year)
    z = zenith(dayofyear, year, tz, latitude, longitude, interval)
    io = exrad(dayofyear, times=MINUTES_PER_DAY // int(interval))
    return z, io


def _require_elevation(elevation):
    if elevation is None:
        raise ValueError("Elevation is required")
    return float(elevation)


def ABCG(dayofyear, year, tz, latitude, longitude, interval=1,
         elevation=None, parameters=None):
    """Adnot-Bourges-Campana-Gicquel: GHI = a cos(z)^b."""
    p = _parameters({'a': 951.39, 'b': 1.15}, parameters)
    z = zenith(dayofyear, year, tz, latitude, longitude, interval)
    return p['a'] * np.cos(np.deg2rad(z))**p['b']


def RS(dayofyear, year, tz, latitude, longitude, interval=1,
       elevation=None, parameters=None):
    """Robledo-Soler: GHI = a cos(z)^b exp(c (90 - z))."""
    p = _parameters({'a': 1159.24, 'b': 1.179, 'c': -0.0019}, parameters)
    z = zenith(dayofyear, year, tz, latitude, longitude, interval)
    return p['a'] * np.cos(np.deg2rad(z))**p['b'] * np.exp(p['c']*(90 - z))


def Ineichen(dayofyear, year, tz, latitude, longitude, interval=1,
             elevation=None, parameters=None):
    """
    Ineichen-Perez model.

    Needs the site elevation in meters. TL is the Linke turbidity.
    """
    elevation = _require_elevation(elevation)
    p = _parameters({'a': 0.50572, 'b': 6.07995, 'c': 1.6364, 'TL': 3.},
                    parameters)
    z, io = _geometry(dayofyear, year, tz, latitude, longitude, interval)
    cosz = np.cos(np.deg2rad(z))

    # Kasten-Young air mass
    am = 1. / (cosz + p['a'] * (90. + p['b'] - z)**(-p['c']))

    fh1 = np.exp(-elevation/8000.)
    fh2 = np.exp(-elevation/1250.)
    cg1 = 0.0000509*elevation + 0.868
    cg2 = 0.0000392*elevation + 0.0387

    return cg1 * io * cosz * np.exp(-cg2*am*(fh1 + fh2*(p['TL'] - 1))) \
        * np.exp(0.01*am**1.8)


def BD(dayofyear, year, tz, latitude, longitude, interval=1,
       elevation=None, parameters=None):
    """Berger-Duffie: GHI = a I0 cos(z)."""
    p = _parameters({'a': 0.70}, parameters)
    z, io = _geometry(dayofyear, year, tz, latitude, longitude, interval)
    return p['a'] * io * np.cos(np.deg2rad(z))


def DPP(dayofyear, year, tz, latitude, longitude, interval=1,
        elevation=None, parameters=None):
    """
    Daneshyar-Paltridge-Proctor.

    DNI = a (1 - exp(b (90 - z))), DHI = c + d (pi/2 - z) with z in radians
    for the diffuse part.
    """
    p = _parameters({'a': 950.2, 'b': -0.075, 'c': 14.29, 'd': 21.04},
                    parameters)
    z = zenith(dayofyear, year, tz, latitude, longitude, interval)
    dni = p['a'] * (1 - np.exp(p['b']*(90 - z)))
    diffuse = p['c'] + p['d']*(np.pi/2 - np.deg2rad(z))
    return dni * np.cos(np.deg2rad(z)) + diffuse


def Haurwitz(dayofyear, year, tz, latitude, longitude, interval=1,
             elevation=None, parameters=None):
    """Haurwitz: GHI = a cos(z) exp(b / cos(z))."""
    p = _parameters({'a': 1098., 'b': -0.057}, parameters)
    z = zenith(dayofyear, year, tz, latitude, longitude, interval)
    cosz = np.cos(np.deg2rad(z))
    with np.errstate(divide='ignore', over='ignore'):
        ghi = p['a'] * cosz * np.exp(p['b'] / cosz)
    # sun on the horizon
    ghi[cosz <= 0] = 0.
    return ghi


def KC(dayofyear, year, tz, latitude, longitude, interval=1,
       elevation=None, parameters=None):
    """Kasten-Czeplak: GHI = a cos(z) - b."""
    p = _parameters({'a': 910., 'b': 30.}, parameters)
    z = zenith(dayofyear, year, tz, latitude, longitude, interval)
    return p['a'] * np.cos(np.deg2rad(z)) - p['b']


def _meinel_beam(io, z, h):
    cosz = np.cos(np.deg2rad(z))
    with np.errstate(divide='ignore', over='ignore'):
        am = 1. / cosz
        dni = io * ((1 - 0.14*h) * 0.7**(am**0.678) + 0.14*h)
    diffuse = 14.29 + 21.04*(np.pi/2 - np.deg2rad(z))
    return dni * cosz + diffuse


def Laue(dayofyear, year, tz, latitude, longitude, interval=1,
         elevation=None, parameters=None):
    """
    Laue: Meinel with an altitude correction.

    Needs the site elevation in meters, the correction uses kilometers.
    """
    elevation = _require_elevation(elevation)
    z, io = _geometry(dayofyear, year, tz, latitude, longitude, interval)
    return _meinel_beam(io, z, elevation / 1000.)


def Meinel(dayofyear, year, tz, latitude, longitude, interval=1,
           elevation=None, parameters=None):
    """Meinel: DNI = I0 0.7^(AM^0.678) plus the DPP diffuse term."""
    z, io = _geometry(dayofyear, year, tz, latitude, longitude, interval)
    return _meinel_beam(io, z, 0.)


MODELS = {
    'ABCG': ABCG,
    'RS': RS,
    'Ineichen': Ineichen,
    'BD': BD,
    'DPP': DPP,
    'Haurwitz': Haurwitz,
    'KC': KC,
    'Laue': Laue,
    'Meinel': Meinel,
}


def rmse(x, y):
    """Root mean squared error between x and y."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    return float(np.sqrt(np.mean((x - y)**2)))


def _five_numbers(values):
    q = np.nanpercentile(values, [0, 25, 50, 75, 100])
    return (f"  Min. {q[0]:.2f}  1st Qu. {q[1]:.2f}  Median {q[2]:.2f}  "
            f"Mean {np.nanmean(values):.2f}  3rd Qu. {q[3]:.2f}  "
            f"Max. {q[4]:.2f}")


@dataclass(frozen=True, eq=False)
class ClearSky:
    """
    Result of a clear sky model run.

    Attributes
    ----------
    model : str
        Name of the model.
    predicted : array, float
        Modeled clear sky GHI.
    observed : array, float or None
        Measured GHI at the same time steps, if given.
    interval : int
        Minutes between samples.
    clear : array, bool or None
        Clear sky detection, once detect has run.
    """
    model: str
    predicted: np.ndarray
    observed: Optional[np.ndarray] = None
    interval: int = 1
    clear: Optional[np.ndarray] = None

    def detect(self, thresholds, window_len, **kwargs):
        """
        Run clear sky detection on the observed data.

        Returns a copy with ``clear`` set; keyword arguments are passed to
        clearskies.detection.detect_clear_points.
        """
        if self.observed is None:
            raise ValueError("No observed data to detect clear points in")
        clear = detect_clear_points(self.observed, self.predicted,
                                    thresholds, window_len, **kwargs)
        return replace(self, clear=clear)

    def rmse(self):
        """Root mean squared error between observed and predicted."""
        if self.observed is None:
            raise ValueError("No observed data to compare with")
        return rmse(self.observed, self.predicted)

    def summary(self):
        day_length = MINUTES_PER_DAY / self.interval
        n = len(self.predicted)
        lines = [f"Model: {self.model}",
                 f"{n} predicted points over {int(n // day_length)} days",
                 ""]
        if self.observed is not None and len(self.observed):
            lines += ["Observed:", _five_numbers(self.observed), ""]
        lines += ["Predicted:", _five_numbers(self.predicted), ""]
        if self.clear is not None and len(self.clear):
            percent = round(float(np.mean(self.clear)), 4) * 100
            lines.append(f"Number of clear points: {int(np.sum(self.clear))}  "
                         f"Percent clear: {percent:g}%")
        return "\n".join(lines)


# accepted keys of the time and location mappings, lower case
_TIME_KEYS = {'dayofyear': 'dayofyear', 'year': 'year', 'interval': 'interval'}
_LOCATION_KEYS = {'latitude': 'latitude', 'longitude': 'longitude',
                  'tz': 'tz', 'timezone': 'tz', 'elevation': 'elevation'}

# University of Oregon Solar Radiation Monitoring Laboratory sites, Pacific
# Northwest; coordinates rounded
LOCATIONS = {
    "Eugene": {"Latitude": 44.05, "Longitude": -123.07, "Elevation": 150., "TZ": -8},
    "Burns": {"Latitude": 43.52, "Longitude": -119.02, "Elevation": 1265., "TZ": -8},
    "Hermiston": {"Latitude": 45.82, "Longitude": -119.28, "Elevation": 180., "TZ": -8},
    "Ashland": {"Latitude": 42.19, "Longitude": -122.70, "Elevation": 595., "TZ": -8},
    "Portland": {"Latitude": 45.51, "Longitude": -122.68, "Elevation": 70., "TZ": -8},
    "Silver Lake": {"Latitude": 43.12, "Longitude": -121.06, "Elevation": 1355., "TZ": -8},
}


def _unpack(info, keys, what):
    if not isinstance(info, Mapping):
        raise ValueError(f"{what} must be named")
    unpacked = {}
    for name, value in info.items():
        key = keys.get(str(name).lower())
        if key is not None:
            unpacked[key] = value
    return unpacked


def clear_sky(model, time=None, location=None, observed=None,
              dayofyear=None, year=None, interval=None,
              tz=None, latitude=None, longitude=None,
              elevation=None, parameters=None):
    """
    Fit a clear sky model.

    Parameters
    ----------
    model : str or callable
        Name of a model in MODELS, or a function with the model signature.
    time : mapping, optional
        Date information with keys DayOfYear, Year and Interval (case
        insensitive). Fills dayofyear, year and interval.
    location : mapping or str, optional
        Location information with keys Latitude, Longitude, TZ or Timezone
        and, if the model needs it, Elevation. Fills the matching arguments.
        A string names one of LOCATIONS.
    observed : array, float, optional
        Measured irradiance corresponding to the model.
    dayofyear, year : int or array, int
        Days to fit the model to, recycled against each other.
    interval : int
        Minutes between clear sky points, 1 to 60.
    tz : float
        UTC offset. Ex: Eastern Standard Time = -5.
    latitude, longitude : float
        Site coordinates in degree north and east.
    elevation : float, optional
        Site elevation in meters.
    parameters : mapping, optional
        Model parameters overriding the defaults.

    Returns
    -------
    ClearSky
    """
    if observed is not None:
        observed = np.asarray(observed)
        if observed.dtype.kind not in 'iuf':
            raise ValueError("data must be numeric")
        observed = observed.astype(float)

    if time is not None:
        t = _unpack(time, _TIME_KEYS, 'time')
        dayofyear = t.get('dayofyear', dayofyear)
        year = t.get('year', year)
        interval = t.get('interval', interval)

    if isinstance(location, str):
        if location not in LOCATIONS:
            raise ValueError(f"Unknown location {location!r}")
        location = LOCATIONS[location]
    if location is not None:
        loc = _unpack(location, _LOCATION_KEYS, 'location')
        if any(np.size(v) > 1 for v in loc.values()):
            raise ValueError("Too many values in location")
        latitude = loc.get('latitude', latitude)
        longitude = loc.get('longitude', longitude)
        tz = loc.get('tz', tz)
        elevation = loc.get('elevation', elevation)

    if interval is None:
        raise ValueError("Missing interval")
    interval = np.unique(interval)
    if interval.size != 1:
        raise ValueError("Interval must contain a single unique value")
    interval = interval.item()

    if isinstance(model, str):
        if model not in MODELS:
            raise ValueError(f"Unknown clear sky model {model!r}, "
                             f"choose from {', '.join(MODELS)}")
        model_name, model = model, MODELS[model]
    elif callable(model):
        model_name = getattr(model, '__name__', repr(model))
    else:
        raise ValueError("invalid model")

    logger.debug("Fitting %s clear sky model, interval %s min",
                 model_name, interval)
    predicted = model(dayofyear=dayofyear, year=year, tz=tz,
                      latitude=latitude, longitude=longitude,
                      interval=interval, elevation=elevation,
                      parameters=parameters)
    return ClearSky(model=model_name, predicted=np.asarray(predicted),
                    observed=observed, interval=interval)
