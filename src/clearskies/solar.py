#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Solar geometry needed by the clear sky models.

All functions produce one value per time step of a regular daily grid: a day
is split into 1440 // interval samples starting at local midnight, and
multiple days are concatenated.

References
----------
Michalsky, J. J. 1988:
    The Astronomical Almanac's algorithm for approximate solar position
    (1950-2050). Solar Energy. 40, 227-235.

Spencer, J. W. 1971:
    Fourier series representation of the position of the sun. Search. 2, 172.
"""
import numpy as np


MINUTES_PER_DAY = 1440
# solar constant used by the models (Wm-2)
SOLAR_CONSTANT = 1366.1


def recycle(dayofyear, year):
    """Repeat the shorter of dayofyear and year to the longer one's length."""
    dayofyear = np.atleast_1d(np.asarray(dayofyear, dtype=float))
    year = np.atleast_1d(np.asarray(year, dtype=float))
    n = max(dayofyear.size, year.size)
    return np.resize(dayofyear, n), np.resize(year, n)


def julian_day(dayofyear, year):
    """
    Julian day (minus 2400000) at 0 UT of each day.

    Valid from 1950 to 2050. dayofyear and year are recycled to a common
    length.
    """
    dayofyear, year = recycle(dayofyear, year)
    return 32916.5 + (year - 1949)*365 + np.floor((year - 1949)/4) + dayofyear


def universal_time(interval, tz):
    """
    Universal time in hours for every sample of one day.

    Parameters
    ----------
    interval : int
        Minutes between samples, 1 to 60.
    tz : float
        UTC offset of the local time, e.g. -5 for Eastern Standard Time.

    Returns
    -------
    ut : array, float, length 1440 // interval
    """
    if interval != int(interval) or not 1 <= interval <= 60:
        raise ValueError("Interval must be between 1 and 60")
    interval = int(interval)
    minutes = np.arange(MINUTES_PER_DAY // interval) * interval
    return minutes / 60. - tz


def zenith(dayofyear, year, tz, latitude, longitude, interval=1):
    """
    Solar zenith angle.

    Parameters
    ----------
    dayofyear : int or array, int
        Day(s) of year.
    year : int or array, int
        Year(s). Recycled against dayofyear.
    tz : float
        UTC offset. Ex: Eastern Standard Time = -5.
    latitude : float, [degree north]
    longitude : float, [degree east]
    interval : int
        Minutes between samples, 1 to 60.

    Returns
    -------
    zen : array, float
        Zenith angle in degrees for every sample of every day, length
        (1440 // interval) * number of days. Angles below the horizon are
        limited to 90.
    """
    ut = universal_time(interval, tz)
    jd = julian_day(dayofyear, year)

    utime = np.tile(ut, jd.size)
    # time used in the calculation of ecliptic coordinates
    ecliptic_time = np.repeat(jd, ut.size) + utime/24. - 51545.

    # mean longitude and mean anomaly, in degrees
    meanlong = np.mod(280.46 + 0.9856474*ecliptic_time, 360.)
    meananom = np.deg2rad(np.mod(357.528 + 0.9856003*ecliptic_time, 360.))

    # ecliptic longitude and obliquity of the ecliptic
    eclipticlong = meanlong + 1.915*np.sin(meananom) + 0.02*np.sin(2*meananom)
    eclipticlong = np.deg2rad(np.mod(eclipticlong, 360.))
    eclipticobli = np.deg2rad(23.439 - 0.0000004*ecliptic_time)

    declin = np.arcsin(np.sin(eclipticobli)*np.sin(eclipticlong))
    rascen = np.mod(np.rad2deg(np.arctan2(np.cos(eclipticobli)*np.sin(eclipticlong),
                                          np.cos(eclipticlong))), 360.)

    # Greenwich and local mean sidereal time
    gmst = np.mod(6.697375 + 0.0657098242*ecliptic_time + utime, 24.)
    lmst = np.mod(gmst*15 + longitude, 360.)

    # hour angle between -180 and 180 degrees
    hour_angle = lmst - rascen
    hour_angle[hour_angle < -180] += 360
    hour_angle[hour_angle > 180] -= 360

    lat = np.deg2rad(latitude)
    cz = np.sin(declin)*np.sin(lat) \
        + np.cos(declin)*np.cos(lat)*np.cos(np.deg2rad(hour_angle))
    zen = np.rad2deg(np.arccos(np.clip(cz, -1, 1)))
    # limit the degrees below the horizon to 90
    return np.minimum(zen, 90.)


def exrad(dayofyear, times):
    """
    Extraterrestrial irradiance, one value per sample.

    Parameters
    ----------
    dayofyear : int or array, int
    times : int
        Number of samples per day, each day's value is repeated this often.

    Returns
    -------
    io : array, float, length len(dayofyear) * times
    """
    dayangle = np.deg2rad(360. * (np.atleast_1d(dayofyear) - 1.) / 365.)
    # earth radius vector correction
    erv = 1.00011 + 0.034221*np.cos(dayangle) + 0.00128*np.sin(dayangle) \
        + 0.000719*np.cos(2*dayangle) + 0.000077*np.sin(2*dayangle)
    return np.repeat(SOLAR_CONSTANT * erv, int(times))
