"""
# Clear sky detection...
... using the Reno et al. (2012) rolling window criteria.

The detection requires a clear sky first guess at the same time steps as
the measurements. Here the Robledo-Soler model shipped with clearskies is used
for one day in Eugene, Oregon, and a synthetic measurement is built from it:
clear in the morning, broken clouds in the afternoon.
"""

import logging

import numpy as np

from clearskies import RENO_THRESHOLDS, WINDOW_LENGTH, clear_sky

logging.basicConfig(level=logging.DEBUG)

# Eugene, Oregon, 2014-09-15 at 1 min resolution
location = 'Eugene'
time = {'DayOfYear': 258, 'Year': 2014, 'Interval': 1}

model = clear_sky('RS', time=time, location=location)

rng = np.random.default_rng(258)
ghi = model.predicted * (1 + rng.normal(0, 0.002, model.predicted.size))
# clouds from 13:00 local time on
afternoon = np.arange(ghi.size) >= 13*60
clouds = rng.random(ghi.size) < 0.3
ghi[afternoon & clouds] *= rng.uniform(0.2, 0.8, np.count_nonzero(afternoon & clouds))

model = clear_sky('RS', time=time, location=location, observed=ghi)
result = model.detect(RENO_THRESHOLDS, WINDOW_LENGTH)

print(result.summary())
print(f"RMSE observed vs. predicted: {result.rmse():.2f} Wm-2")
