"""Physical constants and integration settings shared by the integrators.

All values are read-only module constants.  The world frame is Y-up; a
vehicle looks along its local ``+Z`` axis with ``+Y`` up and ``-X`` to the
right.
"""

from __future__ import annotations

import numpy as np

G = 9.80665  # standard gravity [m/s^2]

DT = 1.0 / 1000.0  # force segment timestep [s], 1000 Hz
EPSILON = 1e-5

STRAIGHT_STEP = 0.01  # distance step for straight segments [m]
CURVE_STEPS = 200  # number of steps across a curved segment

# Friction contact point sits this fraction of the heartline height below it.
FRICTION_HEIGHT_FACTOR = 0.9
# Roll rates below this are ignored [deg/s].
ROLL_THRESHOLD = 0.01

# Baseline forces are probed this far before the end of each segment [m].
FORCE_PROBE_OFFSET = 0.005
DECIMATION = 4

WORLD_UP = np.array([0.0, 1.0, 0.0])
LOCAL_FORWARD = np.array([0.0, 0.0, 1.0])
LOCAL_RIGHT = np.array([-1.0, 0.0, 0.0])
LOCAL_DOWN = np.array([0.0, -1.0, 0.0])
