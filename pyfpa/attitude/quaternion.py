# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Quaternion conversions for FP_A orientation fields.

FP_A transmits orientation as a quaternion in [w, x, y, z] order. These
helpers turn it into other attitude representations. All rotations assume
right-hand coordinate frames with euler angles in the order 'roll-pitch-yaw'.

References:
    Principles of GNSS, Inertial, and Multisensor Integrated Navigation Systems
    - (2013) Paul D. Groves
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def quat2euler(q):
    """
    Convert quaternion to corresponding euler angles (roll-pitch-yaw).

    Parameters
    ----------
    q : array_like, shape (4,)
        Quaternion [w, x, y, z]

    Returns
    -------
    e : ndarray, shape (3,)
        RPY euler angles [roll, pitch, yaw] in radians
    """
    w, x, y, z = q[0], q[1], q[2], q[3]
    e = np.array([np.arctan2(2*(w*x + y*z), (w*w - x*x - y*y + z*z)),
                  np.arcsin(-2*(-w*y + x*z)),
                  np.arctan2(2*(w*z + x*y), (w*w + x*x - y*y - z*z))],
                 dtype=np.double)
    return e


@njit(cache=True, fastmath=True)
def quat2dcm(q):
    """
    Convert quaternion to the rotation matrix it represents.

    Parameters
    ----------
    q : array_like, shape (4,)
        Quaternion [w, x, y, z]

    Returns
    -------
    C : ndarray, shape (3, 3)
        Direction cosine matrix rotating child-frame vectors into the parent frame
    """
    w, x, y, z = q[0], q[1], q[2], q[3]
    C = np.array([[w*w + x*x - y*y - z*z,         2*(x*y - w*z),          2*(w*y + x*z)],
                  [        2*(w*z + x*y), w*w - x*x + y*y - z*z,          2*(y*z - w*x)],
                  [        2*(x*z - w*y),         2*(y*z + w*x),  w*w - x*x - y*y + z*z]],
                 dtype=np.double)
    return C


def quat_normalize(q):
    """Return q scaled to unit norm (zero quaternions are returned unchanged)"""
    q = np.asarray(q, dtype=np.double)
    n = np.linalg.norm(q)
    if n == 0.0:
        return q.copy()
    return q / n
