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

"""Value types shared by FP_A records"""

from dataclasses import dataclass, field

import numpy as np

from ..attitude.quaternion import quat2dcm, quat2euler
from .time import GpsTime


def _identity_quat() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


@dataclass
class PoseWithCovData:
    """Position and orientation with a 6x6 covariance.

    Attributes
    ----------
    position : np.ndarray
        Position [x, y, z], shape (3,)
    orientation : np.ndarray
        Orientation quaternion [w, x, y, z], shape (4,)
    cov : np.ndarray
        Covariance, shape (6, 6). Rows/columns 0-2 hold the position block,
        3-5 the orientation block.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: np.ndarray = field(default_factory=_identity_quat)
    cov: np.ndarray = field(default_factory=lambda: np.zeros((6, 6)))

    def rotation_matrix(self) -> np.ndarray:
        """Orientation as a 3x3 rotation matrix"""
        return quat2dcm(self.orientation)

    def euler(self) -> np.ndarray:
        """Orientation as [roll, pitch, yaw] in radians"""
        return quat2euler(self.orientation)


@dataclass
class TwistWithCovData:
    """Linear and angular velocity with a 6x6 covariance.

    Rows/columns 0-2 of ``cov`` hold the linear velocity block, 3-5 the
    angular velocity block.
    """
    linear: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular: np.ndarray = field(default_factory=lambda: np.zeros(3))
    cov: np.ndarray = field(default_factory=lambda: np.zeros((6, 6)))


@dataclass
class OdometryData:
    """Stamped pose and twist expressed in ``frame_id``"""
    stamp: GpsTime = field(default_factory=GpsTime.invalid)
    frame_id: str = ""
    child_frame_id: str = ""
    pose: PoseWithCovData = field(default_factory=PoseWithCovData)
    twist: TwistWithCovData = field(default_factory=TwistWithCovData)


@dataclass
class TfData:
    """Stamped transform from ``frame_id`` to ``child_frame_id``"""
    stamp: GpsTime = field(default_factory=GpsTime.invalid)
    frame_id: str = ""
    child_frame_id: str = ""
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=_identity_quat)  # [w, x, y, z]

    def rotation_matrix(self) -> np.ndarray:
        return quat2dcm(self.rotation)

    def as_matrix(self) -> np.ndarray:
        """Homogeneous 4x4 transform"""
        T = np.eye(4)
        T[:3, :3] = self.rotation_matrix()
        T[:3, 3] = self.translation
        return T


@dataclass
class ImuData:
    """Stamped IMU sample (m/s², rad/s)"""
    stamp: GpsTime = field(default_factory=GpsTime.invalid)
    linear_acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))


__all__ = ['PoseWithCovData', 'TwistWithCovData', 'OdometryData', 'TfData', 'ImuData']
