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

"""FP_A message records and their decoders.

Every record exposes ``header``, ``expected_version`` and ``expected_size``,
a ``reset_data()`` method restoring its empty state and a
``convert_from_tokens()`` classmethod that builds a fully populated record
from a token list or raises an ``FpaDecodeError``. A record is only handed
out once every field converted, so a failed decode never leaks a partially
populated record.

Token positions are fixed per (header, version). Index 0 is the ``$FP``
marker, 1 the header, 2 the version and 3/4 the GPS week and time of week.
"""

import functools
import logging
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, ClassVar, Optional, Sequence

import numpy as np

from ..core.constants import (FRAME_ECEF, FRAME_ENU0, FRAME_LLH, FRAME_POI,
                              FRAME_POISH, HEADER_IDX, UNKNOWN_VERSION,
                              VERSION_IDX)
from ..core.data_structures import ImuData, OdometryData, TfData
from ..core.errors import (FieldParseError, MalformedMessage, UnknownMessageType,
                           UnsupportedVersion)
from ..core.status import (FusionStatus, GnssFix, ImuBiasStatus, Status,
                           WheelspeedStatus)
from ..core.time import GpsTime
from .converters import (parse_cov3, parse_float, parse_gps_time, parse_int,
                         parse_quaternion, parse_status, parse_vector3, to_int)
from .tokenizer import has_marker, with_marker


def check_tokens(tokens: Sequence[str], header: str, version: int, size: int) -> list[str]:
    """Validate header, version and token count of a token list.

    Returns the token list with the '$FP' marker in place.
    """
    tokens = with_marker(list(tokens))
    observed_header = tokens[HEADER_IDX] if len(tokens) > HEADER_IDX else None
    if observed_header != header:
        raise UnknownMessageType(observed_header)
    if len(tokens) <= VERSION_IDX:
        raise MalformedMessage(header, size, len(tokens))
    try:
        observed = to_int(tokens[VERSION_IDX])
    except ValueError:
        raise UnsupportedVersion(header, tokens[VERSION_IDX]) from None
    if observed != version:
        raise UnsupportedVersion(header, observed)
    if len(tokens) != size:
        raise MalformedMessage(header, size, len(tokens))
    return tokens


def positions_as_given(convert):
    """Report FieldParseError indices relative to the caller's token list.

    Decoders work on tokens with the '$FP' marker in place; when the caller
    passed header-first tokens the marker was implied and every position is
    shifted back by one.
    """
    @functools.wraps(convert)
    def wrapper(cls, tokens, *args, **kwargs):
        try:
            return convert(cls, tokens, *args, **kwargs)
        except FieldParseError as e:
            if has_marker(tokens):
                raise
            raise e.shifted(-1) from e.__cause__
    return wrapper


class _FpaRecord:
    """Base of all records: structural constants cannot be assigned"""
    _constants: ClassVar[frozenset] = frozenset(
        ("header", "expected_version", "expected_size", "frame_id", "child_frame_id"))

    def __setattr__(self, name, value):
        if name in self._constants:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)


def _reset_fields(record, skip=()):
    for f in fields(record):
        if f.name in skip:
            continue
        if f.default_factory is not MISSING:
            setattr(record, f.name, f.default_factory())
        elif f.default is not MISSING:
            setattr(record, f.name, f.default)


def _flat(prefix: str, values) -> dict[str, float]:
    return {f"{prefix}_{i}": float(v) for i, v in enumerate(np.ravel(values))}


# ------------ FP_A-ODOMETRY / ODOMENU / ODOMSH ------------

@dataclass(frozen=True)
class OdometryVariant:
    """Structural constants of one odometry message flavour"""
    header: str
    version: int
    size: int
    frame_id: str
    child_frame_id: str
    has_version_string: bool


ODOMETRY = OdometryVariant("ODOMETRY", 2, 45, FRAME_ECEF, FRAME_POI, True)
ODOMENU = OdometryVariant("ODOMENU", 1, 44, FRAME_ENU0, FRAME_POI, False)
ODOMSH = OdometryVariant("ODOMSH", 1, 44, FRAME_ECEF, FRAME_POISH, False)

ODOMETRY_VARIANTS = (ODOMETRY, ODOMENU, ODOMSH)


@dataclass
class OdometryRecord(_FpaRecord):
    """Odometry message: pose, twist, acceleration and fusion status.

    The three odometry messages share this layout and differ only in their
    ``variant``, which fixes header, size and reference frames.

    Attributes
    ----------
    variant : OdometryVariant
        Message flavour (ODOMETRY, ODOMENU or ODOMSH)
    odom : OdometryData
        Stamped pose and twist with covariances
    acceleration : np.ndarray
        Linear acceleration [x, y, z] in m/s², shape (3,)
    fusion_status, imu_bias_status, gnss1_status, gnss2_status, wheelspeed_status
        Subsystem states; values outside the known enumeration are kept as
        ``UnrecognizedStatus``
    version : str or None
        Firmware version string (ODOMETRY only)
    """
    variant: OdometryVariant = ODOMETRY
    odom: OdometryData = field(default_factory=OdometryData)
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))
    fusion_status: Status = FusionStatus.NOT_STARTED
    imu_bias_status: Status = ImuBiasStatus.NOT_CONVERGED
    gnss1_status: Status = GnssFix.UNKNOWN
    gnss2_status: Status = GnssFix.UNKNOWN
    wheelspeed_status: Status = WheelspeedStatus.NOT_CONVERGED
    version: Optional[str] = None

    def __setattr__(self, name, value):
        # variant is fixed once the dataclass __init__ has set it
        if name == "variant" and "variant" in self.__dict__:
            raise AttributeError(f"{type(self).__name__}.variant is read-only")
        super().__setattr__(name, value)

    def __post_init__(self):
        self._apply_frames()
        if self.version is None and self.variant.has_version_string:
            self.version = UNKNOWN_VERSION

    def _apply_frames(self):
        self.odom.frame_id = self.variant.frame_id
        self.odom.child_frame_id = self.variant.child_frame_id

    @property
    def header(self) -> str:
        return self.variant.header

    @property
    def expected_version(self) -> int:
        return self.variant.version

    @property
    def expected_size(self) -> int:
        return self.variant.size

    @property
    def frame_id(self) -> str:
        return self.variant.frame_id

    @property
    def child_frame_id(self) -> str:
        return self.variant.child_frame_id

    @property
    def stamp(self) -> GpsTime:
        return self.odom.stamp

    def reset_data(self):
        _reset_fields(self, skip=("variant",))
        self.__post_init__()

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str],
                            variant: OdometryVariant = ODOMETRY) -> 'OdometryRecord':
        tokens = check_tokens(tokens, variant.header, variant.version, variant.size)
        h = variant.header
        rec = cls(variant=variant)

        odom = rec.odom
        odom.stamp = parse_gps_time(tokens, header=h)
        odom.pose.position = parse_vector3(tokens, 5, "pos", h)
        odom.pose.orientation = parse_quaternion(tokens, 8, "orientation", h)
        odom.twist.linear = parse_vector3(tokens, 12, "vel", h)
        odom.twist.angular = parse_vector3(tokens, 15, "rot", h)
        rec.acceleration = parse_vector3(tokens, 18, "acc", h)

        rec.fusion_status = parse_status(tokens, 21, FusionStatus, "fusion_status", h)
        rec.imu_bias_status = parse_status(tokens, 22, ImuBiasStatus, "imu_bias_status", h)
        rec.gnss1_status = parse_status(tokens, 23, GnssFix, "gnss1_status", h)
        rec.gnss2_status = parse_status(tokens, 24, GnssFix, "gnss2_status", h)
        rec.wheelspeed_status = parse_status(tokens, 25, WheelspeedStatus, "wheelspeed_status", h)

        # Pose covariance: position block then orientation block
        odom.pose.cov[0:3, 0:3] = parse_cov3(tokens, 26, "pos_cov", h)
        odom.pose.cov[3:6, 3:6] = parse_cov3(tokens, 32, "orientation_cov", h)
        # Only the linear velocity block is transmitted
        odom.twist.cov[0:3, 0:3] = parse_cov3(tokens, 38, "vel_cov", h)

        if variant.has_version_string:
            rec.version = tokens[44]
        return rec

    def as_row(self) -> dict[str, Any]:
        row = {
            "time": self.odom.stamp.to_gps_seconds(),
            "gps_week": self.odom.stamp.week,
            "gps_tow": self.odom.stamp.tow,
        }
        for name, values in (("pos", self.odom.pose.position),
                             ("vel", self.odom.twist.linear),
                             ("rot", self.odom.twist.angular),
                             ("acc", self.acceleration)):
            row.update({f"{name}_{axis}": float(v) for axis, v in zip("xyz", values)})
        row.update({f"orientation_{axis}": float(v)
                    for axis, v in zip("wxyz", self.odom.pose.orientation)})
        row.update({
            "fusion_status": int(self.fusion_status),
            "imu_bias_status": int(self.imu_bias_status),
            "gnss1_status": int(self.gnss1_status),
            "gnss2_status": int(self.gnss2_status),
            "wheelspeed_status": int(self.wheelspeed_status),
        })
        return row


# ------------ FP_A-LLH ------------

@dataclass
class LlhRecord(_FpaRecord):
    """Geodetic position [lat (deg), lon (deg), height (m)] with 3x3 covariance"""
    header: ClassVar[str] = "LLH"
    expected_version: ClassVar[int] = 1
    expected_size: ClassVar[int] = 14
    frame_id: ClassVar[str] = FRAME_LLH
    child_frame_id: ClassVar[str] = FRAME_POI

    stamp: GpsTime = field(default_factory=GpsTime.invalid)
    llh: np.ndarray = field(default_factory=lambda: np.zeros(3))
    cov: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    def reset_data(self):
        _reset_fields(self)

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str]) -> 'LlhRecord':
        tokens = check_tokens(tokens, cls.header, cls.expected_version, cls.expected_size)
        h = cls.header
        return cls(
            stamp=parse_gps_time(tokens, header=h),
            llh=np.array([
                parse_float(tokens, 5, "lat", h),
                parse_float(tokens, 6, "lon", h),
                parse_float(tokens, 7, "height", h),
            ]),
            cov=parse_cov3(tokens, 8, "cov", h),
        )

    def as_row(self) -> dict[str, Any]:
        row = {
            "time": self.stamp.to_gps_seconds(),
            "gps_week": self.stamp.week,
            "gps_tow": self.stamp.tow,
            "lat": float(self.llh[0]),
            "lon": float(self.llh[1]),
            "height": float(self.llh[2]),
        }
        row.update(_flat("cov", self.cov))
        return row


# ------------ FP_A-TF ------------

@dataclass
class TfRecord(_FpaRecord):
    """Transform between two named frames"""
    header: ClassVar[str] = "TF"
    expected_version: ClassVar[int] = 2
    expected_size: ClassVar[int] = 14

    tf: TfData = field(default_factory=TfData)

    def reset_data(self):
        _reset_fields(self)

    @property
    def stamp(self) -> GpsTime:
        return self.tf.stamp

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str]) -> 'TfRecord':
        tokens = check_tokens(tokens, cls.header, cls.expected_version, cls.expected_size)
        h = cls.header
        tf = TfData(
            stamp=parse_gps_time(tokens, header=h),
            frame_id=tokens[5],
            child_frame_id=tokens[6],
            translation=parse_vector3(tokens, 7, "translation", h),
            rotation=parse_quaternion(tokens, 10, "rotation", h),
        )
        return cls(tf=tf)

    def as_row(self) -> dict[str, Any]:
        row = {
            "time": self.tf.stamp.to_gps_seconds(),
            "frame_id": self.tf.frame_id,
            "child_frame_id": self.tf.child_frame_id,
        }
        row.update({f"t_{axis}": float(v) for axis, v in zip("xyz", self.tf.translation)})
        row.update({f"q_{axis}": float(v) for axis, v in zip("wxyz", self.tf.rotation)})
        return row


# ------------ FP_A-RAWIMU / CORRIMU ------------

@dataclass
class _ImuRecord(_FpaRecord):
    """Shared layout of RAWIMU and CORRIMU"""
    header: ClassVar[str]
    expected_version: ClassVar[int] = 1
    expected_size: ClassVar[int] = 11

    imu: ImuData = field(default_factory=ImuData)

    def reset_data(self):
        _reset_fields(self)

    @property
    def stamp(self) -> GpsTime:
        return self.imu.stamp

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str]):
        tokens = check_tokens(tokens, cls.header, cls.expected_version, cls.expected_size)
        h = cls.header
        imu = ImuData(
            stamp=parse_gps_time(tokens, header=h),
            linear_acceleration=parse_vector3(tokens, 5, "acc", h),
            angular_velocity=parse_vector3(tokens, 8, "rot", h),
        )
        return cls(imu=imu)

    def as_row(self) -> dict[str, Any]:
        acc, gyro = self.imu.linear_acceleration, self.imu.angular_velocity
        return {
            "time": self.imu.stamp.to_gps_seconds(),
            "accel_x": float(acc[0]), "accel_y": float(acc[1]), "accel_z": float(acc[2]),
            "gyro_x": float(gyro[0]), "gyro_y": float(gyro[1]), "gyro_z": float(gyro[2]),
        }


@dataclass
class RawImuRecord(_ImuRecord):
    """IMU sample before bias/gravity correction"""
    header: ClassVar[str] = "RAWIMU"


@dataclass
class CorrImuRecord(_ImuRecord):
    """IMU sample after bias correction"""
    header: ClassVar[str] = "CORRIMU"


# ------------ FP_A-GNSSANT ------------

@dataclass
class GnssAntRecord(_FpaRecord):
    """Antenna state, power and status age for both GNSS receivers"""
    header: ClassVar[str] = "GNSSANT"
    expected_version: ClassVar[int] = 1
    expected_size: ClassVar[int] = 11

    stamp: GpsTime = field(default_factory=GpsTime.invalid)
    gnss1_state: str = ""
    gnss1_power: str = ""
    gnss1_age: int = 0
    gnss2_state: str = ""
    gnss2_power: str = ""
    gnss2_age: int = 0

    def reset_data(self):
        _reset_fields(self)

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str]) -> 'GnssAntRecord':
        tokens = check_tokens(tokens, cls.header, cls.expected_version, cls.expected_size)
        h = cls.header
        return cls(
            stamp=parse_gps_time(tokens, header=h),
            gnss1_state=tokens[5],
            gnss1_power=tokens[6],
            gnss1_age=parse_int(tokens, 7, "gnss1_age", h),
            gnss2_state=tokens[8],
            gnss2_power=tokens[9],
            gnss2_age=parse_int(tokens, 10, "gnss2_age", h),
        )

    def as_row(self) -> dict[str, Any]:
        return {
            "time": self.stamp.to_gps_seconds(),
            "gnss1_state": self.gnss1_state, "gnss1_power": self.gnss1_power,
            "gnss1_age": self.gnss1_age,
            "gnss2_state": self.gnss2_state, "gnss2_power": self.gnss2_power,
            "gnss2_age": self.gnss2_age,
        }


# ------------ FP_A-GNSSCORR ------------

@dataclass
class GnssCorrRecord(_FpaRecord):
    """GNSS correction status: fixes, signal counts, correction link, station"""
    header: ClassVar[str] = "GNSSCORR"
    expected_version: ClassVar[int] = 1
    expected_size: ClassVar[int] = 20

    stamp: GpsTime = field(default_factory=GpsTime.invalid)
    gnss1_fix: Status = GnssFix.UNKNOWN
    gnss1_nsig_l1: int = 0
    gnss1_nsig_l2: int = 0
    gnss2_fix: Status = GnssFix.UNKNOWN
    gnss2_nsig_l1: int = 0
    gnss2_nsig_l2: int = 0
    corr_latency: float = 0.0
    corr_update_rate: float = 0.0
    corr_data_rate: float = 0.0
    corr_msg_rate: float = 0.0
    sta_id: int = 0
    sta_lat: float = 0.0
    sta_lon: float = 0.0
    sta_height: float = 0.0
    sta_dist: int = 0

    def reset_data(self):
        _reset_fields(self)

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str]) -> 'GnssCorrRecord':
        tokens = check_tokens(tokens, cls.header, cls.expected_version, cls.expected_size)
        h = cls.header
        return cls(
            stamp=parse_gps_time(tokens, header=h),
            gnss1_fix=parse_status(tokens, 5, GnssFix, "gnss1_fix", h),
            gnss1_nsig_l1=parse_int(tokens, 6, "gnss1_nsig_l1", h),
            gnss1_nsig_l2=parse_int(tokens, 7, "gnss1_nsig_l2", h),
            gnss2_fix=parse_status(tokens, 8, GnssFix, "gnss2_fix", h),
            gnss2_nsig_l1=parse_int(tokens, 9, "gnss2_nsig_l1", h),
            gnss2_nsig_l2=parse_int(tokens, 10, "gnss2_nsig_l2", h),
            corr_latency=parse_float(tokens, 11, "corr_latency", h),
            corr_update_rate=parse_float(tokens, 12, "corr_update_rate", h),
            corr_data_rate=parse_float(tokens, 13, "corr_data_rate", h),
            corr_msg_rate=parse_float(tokens, 14, "corr_msg_rate", h),
            sta_id=parse_int(tokens, 15, "sta_id", h),
            sta_lat=parse_float(tokens, 16, "sta_lat", h),
            sta_lon=parse_float(tokens, 17, "sta_lon", h),
            sta_height=parse_float(tokens, 18, "sta_height", h),
            sta_dist=parse_int(tokens, 19, "sta_dist", h),
        )

    def as_row(self) -> dict[str, Any]:
        row = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "stamp"}
        row["gnss1_fix"] = int(self.gnss1_fix)
        row["gnss2_fix"] = int(self.gnss2_fix)
        return {"time": self.stamp.to_gps_seconds(), **row}


# ------------ FP_A-TEXT ------------

_TEXT_LEVELS = {
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


@dataclass
class TextRecord(_FpaRecord):
    """Free-text log message from the sensor"""
    header: ClassVar[str] = "TEXT"
    expected_version: ClassVar[int] = 1
    expected_size: ClassVar[int] = 5

    level: str = ""
    text: str = ""

    def reset_data(self):
        _reset_fields(self)

    @property
    def log_level(self) -> int:
        """Python logging level for ``level`` (INFO when unknown)"""
        return _TEXT_LEVELS.get(self.level.upper(), logging.INFO)

    @classmethod
    @positions_as_given
    def convert_from_tokens(cls, tokens: Sequence[str]) -> 'TextRecord':
        tokens = check_tokens(tokens, cls.header, cls.expected_version, cls.expected_size)
        return cls(level=tokens[3], text=tokens[4])

    def as_row(self) -> dict[str, Any]:
        return {"level": self.level, "text": self.text}


__all__ = [
    'OdometryVariant', 'ODOMETRY', 'ODOMENU', 'ODOMSH', 'ODOMETRY_VARIANTS',
    'OdometryRecord', 'LlhRecord', 'TfRecord', 'RawImuRecord', 'CorrImuRecord',
    'GnssAntRecord', 'GnssCorrRecord', 'TextRecord', 'check_tokens',
]
