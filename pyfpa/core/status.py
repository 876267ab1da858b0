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

"""Status enumerations reported by FP_A messages.

Firmware may add states the decoder does not know yet. Such values are kept
as ``UnrecognizedStatus``, an ``int`` carrying the raw value, so a message with
the correct arity still decodes.
"""

from enum import IntEnum
from typing import Union


class FusionStatus(IntEnum):
    """Fusion engine state"""
    NOT_STARTED = 0
    VISION = 1
    VIO = 2
    IMU_GNSS = 3
    VIO_GNSS = 4


class ImuBiasStatus(IntEnum):
    """IMU bias estimation state"""
    NOT_CONVERGED = 0
    CONVERGED = 1


class GnssFix(IntEnum):
    """GNSS receiver fix type"""
    UNKNOWN = 0
    NOFIX = 1
    DRONLY = 2
    TIME = 3
    S2D = 4
    S3D = 5
    S3D_DR = 6
    RTK_FLOAT = 7
    RTK_FIXED = 8
    RTK_FLOAT_DR = 9
    RTK_FIXED_DR = 10


class WheelspeedStatus(IntEnum):
    """Wheelspeed sensor fusion state"""
    NOT_ENABLED = -1
    NOT_CONVERGED = 0
    CONVERGED = 1


class UnrecognizedStatus(int):
    """Status value outside the known enumeration"""

    @property
    def raw(self) -> int:
        return int(self)

    @property
    def name(self) -> str:
        return "UNRECOGNIZED"

    def __repr__(self):
        return f"UnrecognizedStatus({int(self)})"


Status = Union[IntEnum, UnrecognizedStatus]


def to_status(value: int, enum_cls: type) -> Status:
    """Map an integer to ``enum_cls``, falling back to UnrecognizedStatus"""
    try:
        return enum_cls(value)
    except ValueError:
        return UnrecognizedStatus(value)


def is_recognized(status: Status) -> bool:
    return not isinstance(status, UnrecognizedStatus)


__all__ = [
    'FusionStatus', 'ImuBiasStatus', 'GnssFix', 'WheelspeedStatus',
    'UnrecognizedStatus', 'Status', 'to_status', 'is_recognized',
]
