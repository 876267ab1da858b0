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

"""Value converters shared by the FP_A decoders.

Each ``parse_*`` function reads one field at a fixed token position and
raises ``FieldParseError`` naming the index, field and raw token when the
conversion fails. Conversion is strict: no surrounding whitespace, no digit
separators, empty tokens are errors (except the blank time pair).
"""

import re
from typing import Optional, Sequence

import numpy as np

from ..core.constants import GPS_TOW_IDX, GPS_WEEK_IDX
from ..core.errors import FieldParseError
from ..core.status import Status, to_status
from ..core.time import GpsTime

_INT_RE = re.compile(r'[+-]?\d+')
_FLOAT_RE = re.compile(
    r'[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)',
    re.IGNORECASE,
)


def to_int(token: str) -> int:
    """Parse an integer token, raising ValueError on anything else"""
    if not _INT_RE.fullmatch(token):
        raise ValueError(f"invalid integer: {token!r}")
    return int(token)


def to_float(token: str) -> float:
    """Parse a floating point token, raising ValueError on anything else"""
    if not _FLOAT_RE.fullmatch(token):
        raise ValueError(f"invalid float: {token!r}")
    return float(token)


def _convert(tokens: Sequence[str], idx: int, field: str, header: Optional[str], func):
    token = tokens[idx]
    try:
        return func(token)
    except ValueError as e:
        raise FieldParseError(header, idx, field, token, str(e)) from e


def parse_int(tokens: Sequence[str], idx: int, field: str, header: Optional[str] = None) -> int:
    return _convert(tokens, idx, field, header, to_int)


def parse_float(tokens: Sequence[str], idx: int, field: str, header: Optional[str] = None) -> float:
    return _convert(tokens, idx, field, header, to_float)


def parse_gps_time(tokens: Sequence[str], week_idx: int = GPS_WEEK_IDX,
                   header: Optional[str] = None) -> GpsTime:
    """Combine week and time-of-week tokens into a GpsTime.

    The sensor leaves both fields blank before it has time; that maps to the
    invalid sentinel instead of an error.
    """
    tow_idx = week_idx + 1
    if tokens[week_idx] == "" and tokens[tow_idx] == "":
        return GpsTime.invalid()
    week = parse_int(tokens, week_idx, "gps_week", header)
    tow = parse_float(tokens, tow_idx, "gps_tow", header)
    return GpsTime(week, tow)


def parse_vector3(tokens: Sequence[str], idx: int, field: str,
                  header: Optional[str] = None) -> np.ndarray:
    """Three consecutive floats in x, y, z order"""
    return np.array([
        parse_float(tokens, idx + i, f"{field}_{axis}", header)
        for i, axis in enumerate("xyz")
    ])


def parse_quaternion(tokens: Sequence[str], idx: int, field: str,
                     header: Optional[str] = None) -> np.ndarray:
    """Four consecutive floats in w, x, y, z order, not normalized"""
    return np.array([
        parse_float(tokens, idx + i, f"{field}_{axis}", header)
        for i, axis in enumerate("wxyz")
    ])


# Wire order of the six independent entries of a symmetric 3x3 matrix
COV3_ORDER = ((0, 0), (1, 1), (2, 2), (0, 1), (1, 2), (0, 2))
_COV3_NAMES = ("xx", "yy", "zz", "xy", "yz", "xz")


def parse_cov3(tokens: Sequence[str], idx: int, field: str,
               header: Optional[str] = None) -> np.ndarray:
    """Symmetric 3x3 matrix from six tokens ordered xx, yy, zz, xy, yz, xz"""
    cov = np.zeros((3, 3))
    for i, ((r, c), name) in enumerate(zip(COV3_ORDER, _COV3_NAMES)):
        value = parse_float(tokens, idx + i, f"{field}_{name}", header)
        cov[r, c] = value
        cov[c, r] = value
    return cov


def parse_status(tokens: Sequence[str], idx: int, enum_cls: type, field: str,
                 header: Optional[str] = None) -> Status:
    """Integer status mapped through ``enum_cls``; unknown values are kept raw"""
    return to_status(parse_int(tokens, idx, field, header), enum_cls)


__all__ = [
    'to_int', 'to_float', 'parse_int', 'parse_float', 'parse_gps_time',
    'parse_vector3', 'parse_quaternion', 'parse_cov3', 'parse_status', 'COV3_ORDER',
]
