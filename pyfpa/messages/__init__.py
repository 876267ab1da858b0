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

"""FP_A message decoding: tokenizer, value converters, records and dispatch."""

from .converters import (parse_cov3, parse_float, parse_gps_time, parse_int,
                         parse_quaternion, parse_status, parse_vector3)
from .fpa import (ODOMENU, ODOMETRY, ODOMETRY_VARIANTS, ODOMSH, CorrImuRecord,
                  GnssAntRecord, GnssCorrRecord, LlhRecord, OdometryRecord,
                  OdometryVariant, RawImuRecord, TextRecord, TfRecord)
from .registry import (MESSAGE_REGISTRY, MessageSpec, decode_line, decode_tokens,
                       lookup, supported_messages)
from .tokenizer import (split_message, strip_terminator, tokenize,
                        verify_checksum, with_marker)

__all__ = [
    'decode_line', 'decode_tokens', 'lookup', 'supported_messages',
    'MESSAGE_REGISTRY', 'MessageSpec',
    'OdometryVariant', 'ODOMETRY', 'ODOMENU', 'ODOMSH', 'ODOMETRY_VARIANTS',
    'OdometryRecord', 'LlhRecord', 'TfRecord', 'RawImuRecord', 'CorrImuRecord',
    'GnssAntRecord', 'GnssCorrRecord', 'TextRecord',
    'split_message', 'strip_terminator', 'tokenize', 'verify_checksum', 'with_marker',
    'parse_gps_time', 'parse_int', 'parse_float', 'parse_vector3',
    'parse_quaternion', 'parse_cov3', 'parse_status',
]
