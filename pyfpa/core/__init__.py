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

"""Core FP_A Module.

This module provides the building blocks shared by all FP_A messages:

- **Constants**: framing characters, fixed token positions, reference frames
- **Time**: GPS week/time-of-week representation with UTC conversion
- **Data Structures**: pose, twist, transform and IMU value types
- **Status**: fusion, IMU bias, GNSS fix and wheelspeed enumerations
- **Errors**: the decode error taxonomy

Example Usage:
    >>> from pyfpa.core import GpsTime, GnssFix
    >>> stamp = GpsTime(2231, 207748.8)
    >>> stamp.to_datetime()
"""

from .constants import *
from .data_structures import *
from .errors import *
from .status import *
from .time import *
