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
PyFPA - Decoder for FP_A GNSS/INS status messages

A Python library that turns the ASCII FP_A messages of a GNSS/INS sensor
(odometry, geodetic position, transforms, IMU, antenna and correction status,
text) into typed, versioned records.
"""

__version__ = "1.0.0"
__author__ = "PyFPA Development Team"
__title__ = "pyfpa"
__description__ = "Decoder for FP_A GNSS/INS status messages"

from .core import *
from .attitude import *
from .messages import *
from .io import *
from .logger import get_logger, log_sensor_text, setup_logger, setup_logger_from_config
