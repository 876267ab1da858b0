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

"""FP_A Protocol Constants"""

# Framing
FPA_MARKER = "$FP"          # first token of every FP_A line
FPA_MARKER_BARE = "FP"      # marker with the '$' already removed
FPA_DELIMITER = ","         # field delimiter
FPA_CHECKSUM_FLAG = "*"     # start of the trailing checksum
FPA_EOL = "\r\n"            # line terminator

# Fixed token positions shared by every FP_A message
MARKER_IDX = 0
HEADER_IDX = 1
VERSION_IDX = 2
GPS_WEEK_IDX = 3
GPS_TOW_IDX = 4

# GPS time
WEEK_SECONDS = 604800
GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch

# Reference frames
FRAME_ECEF = "FP_ECEF"
FRAME_ENU0 = "FP_ENU0"
FRAME_LLH = "FP_LLH"
FRAME_POI = "FP_POI"
FRAME_POISH = "FP_POISH"

# Default firmware version string when none was decoded
UNKNOWN_VERSION = "Unknown"
