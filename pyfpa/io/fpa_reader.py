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

"""Reading recorded FP_A logs"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional

import pandas as pd

from ..core.constants import FPA_DELIMITER, FPA_MARKER, HEADER_IDX
from ..core.errors import FpaDecodeError, UnknownMessageType
from ..messages.fpa import CorrImuRecord, RawImuRecord
from ..messages.registry import decode_line
from ..messages.tokenizer import verify_checksum, with_marker

logger = logging.getLogger(__name__)

IMU_COLUMNS = ['time', 'accel_x', 'accel_y', 'accel_z', 'gyro_x', 'gyro_y', 'gyro_z']


@dataclass
class ReaderConfig:
    """Options for FpaReader

    Attributes
    ----------
    verify_checksum : bool
        Drop lines whose '*HH' checksum does not match (lines without a
        checksum are accepted)
    skip_non_fpa : bool
        Silently skip lines that do not start with '$FP,' (NMEA, binary noise)
    headers : set of str, optional
        Only decode these message types
    raise_on_error : bool
        Re-raise decode errors instead of counting and skipping them
    """
    verify_checksum: bool = True
    skip_non_fpa: bool = True
    headers: Optional[set[str]] = None
    raise_on_error: bool = False

    @classmethod
    def from_dict(cls, config: dict) -> 'ReaderConfig':
        """Build a config from a plain dictionary, ignoring unknown keys"""
        known = {k: v for k, v in config.items() if k in cls.__dataclass_fields__}
        if known.get('headers') is not None:
            known['headers'] = set(known['headers'])
        return cls(**known)


@dataclass
class ReaderStats:
    """Line counters collected while reading"""
    lines: int = 0
    decoded: int = 0
    skipped: int = 0
    checksum_errors: int = 0
    errors: Counter = field(default_factory=Counter)

    @property
    def failed(self) -> int:
        return sum(self.errors.values())


class FpaReader:
    """Reader for text files of recorded FP_A lines"""

    def __init__(self, file_path: str, config: Optional[ReaderConfig] = None):
        """
        Initialize FP_A log reader

        Parameters:
        -----------
        file_path : str
            Path to the recorded log
        config : ReaderConfig, optional
            Reader options (defaults to ReaderConfig())
        """
        self.file_path = Path(file_path)
        self.config = config or ReaderConfig()
        self.stats = ReaderStats()
        self.logger = logging.getLogger(__name__)

        if not self.file_path.exists():
            raise FileNotFoundError(f"FP_A log not found: {file_path}")

    def iter_records(self) -> Iterator:
        """Yield decoded records in file order, skipping rejected lines"""
        self.stats = ReaderStats()
        self.logger.info(f"Reading FP_A log: {self.file_path}")

        with self.file_path.open("r", encoding="ascii", errors="replace", newline="") as fh:
            for lineno, line in enumerate(fh, start=1):
                self.stats.lines += 1
                record = self._decode(line, lineno)
                if record is not None:
                    self.stats.decoded += 1
                    yield record

        self.logger.info(
            f"Decoded {self.stats.decoded} of {self.stats.lines} lines "
            f"({self.stats.failed} failed, {self.stats.skipped} skipped)"
        )

    def _decode(self, line: str, lineno: int):
        line = line.rstrip("\r\n")
        if not line.strip():
            self.stats.skipped += 1
            return None

        if not line.startswith(FPA_MARKER + FPA_DELIMITER) and self.config.skip_non_fpa:
            self.stats.skipped += 1
            return None

        if self.config.verify_checksum and verify_checksum(line) is False:
            self.stats.checksum_errors += 1
            self.logger.warning(f"Checksum mismatch at line {lineno}")
            return None

        if self.config.headers is not None:
            parts = with_marker(line.split(FPA_DELIMITER, HEADER_IDX + 1))
            if len(parts) <= HEADER_IDX or parts[HEADER_IDX] not in self.config.headers:
                self.stats.skipped += 1
                return None

        try:
            return decode_line(line)
        except FpaDecodeError as e:
            self.stats.errors[type(e).__name__] += 1
            if self.config.raise_on_error:
                raise
            if isinstance(e, UnknownMessageType):
                self.logger.debug(f"Line {lineno}: {e}")
            else:
                self.logger.warning(f"Line {lineno}: {e}")
            return None

    def read(self) -> list:
        """Read and decode the whole log"""
        return list(self.iter_records())

    def read_dataframe(self, header: str) -> pd.DataFrame:
        """
        Read all messages of one type into a DataFrame

        Parameters:
        -----------
        header : str
            Message header, e.g. 'ODOMETRY', 'LLH' or 'RAWIMU'

        Returns:
        --------
        pd.DataFrame
            One row per message, columns from the record's ``as_row()``.
            IMU messages use the columns time, accel_x, accel_y, accel_z,
            gyro_x, gyro_y, gyro_z.
        """
        records = [r for r in self.iter_records() if r.header == header]
        if header in (RawImuRecord.header, CorrImuRecord.header):
            return imu_records_to_dataframe(records)
        return records_to_dataframe(records)


def records_to_dataframe(records: Iterable) -> pd.DataFrame:
    """Flatten records into a DataFrame, sorted by time when available"""
    df = pd.DataFrame([record.as_row() for record in records])
    if 'time' in df.columns:
        df = df.sort_values('time', kind='stable').reset_index(drop=True)
    return df


def imu_records_to_dataframe(records: Iterable) -> pd.DataFrame:
    """
    Convert RAWIMU/CORRIMU records into an IMU DataFrame

    Returns:
    --------
    pd.DataFrame
        IMU data with columns: time, accel_x, accel_y, accel_z, gyro_x, gyro_y, gyro_z
        (time in GPS seconds)
    """
    rows = [record.as_row() for record in records]
    df = pd.DataFrame(rows, columns=IMU_COLUMNS)
    df = df.sort_values('time', kind='stable').reset_index(drop=True)

    logger.info(f"Loaded {len(df)} IMU samples")
    if len(df) > 1:
        dt = df['time'].diff().median()
        freq = 1.0 / dt if dt > 0 else 0
        logger.info(f"  Time range: {df['time'].iloc[0]:.3f} - {df['time'].iloc[-1]:.3f}")
        logger.info(f"  Sampling rate: ~{freq:.1f} Hz")
    return df


def load_fpa_log(file_path: str, config: Optional[dict] = None) -> list:
    """
    Convenience function to decode a recorded FP_A log

    Parameters:
    -----------
    file_path : str
        Path to the log file
    config : dict, optional
        ReaderConfig options as a dictionary

    Returns:
    --------
    list
        Decoded records in file order
    """
    reader_config = ReaderConfig.from_dict(config) if config else None
    return FpaReader(file_path, reader_config).read()


__all__ = ['FpaReader', 'ReaderConfig', 'ReaderStats', 'IMU_COLUMNS',
           'records_to_dataframe', 'imu_records_to_dataframe', 'load_fpa_log']
