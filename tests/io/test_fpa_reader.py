import os
import shutil
import tempfile
import unittest

from pyfpa.core.errors import UnknownMessageType
from pyfpa.io.fpa_reader import (
    IMU_COLUMNS, FpaReader, ReaderConfig, load_fpa_log, records_to_dataframe
)
from pyfpa.messages.fpa import LlhRecord, RawImuRecord, TextRecord
from pyfpa.messages.tokenizer import append_checksum

RAWIMU_T10 = "FP,RAWIMU,1,2231,10.000000,-0.5,0.2,9.8,0.001,0.002,0.003"
RAWIMU_T5 = "$FP,RAWIMU,1,2231,5.000000,-0.4,0.1,9.7,0.004,0.005,0.006"
LLH = ("FP,LLH,1,2231,7.000000,47.392357,8.448893,473.5352,"
       "0.01030,0.01157,0.01139,-0.00210,0.00310,0.00150")


def _corrupt(line):
    """Flip the checksum of a line ending in *HH"""
    value = int(line[-2:], 16) ^ 0xFF
    return f"{line[:-2]}{value:02X}"


class TestFpaReader(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.test_dir, "fpa.log")

        lines = [
            append_checksum(RAWIMU_T10),
            "$GPGGA,092750.000,5321.6802,N,00630.3372,W,1,8,1.03,61.7,M,55.2,M,,",
            "",
            RAWIMU_T5,
            _corrupt(append_checksum(LLH)),
            "$FP,FOO,1,2231,8.000000",
            "$FP,LLH,1,2231,9.000000,47.0",
            append_checksum("FP,TEXT,1,WARNING,low voltage, check supply"),
            "$" + LLH,
        ]
        with open(self.log_file, "w", newline="") as f:
            for line in lines:
                f.write(line + "\r\n")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_file_not_found(self):
        with self.assertRaises(FileNotFoundError):
            FpaReader(os.path.join(self.test_dir, "missing.log"))

    def test_read(self):
        reader = FpaReader(self.log_file)
        records = reader.read()

        self.assertEqual([type(r) for r in records],
                         [RawImuRecord, RawImuRecord, TextRecord, LlhRecord])
        self.assertEqual(records[2].level, "WARNING")
        self.assertEqual(records[2].text, "low voltage, check supply")

        stats = reader.stats
        self.assertEqual(stats.lines, 9)
        self.assertEqual(stats.decoded, 4)
        self.assertEqual(stats.skipped, 2)
        self.assertEqual(stats.checksum_errors, 1)
        self.assertEqual(stats.failed, 2)
        self.assertEqual(stats.errors["UnknownMessageType"], 1)
        self.assertEqual(stats.errors["MalformedMessage"], 1)

    def test_stats_reset_per_pass(self):
        reader = FpaReader(self.log_file)
        reader.read()
        reader.read()
        self.assertEqual(reader.stats.lines, 9)

    def test_checksum_not_verified(self):
        reader = FpaReader(self.log_file, ReaderConfig(verify_checksum=False))
        records = reader.read()
        self.assertEqual(sum(isinstance(r, LlhRecord) for r in records), 2)
        self.assertEqual(reader.stats.checksum_errors, 0)

    def test_header_filter(self):
        reader = FpaReader(self.log_file, ReaderConfig(headers={"TEXT"}))
        records = reader.read()
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], TextRecord)
        self.assertEqual(reader.stats.failed, 0)

    def test_non_fpa_lines_counted_as_errors(self):
        reader = FpaReader(self.log_file, ReaderConfig(skip_non_fpa=False))
        reader.read()
        self.assertEqual(reader.stats.errors["UnknownMessageType"], 2)

    def test_raise_on_error(self):
        reader = FpaReader(self.log_file, ReaderConfig(raise_on_error=True))
        with self.assertRaises(UnknownMessageType):
            reader.read()

    def test_failures_logged(self):
        reader = FpaReader(self.log_file)
        with self.assertLogs("pyfpa.io.fpa_reader", level="WARNING") as cm:
            reader.read()
        output = "\n".join(cm.output)
        self.assertIn("Checksum mismatch at line 5", output)
        self.assertIn("Line 7", output)

    def test_read_imu_dataframe(self):
        df = FpaReader(self.log_file).read_dataframe("RAWIMU")
        self.assertEqual(list(df.columns), IMU_COLUMNS)
        self.assertEqual(len(df), 2)
        # Sorted by time
        self.assertLess(df['time'].iloc[0], df['time'].iloc[1])
        self.assertAlmostEqual(df['accel_z'].iloc[0], 9.7)
        self.assertAlmostEqual(df['gyro_z'].iloc[1], 0.003)

    def test_read_llh_dataframe(self):
        df = FpaReader(self.log_file).read_dataframe("LLH")
        self.assertEqual(len(df), 1)
        self.assertAlmostEqual(df['lat'].iloc[0], 47.392357)
        self.assertAlmostEqual(df['cov_1'].iloc[0], -0.00210)

    def test_records_to_dataframe_empty(self):
        df = records_to_dataframe([])
        self.assertEqual(len(df), 0)

    def test_header_filter_on_header_first_lines(self):
        header_first = os.path.join(self.test_dir, "bare.log")
        with open(header_first, "w", newline="") as f:
            f.write(LLH[len("FP,"):] + "\r\n")
            f.write(RAWIMU_T5[len("$FP,"):] + "\r\n")
        reader = FpaReader(header_first, ReaderConfig(skip_non_fpa=False, headers={"LLH"}))
        records = reader.read()
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], LlhRecord)
        self.assertEqual(reader.stats.skipped, 1)
        self.assertEqual(reader.stats.decoded, 1)

    def test_load_fpa_log(self):
        records = load_fpa_log(self.log_file, {"headers": ["LLH"], "unused": 1})
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], LlhRecord)


class TestReaderConfig(unittest.TestCase):

    def test_defaults(self):
        config = ReaderConfig()
        self.assertTrue(config.verify_checksum)
        self.assertTrue(config.skip_non_fpa)
        self.assertIsNone(config.headers)
        self.assertFalse(config.raise_on_error)

    def test_from_dict(self):
        config = ReaderConfig.from_dict({"headers": ["LLH", "TF"], "verify_checksum": False})
        self.assertEqual(config.headers, {"LLH", "TF"})
        self.assertFalse(config.verify_checksum)


if __name__ == '__main__':
    unittest.main()
