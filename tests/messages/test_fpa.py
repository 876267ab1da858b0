#!/usr/bin/env python3
"""Test suite for FP_A records and per-type decoders"""

import logging
import unittest
import numpy as np

from fpa_samples import sample
from pyfpa.core.errors import (
    FieldParseError, MalformedMessage, UnknownMessageType, UnsupportedVersion
)
from pyfpa.core.status import (
    FusionStatus, GnssFix, ImuBiasStatus, UnrecognizedStatus, WheelspeedStatus
)
from pyfpa.core.time import GpsTime
from pyfpa.messages.fpa import (
    ODOMENU, ODOMETRY, ODOMSH, CorrImuRecord, GnssAntRecord, GnssCorrRecord,
    LlhRecord, OdometryRecord, RawImuRecord, TextRecord, TfRecord
)


class TestOdometry(unittest.TestCase):
    """Test the three odometry variants"""

    def test_decode_odometry(self):
        rec = OdometryRecord.convert_from_tokens(sample("ODOMETRY", 2), variant=ODOMETRY)

        self.assertEqual(rec.header, "ODOMETRY")
        self.assertEqual(rec.expected_size, 45)
        self.assertEqual(rec.stamp, GpsTime(2231, 227610.75))
        np.testing.assert_array_equal(
            rec.odom.pose.position, [4279243.1641, 635824.2171, 4671589.8683])
        np.testing.assert_array_equal(
            rec.odom.pose.orientation, [-0.412792, 0.290804, -0.123898, 0.854216])
        np.testing.assert_array_equal(rec.odom.twist.linear, [3.1912, -0.0285, -0.0082])
        np.testing.assert_array_equal(rec.odom.twist.angular, [-0.00005, 0.00021, 0.00014])
        np.testing.assert_array_equal(rec.acceleration, [0.0104, -0.1512, 9.8054])

        self.assertIs(rec.fusion_status, FusionStatus.VIO_GNSS)
        self.assertIs(rec.imu_bias_status, ImuBiasStatus.CONVERGED)
        self.assertIs(rec.gnss1_status, GnssFix.RTK_FIXED)
        self.assertIs(rec.gnss2_status, GnssFix.RTK_FIXED)
        self.assertIs(rec.wheelspeed_status, WheelspeedStatus.CONVERGED)
        self.assertEqual(rec.version, "fp_release_vr2_2.54.0_160")

    def test_covariance_layout(self):
        rec = OdometryRecord.convert_from_tokens(sample("ODOMETRY", 2))
        pose_cov = rec.odom.pose.cov
        self.assertEqual(pose_cov[0, 0], 0.01044)
        self.assertEqual(pose_cov[1, 1], 0.01155)
        self.assertEqual(pose_cov[2, 2], 0.01137)
        self.assertEqual(pose_cov[0, 1], -0.00281)
        self.assertEqual(pose_cov[1, 2], 0.00299)
        self.assertEqual(pose_cov[2, 0], 0.00152)
        self.assertEqual(pose_cov[3, 3], 0.00029)
        self.assertEqual(pose_cov[3, 5], 0.00003)
        # No cross terms between position and orientation
        np.testing.assert_array_equal(pose_cov[0:3, 3:6], np.zeros((3, 3)))
        np.testing.assert_array_equal(pose_cov, pose_cov.T)

        twist_cov = rec.odom.twist.cov
        self.assertEqual(twist_cov[0, 0], 0.00066)
        self.assertEqual(twist_cov[1, 0], -0.00010)
        np.testing.assert_array_equal(twist_cov[3:6, 3:6], np.zeros((3, 3)))

    def test_variant_frames(self):
        odom = OdometryRecord.convert_from_tokens(sample("ODOMETRY", 2), variant=ODOMETRY)
        enu = OdometryRecord.convert_from_tokens(sample("ODOMENU", 1), variant=ODOMENU)
        sh = OdometryRecord.convert_from_tokens(sample("ODOMSH", 1), variant=ODOMSH)

        self.assertEqual((odom.frame_id, odom.child_frame_id), ("FP_ECEF", "FP_POI"))
        self.assertEqual((enu.frame_id, enu.child_frame_id), ("FP_ENU0", "FP_POI"))
        self.assertEqual((sh.frame_id, sh.child_frame_id), ("FP_ECEF", "FP_POISH"))
        self.assertEqual(sh.odom.child_frame_id, "FP_POISH")

    def test_variants_without_version_string(self):
        enu = OdometryRecord.convert_from_tokens(sample("ODOMENU", 1), variant=ODOMENU)
        self.assertIsNone(enu.version)
        self.assertEqual(enu.expected_size, 44)

    def test_frame_constants_read_only(self):
        rec = OdometryRecord(variant=ODOMSH)
        with self.assertRaises(AttributeError):
            rec.frame_id = "other"
        with self.assertRaises(AttributeError):
            rec.variant.child_frame_id = "other"
        with self.assertRaises(AttributeError):
            rec.variant = ODOMETRY
        self.assertEqual(rec.header, "ODOMSH")
        self.assertEqual(rec.odom.child_frame_id, "FP_POISH")

    def test_variant_fixed_after_decode(self):
        rec = OdometryRecord.convert_from_tokens(sample("ODOMETRY", 2))
        with self.assertRaises(AttributeError):
            rec.variant = ODOMSH
        rec.reset_data()
        self.assertIs(rec.variant, ODOMETRY)
        self.assertEqual(rec.child_frame_id, rec.odom.child_frame_id)

    def test_wrong_variant_rejected(self):
        with self.assertRaises(UnknownMessageType):
            OdometryRecord.convert_from_tokens(sample("ODOMENU", 1), variant=ODOMETRY)

    def test_unrecognized_status_kept(self):
        tokens = sample("ODOMETRY", 2)
        tokens[21] = "9"
        tokens[25] = "7"
        rec = OdometryRecord.convert_from_tokens(tokens)
        self.assertIsInstance(rec.fusion_status, UnrecognizedStatus)
        self.assertEqual(rec.fusion_status, 9)
        self.assertEqual(rec.wheelspeed_status.raw, 7)

    def test_wheelspeed_not_enabled(self):
        tokens = sample("ODOMETRY", 2)
        tokens[25] = "-1"
        rec = OdometryRecord.convert_from_tokens(tokens)
        self.assertIs(rec.wheelspeed_status, WheelspeedStatus.NOT_ENABLED)

    def test_reset_data(self):
        rec = OdometryRecord.convert_from_tokens(sample("ODOMETRY", 2))
        rec.reset_data()

        self.assertEqual(rec.stamp, GpsTime.invalid())
        np.testing.assert_array_equal(rec.odom.pose.position, np.zeros(3))
        np.testing.assert_array_equal(rec.odom.pose.orientation, [1.0, 0.0, 0.0, 0.0])
        np.testing.assert_array_equal(rec.odom.pose.cov, np.zeros((6, 6)))
        np.testing.assert_array_equal(rec.odom.twist.linear, np.zeros(3))
        np.testing.assert_array_equal(rec.acceleration, np.zeros(3))
        self.assertEqual(rec.fusion_status, 0)
        self.assertEqual(rec.wheelspeed_status, 0)
        self.assertEqual(rec.version, "Unknown")
        self.assertEqual(rec.odom.frame_id, "FP_ECEF")

    def test_rotation_matrix_identity_by_default(self):
        rec = OdometryRecord()
        np.testing.assert_array_almost_equal(rec.odom.pose.rotation_matrix(), np.eye(3))


class TestLlh(unittest.TestCase):

    def test_decode(self):
        rec = LlhRecord.convert_from_tokens(sample("LLH", 1))
        self.assertEqual(rec.frame_id, "FP_LLH")
        self.assertEqual(rec.child_frame_id, "FP_POI")
        np.testing.assert_array_equal(rec.llh, [47.392357, 8.448893, 473.5352])
        self.assertEqual(rec.cov[0, 0], 0.01030)
        self.assertEqual(rec.cov[0, 1], -0.00210)
        self.assertEqual(rec.cov[1, 0], -0.00210)
        self.assertEqual(rec.cov[2, 0], 0.00150)

    def test_zero_covariance(self):
        tokens = sample("LLH", 1)
        tokens[8:14] = ["0"] * 6
        rec = LlhRecord.convert_from_tokens(tokens)
        np.testing.assert_array_equal(rec.cov, np.zeros((3, 3)))

    def test_blank_time_before_fix(self):
        tokens = sample("LLH", 1)
        tokens[3] = ""
        tokens[4] = ""
        rec = LlhRecord.convert_from_tokens(tokens)
        self.assertFalse(rec.stamp.is_valid)

    def test_constants_read_only(self):
        rec = LlhRecord()
        for name in ("frame_id", "child_frame_id", "header", "expected_size"):
            with self.subTest(name=name):
                with self.assertRaises(AttributeError):
                    setattr(rec, name, "X")
        self.assertEqual(rec.frame_id, "FP_LLH")
        self.assertEqual(rec.header, "LLH")

    def test_header_first_error_index(self):
        tokens = sample("LLH", 1)[1:]
        tokens[5] = "abc"
        with self.assertRaises(FieldParseError) as context:
            LlhRecord.convert_from_tokens(tokens)
        self.assertEqual(context.exception.index, 5)
        self.assertEqual(context.exception.field, "lon")
        self.assertIn("token 5", str(context.exception))

    def test_reset_data(self):
        rec = LlhRecord.convert_from_tokens(sample("LLH", 1))
        rec.reset_data()
        self.assertEqual(rec.stamp, GpsTime.invalid())
        np.testing.assert_array_equal(rec.llh, np.zeros(3))
        np.testing.assert_array_equal(rec.cov, np.zeros((3, 3)))


class TestTf(unittest.TestCase):

    def test_decode(self):
        rec = TfRecord.convert_from_tokens(sample("TF", 2))
        self.assertEqual(rec.tf.frame_id, "VRTK")
        self.assertEqual(rec.tf.child_frame_id, "CAM")
        np.testing.assert_array_equal(rec.tf.translation, np.zeros(3))
        np.testing.assert_array_equal(rec.tf.rotation, [1.0, 0.0, 0.0, 0.0])
        np.testing.assert_array_almost_equal(rec.tf.as_matrix(), np.eye(4))

    def test_quaternion_is_not_normalized(self):
        tokens = sample("TF", 2)
        tokens[10:14] = ["2.0", "0.0", "0.0", "0.0"]
        rec = TfRecord.convert_from_tokens(tokens)
        np.testing.assert_array_equal(rec.tf.rotation, [2.0, 0.0, 0.0, 0.0])

    def test_old_version_unsupported(self):
        tokens = sample("TF", 2)
        tokens[2] = "1"
        with self.assertRaises(UnsupportedVersion) as context:
            TfRecord.convert_from_tokens(tokens)
        self.assertEqual(context.exception.version, 1)

    def test_reset_data(self):
        rec = TfRecord.convert_from_tokens(sample("TF", 2))
        rec.reset_data()
        self.assertEqual(rec.tf.frame_id, "")
        np.testing.assert_array_equal(rec.tf.rotation, [1.0, 0.0, 0.0, 0.0])


class TestImu(unittest.TestCase):

    def test_raw_imu(self):
        rec = RawImuRecord.convert_from_tokens(sample("RAWIMU", 1))
        self.assertEqual(rec.header, "RAWIMU")
        np.testing.assert_array_equal(
            rec.imu.linear_acceleration, [-0.525391, 0.218750, 9.964844])
        np.testing.assert_array_equal(
            rec.imu.angular_velocity, [0.001065, 0.000532, -0.000266])

    def test_corr_imu_is_distinct_type(self):
        rec = CorrImuRecord.convert_from_tokens(sample("CORRIMU", 1))
        self.assertEqual(rec.header, "CORRIMU")
        self.assertNotIsInstance(rec, RawImuRecord)
        with self.assertRaises(UnknownMessageType):
            RawImuRecord.convert_from_tokens(sample("CORRIMU", 1))

    def test_header_cannot_be_shadowed(self):
        rec = RawImuRecord.convert_from_tokens(sample("RAWIMU", 1))
        with self.assertRaises(AttributeError):
            rec.header = "CORRIMU"
        self.assertEqual(rec.header, "RAWIMU")

    def test_as_row_columns(self):
        rec = RawImuRecord.convert_from_tokens(sample("RAWIMU", 1))
        row = rec.as_row()
        self.assertEqual(
            list(row), ['time', 'accel_x', 'accel_y', 'accel_z', 'gyro_x', 'gyro_y', 'gyro_z'])
        self.assertAlmostEqual(row['time'], 2231 * 604800 + 227610.75)


class TestGnssAnt(unittest.TestCase):

    def test_decode(self):
        rec = GnssAntRecord.convert_from_tokens(sample("GNSSANT", 1))
        self.assertEqual(rec.gnss1_state, "ok")
        self.assertEqual(rec.gnss1_power, "on")
        self.assertEqual(rec.gnss1_age, 1)
        self.assertEqual(rec.gnss2_state, "short")
        self.assertEqual(rec.gnss2_power, "off")
        self.assertEqual(rec.gnss2_age, 12)

    def test_bad_age(self):
        tokens = sample("GNSSANT", 1)
        tokens[10] = "1.5"
        with self.assertRaises(FieldParseError) as context:
            GnssAntRecord.convert_from_tokens(tokens)
        self.assertEqual(context.exception.field, "gnss2_age")


class TestGnssCorr(unittest.TestCase):

    def test_decode(self):
        rec = GnssCorrRecord.convert_from_tokens(sample("GNSSCORR", 1))
        self.assertEqual(rec.stamp, GpsTime(0, 1609459200.0))
        self.assertIs(rec.gnss1_fix, GnssFix.NOFIX)
        self.assertEqual(rec.gnss1_nsig_l1, 8)
        self.assertEqual(rec.gnss1_nsig_l2, 6)
        self.assertEqual(rec.gnss2_nsig_l1, 7)
        self.assertEqual(rec.gnss2_nsig_l2, 5)
        self.assertEqual(rec.corr_latency, 0.1)
        self.assertEqual(rec.corr_update_rate, 1.0)
        self.assertEqual(rec.corr_data_rate, 0.95)
        self.assertEqual(rec.corr_msg_rate, 2.0)
        self.assertEqual(rec.sta_id, 5001)
        self.assertEqual(rec.sta_lat, 47.4)
        self.assertEqual(rec.sta_lon, 8.5)
        self.assertEqual(rec.sta_height, 450.0)
        self.assertEqual(rec.sta_dist, 12000)

    def test_reset_data(self):
        rec = GnssCorrRecord.convert_from_tokens(sample("GNSSCORR", 1))
        rec.reset_data()
        self.assertEqual(rec.sta_id, 0)
        self.assertEqual(rec.corr_latency, 0.0)
        self.assertEqual(rec.gnss1_fix, 0)
        self.assertEqual(rec.stamp, GpsTime.invalid())


class TestText(unittest.TestCase):

    def test_decode(self):
        rec = TextRecord.convert_from_tokens(sample("TEXT", 1))
        self.assertEqual(rec.level, "INFO")
        self.assertEqual(rec.text, "Fusion initialised")

    def test_log_level(self):
        self.assertEqual(TextRecord(level="ERROR").log_level, logging.ERROR)
        self.assertEqual(TextRecord(level="warning").log_level, logging.WARNING)
        self.assertEqual(TextRecord(level="NOTICE").log_level, logging.INFO)

    def test_wrong_size(self):
        with self.assertRaises(MalformedMessage) as context:
            TextRecord.convert_from_tokens(["$FP", "TEXT", "1", "INFO"])
        self.assertEqual(context.exception.expected, 5)
        self.assertEqual(context.exception.actual, 4)


if __name__ == '__main__':
    unittest.main()
