from __future__ import annotations

import random
import unittest

import numpy as np

from debug_graphs.pixel_mapper import value_to_y, values_to_y
from debug_graphs.range_tracker import RunningExtrema, ValueRange, apply_range_floor, window_range
from debug_graphs.ring import SampleRing


class SampleRingTests(unittest.TestCase):
    def test_read_order_is_oldest_first_after_wrap(self) -> None:
        ring = SampleRing(2)
        for v in (1.0, 2.0, 3.0):
            ring.push(v)
        self.assertEqual(ring.ordered().tolist(), [2.0, 3.0])
        self.assertEqual(ring.next_index, 1)

    def test_state_moves_from_empty_through_filling_to_full(self) -> None:
        ring = SampleRing(3)
        self.assertEqual(ring.state, "empty")
        ring.push(1.0)
        self.assertEqual(ring.state, "filling")
        ring.push(2.0)
        ring.push(3.0)
        self.assertEqual(ring.state, "full")
        ring.push(4.0)
        self.assertEqual(ring.state, "full")
        self.assertEqual(len(ring), 3)

    def test_filling_ring_reads_in_insertion_order(self) -> None:
        ring = SampleRing(5)
        for v in (4.0, 1.0, 7.0):
            ring.push(v)
        self.assertEqual(ring.ordered().tolist(), [4.0, 1.0, 7.0])
        self.assertEqual(ring.next_index, 3)

    def test_ordered_matches_last_capacity_values_for_long_streams(self) -> None:
        ring = SampleRing(4)
        values = [float(v) for v in range(11)]
        for v in values:
            ring.push(v)
        self.assertEqual(ring.ordered().tolist(), values[-4:])

    def test_rejects_empty_capacity(self) -> None:
        with self.assertRaises(ValueError):
            SampleRing(0)


class WindowRangeTests(unittest.TestCase):
    def test_range_is_exact_min_max_when_span_exceeds_floor(self) -> None:
        self.assertEqual(window_range([60.0, 58.0, 61.0], floor=1.5), ValueRange(min=58.0, max=61.0))

    def test_constant_signal_is_expanded_by_floor(self) -> None:
        self.assertEqual(window_range([5.0, 5.0], floor=1.5), ValueRange(min=4.25, max=5.75))

    def test_span_just_below_floor_is_expanded_symmetrically(self) -> None:
        out = apply_range_floor(10.0, 11.0, 1.5)
        self.assertEqual(out, ValueRange(min=9.25, max=11.75))
        self.assertAlmostEqual((out.min + out.max) / 2, 10.5)

    def test_range_tracks_only_samples_still_in_ring(self) -> None:
        ring = SampleRing(3)
        for v in (100.0, 1.0, 2.0):
            ring.push(v)
        self.assertEqual(window_range(ring.raw(), floor=1.5).max, 100.0)
        ring.push(3.0)
        self.assertEqual(window_range(ring.raw(), floor=1.5), ValueRange(min=1.0, max=3.0))

    def test_empty_window_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            window_range([], floor=1.0)


class RunningExtremaTests(unittest.TestCase):
    def test_first_sample_seeds_unit_margin(self) -> None:
        ext = RunningExtrema(floor=1.5)
        self.assertEqual(ext.observe(10.0), ValueRange(min=9.0, max=11.0))
        self.assertIsNone(ext.current())

    def test_zero_is_a_valid_seed(self) -> None:
        ext = RunningExtrema()
        ext.commit(ext.observe(0.0))
        self.assertEqual(ext.observe(0.5), ValueRange(min=-1.0, max=1.0))

    def test_large_floor_expands_seed(self) -> None:
        ext = RunningExtrema(floor=10.0)
        self.assertEqual(ext.observe(10.0), ValueRange(min=4.0, max=16.0))

    def test_extrema_widen_monotonically(self) -> None:
        rng = random.Random(7)
        ext = RunningExtrema(floor=1.5)
        prev: ValueRange | None = None
        for _ in range(200):
            ext.commit(ext.observe(rng.uniform(-50.0, 50.0)))
            cur = ext.current()
            assert cur is not None
            if prev is not None:
                self.assertLessEqual(cur.min, prev.min)
                self.assertGreaterEqual(cur.max, prev.max)
            prev = cur

    def test_spike_is_never_forgotten(self) -> None:
        ext = RunningExtrema()
        for v in (5.0, 500.0, 5.0, 5.0):
            ext.commit(ext.observe(v))
        self.assertEqual(ext.current(), ValueRange(min=4.0, max=500.0))


class PixelMapperTests(unittest.TestCase):
    def test_min_maps_to_bottom_and_max_to_top(self) -> None:
        r = ValueRange(min=-3.0, max=7.0)
        self.assertEqual(value_to_y(-3.0, r, 40.0), 40.0)
        self.assertEqual(value_to_y(7.0, r, 40.0), 0.0)

    def test_top_offset_shifts_every_row(self) -> None:
        r = ValueRange(min=0.0, max=1.0)
        self.assertEqual(value_to_y(1.0, r, 10.0, top=12.0), 12.0)
        self.assertEqual(value_to_y(0.0, r, 10.0, top=12.0), 22.0)

    def test_mapping_is_affine(self) -> None:
        r = ValueRange(min=58.0, max=61.0)
        ys = values_to_y(np.asarray([58.0, 59.5, 61.0]), r, 17.0, top=12.0)
        self.assertAlmostEqual(float(ys[1]), float((ys[0] + ys[2]) / 2))
        self.assertAlmostEqual(value_to_y(60.0, r, 17.0, 12.0), float(values_to_y(np.asarray([60.0]), r, 17.0, 12.0)[0]))


if __name__ == "__main__":
    unittest.main()
