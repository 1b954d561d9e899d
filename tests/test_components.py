import random

import numpy as np
import pytest

from bpsim.components import GlobalHistoryRegister, IndexingScheme, SaturatingCounterTable


class TestSaturatingCounterTable:

    def test_table_has_two_to_the_width_entries(self):
        table = SaturatingCounterTable(5, initial=2)
        assert len(table) == 32
        assert table.values().tolist() == [2] * 32

    def test_zero_width_table_has_one_entry(self):
        table = SaturatingCounterTable(0, initial=1)
        assert len(table) == 1
        assert table.values().tolist() == [1]

    def test_prediction_threshold(self):
        table = SaturatingCounterTable(2, initial=2)
        assert table.predict(0) is True
        table.decrement(0)
        assert table.predict(0) is False

    def test_increment_saturates_at_three(self):
        table = SaturatingCounterTable(1, initial=2)
        for _ in range(5):
            table.increment(1)
        assert table.read(1) == 3

    def test_decrement_saturates_at_zero(self):
        table = SaturatingCounterTable(1, initial=2)
        for _ in range(5):
            table.decrement(0)
        assert table.read(0) == 0

    def test_counters_stay_in_range(self):
        rng = random.Random(7)
        table = SaturatingCounterTable(3, initial=2)
        for _ in range(5000):
            table.train(rng.randrange(8), rng.random() < 0.5)
            assert 0 <= table.table.min() and table.table.max() <= 3

    def test_values_are_read_only(self):
        table = SaturatingCounterTable(2)
        with pytest.raises(ValueError):
            table.values()[0] = 3

    def test_copied_values_do_not_follow_updates(self):
        table = SaturatingCounterTable(2)
        view = table.values()
        copy = table.values(copy=True)
        table.increment(0)
        assert view[0] == 3
        assert copy[0] == 2

    def test_reset_restores_initial_values(self):
        table = SaturatingCounterTable(2, initial=1)
        table.increment(3)
        table.decrement(0)
        table.reset()
        assert table.values().tolist() == [1, 1, 1, 1]
        assert table.reads == 0 and table.writes == 0

    def test_statistics(self):
        table = SaturatingCounterTable(2, initial=2)
        table.increment(0)
        table.decrement(1)
        table.decrement(1)
        stats = table.get_statistics()
        assert stats['entries'] == 4
        assert stats['total_bits'] == 8
        assert stats['saturated_high'] == 1
        assert stats['saturated_low'] == 1
        assert stats['predict_taken'] == 3


class TestIndexingScheme:

    def test_low_two_pc_bits_are_discarded(self):
        assert IndexingScheme.bimodal(0x4, 2) == 1
        assert IndexingScheme.bimodal(0x7, 2) == 1
        assert IndexingScheme.bimodal(0x10, 2) == 0

    def test_bimodal_masks_to_width(self):
        assert IndexingScheme.bimodal(0xFFFF_FFFC, 6) == 0x3F
        assert IndexingScheme.bimodal(0x1234, 0) == 0

    def test_chooser_uses_same_pc_bits(self):
        pc = 0x00A3B5FC
        assert IndexingScheme.chooser(pc, 8) == (pc >> 2) & 0xFF

    def test_gshare_without_history_bits_is_pc_index(self):
        pc = 0x00A3B5FC
        assert IndexingScheme.gshare(pc, 0, 10, 0) == IndexingScheme.bimodal(pc, 10)

    def test_gshare_with_full_width_history(self):
        assert IndexingScheme.gshare(0x8, 0b00, 2, 2) == 2
        assert IndexingScheme.gshare(0x8, 0b10, 2, 2) == 0
        assert IndexingScheme.gshare(0x8, 0b11, 2, 2) == 1

    def test_gshare_xors_only_upper_bits(self):
        pc = 0b1011 << 2
        # upper 0b10 ^ history 0b01 = 0b11, lower 0b11 kept
        assert IndexingScheme.gshare(pc, 0b01, 4, 2) == 0b1111

    def test_gshare_index_within_table(self):
        rng = random.Random(3)
        for _ in range(500):
            m1 = rng.randint(0, 12)
            n = rng.randint(0, m1)
            history = rng.randrange(1 << n) if n else 0
            idx = IndexingScheme.gshare(rng.randrange(1 << 32), history, m1, n)
            assert 0 <= idx < (1 << m1)


class TestGlobalHistoryRegister:

    def test_outcome_enters_at_most_significant_bit(self):
        ghr = GlobalHistoryRegister(2)
        ghr.update(True)
        assert ghr.value == 0b10
        ghr.update(False)
        assert ghr.value == 0b01
        ghr.update(True)
        assert ghr.value == 0b10

    def test_shift_invariant(self):
        rng = random.Random(11)
        ghr = GlobalHistoryRegister(5)
        for _ in range(1000):
            before = ghr.value
            taken = rng.random() < 0.5
            ghr.update(taken)
            assert ghr.value & 0b1111 == before >> 1
            assert ghr.value >> 4 == int(taken)
            assert ghr.value < 32

    def test_zero_length_register_ignores_updates(self):
        ghr = GlobalHistoryRegister(0)
        ghr.update(True)
        ghr.update(True)
        assert ghr.value == 0
        assert len(ghr) == 0
        assert ghr.get_history().size == 0

    def test_history_array_is_most_recent_first(self):
        ghr = GlobalHistoryRegister(3)
        ghr.update(False)
        ghr.update(True)
        assert ghr.value == 0b100
        np.testing.assert_array_equal(ghr.get_history(), [1, 0, 0])
        assert repr(ghr) == "GHR(3): 100"

    def test_reset(self):
        ghr = GlobalHistoryRegister(4)
        ghr.update(True)
        ghr.reset()
        assert int(ghr) == 0
