"""
Unit tests for the value debt ledger.
"""

import dataclasses
import unittest

from skim_model.debt_ledger import ValueDebtLedger
from skim_model.errors import InvalidAmount


class TestValueDebtLedger(unittest.TestCase):
    def setUp(self):
        self.ledger = ValueDebtLedger()

    def test_starts_empty(self):
        self.assertEqual(self.ledger.user_debt_value, 0)
        self.assertEqual(self.ledger.beneficiary_debt_value, 0)
        self.assertEqual(self.ledger.last_snapshot_value, 0)

    def test_fields_are_read_only(self):
        with self.assertRaises(AttributeError):
            self.ledger.user_debt_value = 10
        with self.assertRaises(AttributeError):
            self.ledger.beneficiary_debt_value = 10

    def test_user_hooks_do_not_touch_beneficiary_debt(self):
        self.ledger.accrue_profit(7)
        self.ledger.credit_user(100)
        self.ledger.debit_user(40)

        self.assertEqual(self.ledger.user_debt_value, 60)
        self.assertEqual(self.ledger.beneficiary_debt_value, 7)

    def test_debit_clamps_at_zero(self):
        self.ledger.credit_user(10)

        with self.assertLogs('skim_model.debt_ledger', level='WARNING'):
            debited = self.ledger.debit_user(15)

        self.assertEqual(debited, 10)
        self.assertEqual(self.ledger.user_debt_value, 0)

    def test_absorb_loss_never_exceeds_beneficiary_debt(self):
        self.ledger.accrue_profit(20)

        self.assertEqual(self.ledger.absorb_loss(5), 5)
        self.assertEqual(self.ledger.absorb_loss(100), 15)
        self.assertEqual(self.ledger.beneficiary_debt_value, 0)

    def test_reassign_conserves_total(self):
        self.ledger.credit_user(100)
        self.ledger.accrue_profit(20)

        self.ledger.reassign_to_user(8)

        self.assertEqual(self.ledger.user_debt_value, 108)
        self.assertEqual(self.ledger.beneficiary_debt_value, 12)
        self.assertEqual(self.ledger.total_debt_value, 120)

    def test_release_more_than_owed(self):
        self.ledger.accrue_profit(3)
        with self.assertRaises(InvalidAmount):
            self.ledger.release_beneficiary(4)
        self.assertEqual(self.ledger.beneficiary_debt_value, 3)

    def test_negative_amounts_rejected(self):
        with self.assertRaises(InvalidAmount):
            self.ledger.credit_user(-1)
        with self.assertRaises(InvalidAmount):
            self.ledger.accrue_profit(-1)

    def test_snapshot(self):
        self.ledger.credit_user(100)
        self.ledger.accrue_profit(20)
        self.ledger.record_snapshot(1234)

        snap = self.ledger.snapshot()
        self.assertEqual(snap.last_snapshot_value, 120)
        self.assertEqual(snap.total_debt_value, 120)
        self.assertEqual(snap.last_report, 1234)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snap.user_debt_value = 0


if __name__ == '__main__':
    unittest.main()
