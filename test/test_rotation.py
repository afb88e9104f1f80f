"""
Unit tests for the recipient rotation state machine.
"""

import unittest

from skim_model.config import RECIPIENT_CHANGE_COOLDOWN
from skim_model.errors import (
    ChangeAlreadyPending,
    CooldownNotElapsed,
    InvalidAddress,
    NoPendingChange,
    RotationInconsistent,
)
from skim_model.rotation import PendingChange, RecipientRotation, Stable


def no_holdings(address):
    return False


class TestRecipientRotation(unittest.TestCase):
    def setUp(self):
        self.rotation = RecipientRotation("dragon")

    def test_starts_stable(self):
        self.assertEqual(self.rotation.state, Stable())
        self.assertIsNone(self.rotation.pending_beneficiary)
        self.assertIsNone(self.rotation.change_requested_at)

    def test_propose_enters_pending(self):
        self.rotation.propose("phoenix", 100, no_holdings)

        self.assertEqual(self.rotation.state, PendingChange("phoenix", 100))
        self.assertEqual(self.rotation.pending_beneficiary, "phoenix")
        self.assertEqual(self.rotation.ready_at(), 100 + RECIPIENT_CHANGE_COOLDOWN)
        # Beneficiary does not change until finalize
        self.assertEqual(self.rotation.beneficiary, "dragon")

    def test_propose_only_from_stable(self):
        self.rotation.propose("phoenix", 100, no_holdings)
        with self.assertRaises(ChangeAlreadyPending):
            self.rotation.propose("griffin", 101, no_holdings)

    def test_propose_validation(self):
        with self.assertRaises(InvalidAddress):
            self.rotation.propose("", 0, no_holdings)
        with self.assertRaises(InvalidAddress):
            self.rotation.propose("dragon", 0, no_holdings)
        with self.assertRaises(RotationInconsistent):
            self.rotation.propose("alice", 0, lambda address: address == "alice")
        self.assertEqual(self.rotation.state, Stable())

    def test_cancel(self):
        with self.assertRaises(NoPendingChange):
            self.rotation.cancel()

        self.rotation.propose("phoenix", 100, no_holdings)
        self.assertEqual(self.rotation.cancel(), "phoenix")
        self.assertEqual(self.rotation.state, Stable())
        self.assertEqual(self.rotation.beneficiary, "dragon")

    def test_finalize_respects_cooldown(self):
        with self.assertRaises(NoPendingChange):
            self.rotation.finalize(0, no_holdings)

        self.rotation.propose("phoenix", 100, no_holdings)

        with self.assertRaises(CooldownNotElapsed):
            self.rotation.finalize(100, no_holdings)
        with self.assertRaises(CooldownNotElapsed):
            self.rotation.finalize(100 + RECIPIENT_CHANGE_COOLDOWN - 1, no_holdings)

        previous, current = self.rotation.finalize(100 + RECIPIENT_CHANGE_COOLDOWN, no_holdings)
        self.assertEqual((previous, current), ("dragon", "phoenix"))
        self.assertEqual(self.rotation.beneficiary, "phoenix")
        self.assertEqual(self.rotation.state, Stable())

    def test_target_acquiring_shares_breaks_consistency(self):
        holders = set()
        self.rotation.propose("phoenix", 0, lambda address: address in holders)
        self.assertTrue(self.rotation.is_consistent(lambda address: address in holders))

        holders.add("phoenix")
        self.assertFalse(self.rotation.is_consistent(lambda address: address in holders))
        with self.assertRaises(RotationInconsistent):
            self.rotation.finalize(RECIPIENT_CHANGE_COOLDOWN, lambda address: address in holders)

    def test_custom_cooldown(self):
        rotation = RecipientRotation("dragon", cooldown=10)
        rotation.propose("phoenix", 5, no_holdings)
        rotation.finalize(15, no_holdings)
        self.assertEqual(rotation.beneficiary, "phoenix")


if __name__ == '__main__':
    unittest.main()
