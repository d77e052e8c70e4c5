"""Tests for venue/side classification of trade legs."""

from dataclasses import replace

from conftest import make_operation
from plazo_app.data.models import Side, Venue
from plazo_app.matching.classifier import OperationClassifier, bucket_for


class TestBucketFor:
    """Test suite for single-leg bucket lookup."""

    def test_four_buckets(self) -> None:
        """Each venue/side combination maps to its own bucket."""
        assert bucket_for(make_operation(Side.SELL, Venue.IMMEDIATE)) == "sell_immediate"
        assert bucket_for(make_operation(Side.BUY, Venue.DEFERRED)) == "buy_deferred"
        assert bucket_for(make_operation(Side.BUY, Venue.IMMEDIATE)) == "buy_immediate"
        assert bucket_for(make_operation(Side.SELL, Venue.DEFERRED)) == "sell_deferred"

    def test_raw_string_values_are_accepted(self) -> None:
        """Plain enum values classify like the enum members."""
        op = replace(make_operation(), side="buy", venue="24h")
        assert bucket_for(op) == "buy_deferred"

    def test_unknown_venue(self) -> None:
        """Unrecognized venues have no bucket."""
        op = replace(make_operation(), venue="48h")
        assert bucket_for(op) is None


class TestOperationClassifier:
    """Test suite for per-instrument partitioning."""

    def test_partitions_by_instrument(self) -> None:
        """Legs are grouped per instrument in first-seen order."""
        ops = [
            make_operation(Side.SELL, Venue.IMMEDIATE, instrument="S31O5"),
            make_operation(Side.BUY, Venue.DEFERRED, instrument="AL30"),
            make_operation(Side.BUY, Venue.DEFERRED, instrument="S31O5"),
            make_operation(Side.SELL, Venue.DEFERRED, instrument="AL30"),
        ]

        classified = OperationClassifier().classify(ops)

        assert list(classified) == ["S31O5", "AL30"]
        assert classified["S31O5"].sell_immediate == [ops[0]]
        assert classified["S31O5"].buy_deferred == [ops[2]]
        assert classified["AL30"].buy_deferred == [ops[1]]
        assert classified["AL30"].sell_deferred == [ops[3]]
        assert classified["AL30"].buy_immediate == []

    def test_preserves_input_order_within_bucket(self) -> None:
        """Legs in a bucket keep their input order."""
        ops = [make_operation(Side.SELL, Venue.IMMEDIATE, quantity=q) for q in (3.0, 1.0, 2.0)]

        classified = OperationClassifier().classify(ops)

        assert [op.quantity for op in classified["S31O5"].sell_immediate] == [3.0, 1.0, 2.0]

    def test_unclassifiable_legs_are_dropped(self) -> None:
        """Legs with an unknown venue do not create buckets or instruments."""
        ops = [replace(make_operation(instrument="GD30"), venue="T+2")]

        assert OperationClassifier().classify(ops) == {}

    def test_all_operations(self) -> None:
        """all_operations returns every classified leg."""
        ops = [
            make_operation(Side.SELL, Venue.IMMEDIATE),
            make_operation(Side.BUY, Venue.IMMEDIATE),
        ]

        classified = OperationClassifier().classify(ops)

        assert len(classified["S31O5"].all_operations()) == 2

    def test_empty_input(self) -> None:
        """No legs classify to an empty mapping."""
        assert OperationClassifier().classify([]) == {}
