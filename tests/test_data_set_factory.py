# ============================================================================
# DATA SET FACTORY TESTS
# ============================================================================
# EPOCH: 1 - BATCHED DUMP
# STATUS: Tests - Batching engine
# PURPOSE: Verify batching, row conservation and foreign key population
# CREATED: 19 OCT 2026
# ============================================================================
"""
Data Set Factory Tests

Covers:
1. Argument validation happens before iteration
2. Batch boundaries follow the total row count across tables
3. Every contributed row shows up in exactly one batch
4. Batches are released when the consumer advances
5. Foreign key columns hold the parent key (or its container substitute)
6. The foreign key hook never leaks to other selectors or past the run
7. Each run starts with no tables and logs under its own run id

Run with:
    pytest tests/test_data_set_factory.py -v
"""

import itertools
import logging
from types import MappingProxyType

import pytest

from dump.config import DumpDefaults, PostgresDefaults
from dump.factory import DataSetFactory
from dump.mapping import FieldSelector, FieldSelectorCollection, FieldSelectorWithForeignKey
from dump.schema import PostgresTableDefinitionGenerator

from sample_models import Order, OrderLine, Parcel, Shipment, make_order


# ============================================================================
# HELPERS
# ============================================================================

def _make_factory(**defaults):
    return DataSetFactory(
        PostgresTableDefinitionGenerator(PostgresDefaults()),
        DumpDefaults(**defaults),
    )


def _order_selectors():
    """Orders plus their lines, lines keyed by OrderId."""
    return FieldSelectorCollection([
        FieldSelector(Order, lambda order: order, table_name="Orders"),
        FieldSelectorWithForeignKey(
            OrderLine,
            lambda order: order.lines,
            get_foreign_key=lambda order: order.order_id,
            foreign_key_name="OrderId",
        ),
    ])


def _drain(batches):
    """Copy what each batch holds before it is released."""
    return [
        {name: table.to_records() for name, table in batch.items()}
        for batch in batches
    ]


# ============================================================================
# ARGUMENTS
# ============================================================================


class TestArguments:
    def test_none_data_fails_immediately(self):
        with pytest.raises(TypeError):
            _make_factory().create(None, _order_selectors())

    def test_none_selectors_fail_immediately(self):
        with pytest.raises(TypeError):
            _make_factory().create([], None)

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError):
            _make_factory().create([], _order_selectors(), batch_size=0)

    def test_default_batch_size_from_defaults(self):
        factory = _make_factory(batch_size=2)
        orders = [make_order(n) for n in range(5)]
        selectors = FieldSelectorCollection([FieldSelector(Order, lambda order: order)])
        sizes = [batch.total_rows for batch in factory.create(orders, selectors)]
        assert sizes == [2, 2, 1]


# ============================================================================
# BATCH BOUNDARIES
# ============================================================================


class TestBatching:
    def test_orders_example(self):
        factory = _make_factory()
        orders = (Order(order_id=n, customer="c", total=1.0) for n in range(250000))
        selectors = FieldSelectorCollection([
            FieldSelector(Order, lambda order: order, table_name="Orders"),
        ])

        sizes = []
        column_sets = []
        for batch in factory.create(orders, selectors, batch_size=100000):
            sizes.append(batch['"Orders"'].row_count)
            column_sets.append(batch['"Orders"'].column_names)

        assert sizes == [100000, 100000, 50000]
        assert all(columns == column_sets[0] for columns in column_sets)

    def test_exact_multiple_ends_with_empty_batch(self):
        factory = _make_factory()
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        sizes = [batch.total_rows for batch in factory.create(range(6), selectors, batch_size=3)]
        assert sizes == [3, 3, 0]

    def test_empty_input_yields_one_empty_batch(self):
        batches = list(_make_factory().create([], _order_selectors()))
        assert len(batches) == 1
        assert len(batches[0]) == 0

    def test_threshold_is_summed_across_tables(self):
        orders = [make_order(n, line_count=2) for n in range(4)]  # 12 rows
        results = _drain(_make_factory().create(orders, _order_selectors(), batch_size=5))

        totals = [sum(len(records) for records in batch.values()) for batch in results]
        assert totals == [5, 5, 2]
        assert all(total <= 5 for total in totals)

    def test_rows_are_conserved(self):
        orders = [make_order(n, line_count=n % 4) for n in range(50)]
        results = _drain(_make_factory().create(orders, _order_selectors(), batch_size=7))

        order_rows = sum(len(batch.get('"Orders"', [])) for batch in results)
        line_rows = sum(len(batch.get('"OrderLine"', [])) for batch in results)
        assert order_rows == 50
        assert line_rows == sum(n % 4 for n in range(50))

    def test_batches_are_numbered(self):
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        names = [batch.name for batch in _make_factory().create(range(5), selectors, batch_size=2)]
        assert names == ["batch_00000", "batch_00001", "batch_00002"]

    def test_unbounded_input(self):
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n, table_name="Numbers")])
        batches = _make_factory().create(itertools.count(), selectors, batch_size=10)

        firsts = []
        for batch in itertools.islice(batches, 3):
            values = [row["\"Value\""] for row in batch['"Numbers"']]
            assert len(values) == 10
            firsts.append(values[0])
        assert firsts == [0, 10, 20]

    def test_batch_released_on_advance(self):
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        batches = _make_factory().create(range(4), selectors, batch_size=2)

        first = next(batches)
        table = first['"int"']
        assert table.row_count == 2

        second = next(batches)
        assert len(first) == 0
        assert second['"int"'] is table  # same schema object, rows refilled
        assert [row["\"Value\""] for row in table] == [2, 3]

    def test_same_type_shares_a_table(self):
        selectors = FieldSelectorCollection([
            FieldSelector(int, lambda order: order.order_id),
            FieldSelector(int, lambda order: len(order.lines)),
        ])
        orders = [make_order(1, line_count=3), make_order(2)]
        (batch,) = _drain(_make_factory().create(orders, selectors))
        assert list(batch) == ['"int"']
        assert [record['"Value"'] for record in batch['"int"']] == [1, 3, 2, 0]

    def test_schema_survives_batches(self):
        factory = _make_factory()
        orders = [make_order(n, line_count=1) for n in range(6)]
        for batch in factory.create(orders, _order_selectors(), batch_size=4):
            if '"OrderLine"' in batch:
                assert batch['"OrderLine"'].column_names == ['"sku"', '"quantity"', '"OrderId"']

    def test_emission_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="dump.factory.data_set")
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        list(_make_factory().create(range(3), selectors, batch_size=2))
        messages = [record.getMessage() for record in caplog.records]
        assert messages == ["Emitting batch_00000", "Emitting batch_00001"]

    def test_run_context_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="dump.factory")
        selectors = FieldSelectorCollection([
            FieldSelector(Order, lambda order: order, table_name="Orders"),
        ])
        list(_make_factory().create([make_order(1)], selectors))

        def record(prefix):
            return next(r for r in caplog.records if r.getMessage().startswith(prefix))

        created, appended, emitted = record("Created table"), record("Appended"), record("Emitting")
        assert created.extra["table_name"] == '"Orders"'
        assert created.extra["field_type"] == "Order"
        assert "table_name='Orders'" in created.extra["selector"]
        assert appended.extra["table_name"] == '"Orders"'
        assert emitted.extra["batch_index"] == 0
        assert created.extra["run_id"] == appended.extra["run_id"] == emitted.extra["run_id"]

    def test_each_run_has_its_own_id(self, caplog):
        caplog.set_level(logging.INFO, logger="dump.factory.data_set")
        factory = _make_factory()
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        list(factory.create([1], selectors))
        list(factory.create([2], selectors))

        run_ids = [r.extra["run_id"] for r in caplog.records]
        assert len(run_ids) == 2
        assert run_ids[0] != run_ids[1]
        assert factory.run_id is None

    def test_mapping_value_is_one_row(self):
        selectors = FieldSelectorCollection([
            FieldSelector(OrderLine, lambda order: MappingProxyType({"sku": "X", "quantity": 2})),
        ])
        (batch,) = _drain(_make_factory().create([make_order(1)], selectors))
        assert batch['"OrderLine"'] == [{'"sku"': "X", '"quantity"': 2}]


# ============================================================================
# FOREIGN KEYS
# ============================================================================


class TestForeignKeys:
    def test_lines_carry_order_id(self):
        orders = [make_order(1, line_count=2), make_order(2), make_order(3, line_count=1)]
        (batch,) = _drain(_make_factory().create(orders, _order_selectors()))

        assert [line['"OrderId"'] for line in batch['"OrderLine"']] == [1, 1, 3]
        assert [line['"sku"'] for line in batch['"OrderLine"']] == ["SKU-1-0", "SKU-1-1", "SKU-3-0"]
        assert '"OrderId"' not in batch['"Orders"'][0]

    def test_default_foreign_key_name(self):
        selectors = FieldSelectorCollection([
            FieldSelectorWithForeignKey(
                OrderLine, lambda order: order.lines, get_foreign_key=lambda order: order.order_id,
            ),
        ])
        (batch,) = _drain(_make_factory().create([make_order(4, line_count=1)], selectors))
        assert batch['"OrderLine"'][0]['"Auto_ParentId"'] == 4

    def test_configured_foreign_key_name(self):
        selectors = FieldSelectorCollection([
            FieldSelectorWithForeignKey(
                OrderLine, lambda order: order.lines, get_foreign_key=lambda order: order.order_id,
            ),
        ])
        factory = _make_factory(foreign_key_name="ParentKey")
        (batch,) = _drain(factory.create([make_order(4, line_count=1)], selectors))
        assert batch['"OrderLine"'][0]['"ParentKey"'] == 4

    def test_unresolved_key_is_null(self):
        selectors = FieldSelectorCollection([
            FieldSelectorWithForeignKey(
                OrderLine, lambda order: order.lines, get_foreign_key=lambda order: None,
            ),
        ])
        (batch,) = _drain(_make_factory().create([make_order(1, line_count=2)], selectors))
        assert [line['"Auto_ParentId"'] for line in batch['"OrderLine"']] == [None, None]

    def test_container_substitute_preferred_over_root(self):
        def parcel_key(parent):
            return parent.order_id if isinstance(parent, Order) else parent.shipment_id

        selectors = FieldSelectorCollection([
            FieldSelectorWithForeignKey(
                Parcel,
                lambda shipment: shipment.parcels,
                get_foreign_key=parcel_key,
                foreign_key_name="ParentId",
            ),
        ])
        shipment = Shipment(
            shipment_id=900,
            parcels=[Parcel("P1", order=make_order(12)), Parcel("P2")],
        )
        (batch,) = _drain(_make_factory().create([shipment], selectors))

        assert batch['"Parcels"'] == [
            {'"barcode"': "P1", '"weight"': 1.0, '"ParentId"': 12},
            {'"barcode"': "P2", '"weight"': 1.0, '"ParentId"': 900},
        ]

    def test_later_selector_does_not_write_foreign_keys(self):
        selectors = FieldSelectorCollection([
            FieldSelectorWithForeignKey(
                OrderLine,
                lambda order: order.lines,
                get_foreign_key=lambda order: order.order_id,
                foreign_key_name="OrderId",
            ),
            FieldSelector(OrderLine, lambda order: OrderLine(sku="GIFT", quantity=1)),
            FieldSelector(int, lambda order: order.order_id),
        ])
        (batch,) = _drain(_make_factory().create([make_order(5, line_count=1)], selectors))

        assert batch['"OrderLine"'] == [
            {'"sku"': "SKU-5-0", '"quantity"': 1, '"OrderId"': 5},
            {'"sku"': "GIFT", '"quantity"': 1, '"OrderId"': None},
        ]
        assert batch['"int"'] == [{'"Value"': 5}]

    def test_hook_removed_after_run(self):
        factory = _make_factory()
        list(factory.create([make_order(1, line_count=1)], _order_selectors()))
        assert factory.row_created is None

    def test_hook_removed_on_early_termination(self):
        factory = _make_factory()
        orders = (make_order(n, line_count=2) for n in itertools.count())
        # the third row of every batch is an order line, so the hook is live
        batches = factory.create(orders, _order_selectors(), batch_size=3)

        next(batches)
        assert factory.row_created is not None

        batches.close()
        assert factory.row_created is None

    def test_early_termination_clears_rows(self):
        factory = _make_factory()
        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        batches = factory.create(itertools.count(), selectors, batch_size=3)

        table = next(batches)['"int"']
        assert table.row_count == 3
        batches.close()
        assert table.row_count == 0

        sizes = [batch.total_rows for batch in factory.create([100], selectors, batch_size=3)]
        assert sizes == [1]

    def test_each_run_starts_without_tables(self):
        factory = _make_factory()
        list(factory.create([make_order(1)], FieldSelectorCollection([FieldSelector(Order, lambda order: order)])))

        selectors = FieldSelectorCollection([FieldSelector(int, lambda n: n)])
        names = [list(batch) for batch in factory.create([1, 2], selectors)]
        assert names == [['"int"']]

    def test_factories_do_not_share_tables(self):
        first, second = _make_factory(), _make_factory()
        list(first.create([make_order(1)], _order_selectors()))
        assert second.tables == {}
