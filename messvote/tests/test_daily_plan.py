import unittest
from datetime import date

from messvote.domain.DailyPlan import DailyPlan, PlanEntry
from messvote.events.Event_Bus import PLANS_CHANGED
from messvote.tests.helpers import ContextTestMixin
from messvote.utilities.errors import DuplicatePlanItem, NotFound, ValidationError

TODAY = date(2026, 3, 2)
TOMORROW = date(2026, 3, 3)


class TestDailyPlan(ContextTestMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        catalog = self.ctx.catalog
        self.idli = catalog.create_item("Idli", "breakfast")
        self.poha = catalog.create_item("Poha", "breakfast")
        self.dal = catalog.create_item("Dal", "lunch")
        self.rajma = catalog.create_item("Rajma", "lunch")

    def test_save_then_get_round_trip(self):
        plan = DailyPlan(TOMORROW, {
            "breakfast": [PlanEntry.from_item(self.poha), PlanEntry.from_item(self.idli)],
            "lunch": [],
            "dinner": [],
        })
        self.ctx.planner.save_plan(TOMORROW, plan)
        self.assertEqual(self.ctx.planner.get_plan(TOMORROW), plan)
        # Order inside a meal is kept
        self.assertEqual(self.ctx.planner.get_plan(TOMORROW).item_ids("breakfast"),
                         [self.poha.item_id, self.idli.item_id])

    def test_round_trip_empty_plan(self):
        self.ctx.planner.save_plan(TOMORROW, DailyPlan(TOMORROW))
        stored = self.ctx.planner.get_plan(TOMORROW)
        self.assertTrue(stored.is_empty())
        self.assertEqual(stored, DailyPlan(TOMORROW))

    def test_save_plan_overwrites(self):
        self.ctx.planner.save_plan(TOMORROW, {"breakfast": [self.idli.item_id], "lunch": [self.dal.item_id]})
        self.ctx.planner.save_plan(TOMORROW, {"breakfast": [self.poha.item_id]})
        plan = self.ctx.planner.get_plan(TOMORROW)
        self.assertEqual(plan.item_ids("breakfast"), [self.poha.item_id])
        self.assertEqual(plan.item_ids("lunch"), [])

    def test_save_plan_validates_ids(self):
        with self.assertRaises(NotFound):
            self.ctx.planner.save_plan(TOMORROW, {"lunch": ["ghost"]})
        with self.assertRaises(ValidationError):
            self.ctx.planner.save_plan(TOMORROW, {"lunch": [self.idli.item_id]})
        with self.assertRaises(DuplicatePlanItem):
            self.ctx.planner.save_plan(TOMORROW, {"lunch": [self.dal.item_id, self.dal.item_id]})
        self.assertIsNone(self.ctx.planner.get_plan(TOMORROW))

    def test_add_item_rejects_duplicates(self):
        self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.dal.item_id)
        with self.assertRaises(DuplicatePlanItem):
            self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.dal.item_id)
        self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.rajma.item_id)
        self.assertEqual(self.ctx.planner.get_plan(TOMORROW).item_ids("lunch"),
                         [self.dal.item_id, self.rajma.item_id])

    def test_remove_item_is_noop_when_absent(self):
        self.assertIsNone(self.ctx.planner.remove_item_from_plan(TOMORROW, "lunch", self.dal.item_id))
        self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.dal.item_id)
        plan = self.ctx.planner.remove_item_from_plan(TOMORROW, "lunch", self.rajma.item_id)
        self.assertEqual(plan.item_ids("lunch"), [self.dal.item_id])
        plan = self.ctx.planner.remove_item_from_plan(TOMORROW, "lunch", self.dal.item_id)
        self.assertEqual(plan.item_ids("lunch"), [])

    def test_clear_plan(self):
        self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.dal.item_id)
        self.assertTrue(self.ctx.planner.clear_plan(TOMORROW))
        self.assertIsNone(self.ctx.planner.get_plan(TOMORROW))
        self.assertFalse(self.ctx.planner.clear_plan(TOMORROW))

    def test_votable_falls_back_to_active_catalog(self):
        items = self.ctx.planner.votable_items(TOMORROW, "breakfast")
        self.assertEqual({e.item_id for e in items}, {self.idli.item_id, self.poha.item_id})

    def test_votable_prefers_non_empty_planned_list(self):
        self.ctx.planner.save_plan(TODAY, {"lunch": [self.dal.item_id]})
        self.assertEqual(self.ctx.planner.votable_ids(TODAY, "lunch"), [self.dal.item_id])
        # Breakfast was left unplanned for the day: catalog fallback
        self.assertEqual(len(self.ctx.planner.votable_ids(TODAY, "breakfast")), 2)

    def test_votable_excludes_inactive_catalog_items_in_fallback(self):
        self.ctx.catalog.set_active(self.poha.item_id, False)
        self.assertEqual(self.ctx.planner.votable_ids(TOMORROW, "breakfast"), [self.idli.item_id])

    def test_votable_drops_dangling_plan_entries(self):
        self.ctx.planner.save_plan(TODAY, {"lunch": [self.dal.item_id, self.rajma.item_id]})
        self.ctx.catalog.delete_item(self.dal.item_id)
        self.assertEqual(self.ctx.planner.votable_ids(TODAY, "lunch"), [self.rajma.item_id])
        self.ctx.catalog.delete_item(self.rajma.item_id)
        self.assertEqual(self.ctx.planner.votable_ids(TODAY, "lunch"), [])

    def test_upcoming_covers_menu_cycle(self):
        self.ctx.settings.save_window(menu_cycle_days=3)
        self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.dal.item_id)
        days = self.ctx.planner.upcoming()
        self.assertEqual([d["date"] for d in days], ["2026-03-02", "2026-03-03", "2026-03-04"])
        self.assertTrue(days[0]["is_today"])
        self.assertIsNone(days[0]["plan"])
        self.assertEqual(days[1]["plan"]["lunch"][0]["id"], self.dal.item_id)

    def test_changes_publish_full_plan_set(self):
        received = []
        self.ctx.bus.subscribe(PLANS_CHANGED, lambda name, payload: received.append(payload))
        self.ctx.planner.add_item_to_plan(TODAY, "lunch", self.dal.item_id)
        self.ctx.planner.add_item_to_plan(TOMORROW, "lunch", self.rajma.item_id)
        self.ctx.planner.clear_plan(TODAY)
        self.assertEqual([p["date"] for p in received], ["2026-03-02", "2026-03-03", "2026-03-02"])
        self.assertEqual([p["date"] for p in received[1]["plans"]], ["2026-03-02", "2026-03-03"])
        self.assertEqual([p["date"] for p in received[2]["plans"]], ["2026-03-03"])


if __name__ == '__main__':
    unittest.main()
