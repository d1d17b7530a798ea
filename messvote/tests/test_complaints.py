import unittest

from messvote.tests.helpers import ContextTestMixin
from messvote.utilities.constants import BULK_RESOLVE_RESPONSE
from messvote.utilities.errors import NotFound, ValidationError


class TestComplaintDesk(ContextTestMixin, unittest.TestCase):
    def _submit(self, name="Asha", room=12, text="No hot water", **kwargs):
        return self.ctx.complaints.submit(name, room, kwargs.pop("category", "Water"), text,
                                          kwargs.pop("urgency", "high"), **kwargs)

    def test_submit_stores_pending_sanitized_complaint(self):
        complaint = self._submit(text="<script>x</script> leak")
        stored = self.ctx.complaints.get(complaint.complaint_id)
        self.assertEqual(stored.status, "pending")
        self.assertEqual(stored.room_number, 12)
        self.assertEqual(stored.text, "&lt;script&gt;x&lt;/script&gt; leak")
        self.assertIsNone(stored.response)

    def test_validation_errors_write_nothing(self):
        with self.assertRaises(ValidationError):
            self._submit(name="")
        with self.assertRaises(ValidationError):
            self._submit(text="  ")
        with self.assertRaises(ValidationError):
            self._submit(room=0)
        with self.assertRaises(ValidationError):
            self._submit(room=201)
        with self.assertRaises(ValidationError):
            self._submit(room="twelve")
        self.assertEqual(self.ctx.complaints.list_complaints(), [])

    def test_room_range_is_inclusive(self):
        self._submit(room=1)
        self._submit(room=200)
        self.assertEqual(len(self.ctx.complaints.list_complaints()), 2)

    def test_photo_is_stored_and_removed_with_complaint(self):
        complaint = self._submit(photo=("leak.jpg", b"jpeg-bytes"))
        self.assertTrue(complaint.photo_url.startswith("/media/complaints/"))
        self.assertTrue(self.ctx.blobs.exists(complaint.photo_url))
        self.ctx.complaints.delete(complaint.complaint_id)
        self.assertFalse(self.ctx.blobs.exists(complaint.photo_url))
        with self.assertRaises(NotFound):
            self.ctx.complaints.get(complaint.complaint_id)

    def test_resolve_with_response(self):
        complaint = self._submit()
        self.clock.advance(hours=2)
        updated = self.ctx.complaints.update_status(complaint.complaint_id, "resolved", "Fixed the <heater>")
        self.assertTrue(updated.is_resolved)
        self.assertEqual(updated.response, "Fixed the &lt;heater&gt;")
        self.assertEqual(updated.updated_at.hour, 11)
        with self.assertRaises(ValidationError):
            self.ctx.complaints.update_status(complaint.complaint_id, "closed")
        with self.assertRaises(NotFound):
            self.ctx.complaints.update_status("missing", "resolved")

    def test_filters(self):
        self.clock.advance(days=-8)
        old = self._submit(name="Old")
        self.clock.advance(days=7)
        yesterday = self._submit(name="Yesterday")
        self.clock.advance(days=1)
        today = self._submit(name="Today")
        self.ctx.complaints.update_status(yesterday.complaint_id, "resolved")

        def names(filter_name):
            return [c.name for c in self.ctx.complaints.list_complaints(filter_name)]

        self.assertEqual(names("all"), ["Today", "Yesterday", "Old"])
        self.assertEqual(names("today"), ["Today"])
        self.assertEqual(names("yesterday"), ["Yesterday"])
        self.assertEqual(names("week"), ["Today", "Yesterday"])
        self.assertEqual(names("pending"), ["Today", "Old"])
        self.assertEqual(names("resolved"), ["Yesterday"])
        self.assertEqual(old.status, "pending")
        self.assertEqual(today.status, "pending")
        with self.assertRaises(ValidationError):
            self.ctx.complaints.list_complaints("month")

    def test_student_sees_latest_five(self):
        for i in range(7):
            self.clock.advance(minutes=1)
            self._submit(name="asha", text=f"issue {i}")
        self._submit(name="Bilal")
        mine = self.ctx.complaints.complaints_for_student("Asha")
        self.assertEqual(len(mine), 5)
        self.assertEqual(mine[0].text, "issue 6")
        self.assertEqual(self.ctx.complaints.complaints_for_student(""), [])

    def test_bulk_resolve(self):
        first = self._submit()
        self._submit(name="Bilal")
        self.ctx.complaints.update_status(first.complaint_id, "resolved", "done")
        self.assertEqual(self.ctx.complaints.bulk_resolve(), 1)
        complaints = self.ctx.complaints.list_complaints()
        self.assertTrue(all(c.is_resolved for c in complaints))
        bilal = [c for c in complaints if c.name == "Bilal"][0]
        self.assertEqual(bilal.response, BULK_RESOLVE_RESPONSE)
        self.assertEqual(self.ctx.complaints.bulk_resolve(), 0)

    def test_export_csv(self):
        self._submit(text='Tap says "drip"')
        content, filename = self.ctx.complaints.export_csv("all")
        lines = content.strip().split("\n")
        self.assertEqual(lines[0], '"Name","Room","Category","Urgency","Status","Complaint","Date","Response"')
        self.assertTrue(lines[1].startswith('"Asha",12,"Water","high","pending",'))
        self.assertIn('&quot;drip&quot;', lines[1])
        self.assertEqual(filename, "complaints_all_2026-03-02.csv")

    def test_stats(self):
        first = self._submit()
        self._submit()
        self.ctx.complaints.update_status(first.complaint_id, "resolved")
        self.assertEqual(self.ctx.complaints.stats(), {"total": 2, "pending": 1, "resolved": 1, "today": 2})


if __name__ == '__main__':
    unittest.main()
