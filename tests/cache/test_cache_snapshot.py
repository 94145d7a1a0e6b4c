import unittest

from gcsdrive.cache import BucketSnapshot
from gcsdrive.models import ObjectInfo, ObjectPage


def _page(*names, token=None) -> ObjectPage:
    return ObjectPage(items=[ObjectInfo(name=n, bucket="b") for n in names], next_page_token=token)


class TestBucketSnapshot(unittest.TestCase):
    def test_nested_object_records_every_ancestor_with_children(self) -> None:
        snap = BucketSnapshot.from_page(_page("a/b/c.txt"))
        self.assertEqual(snap.prefix_has_children, {"a/b": True, "a": True})
        self.assertFalse(snap.is_truncated)

    def test_root_object_records_no_prefix(self) -> None:
        snap = BucketSnapshot.from_page(_page("top.txt"))
        self.assertEqual(snap.prefix_has_children, {})
        self.assertTrue(snap.knows_object("top.txt"))

    def test_placeholder_alone_has_no_children(self) -> None:
        snap = BucketSnapshot.from_page(_page("a/"))
        self.assertEqual(snap.prefix_has_children, {"a": False})

    def test_nested_placeholder_gives_parent_children(self) -> None:
        snap = BucketSnapshot.from_page(_page("a/b/"))
        self.assertEqual(snap.prefix_has_children, {"a/b": False, "a": True})

    def test_flags_are_or_ed_in_either_order(self) -> None:
        first = BucketSnapshot.from_page(_page("a/", "a/x.txt"))
        second = BucketSnapshot.from_page(_page("a/x.txt", "a/"))
        self.assertTrue(first.prefix_children_flag("a"))
        self.assertTrue(second.prefix_children_flag("a"))

    def test_next_page_token_marks_truncated(self) -> None:
        snap = BucketSnapshot.from_page(_page("x", token="t"))
        self.assertTrue(snap.is_truncated)

    def test_negative_markers(self) -> None:
        snap = BucketSnapshot()
        snap.mark_missing("gone")
        self.assertTrue(snap.knows_object("gone"))
        self.assertIsNone(snap.get_object("gone"))
        self.assertEqual(snap.real_object_count(), 0)

        snap.put_object(ObjectInfo(name="gone", bucket="b"))
        self.assertEqual(snap.real_object_count(), 1)

    def test_equality_ignores_refresh_time(self) -> None:
        a = BucketSnapshot.from_page(_page("a/b.txt"), refreshed_at=1.0)
        b = BucketSnapshot.from_page(_page("a/b.txt"), refreshed_at=2.0)
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()
