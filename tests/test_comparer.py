"""Tests for inventory comparison."""

import pytest

from dircompare.core.errors import DuplicatePathError
from dircompare.core.folder.comparer import (
    CompareOptions,
    FolderComparer,
    compare_folders,
    compare_inventories,
)
from dircompare.core.folder.scanner import scan_directory
from dircompare.core.models import (
    ComparisonResult,
    Inventory,
    ScannedFile,
    UnreadablePolicy,
)


INVALID_UTF8 = b"\xff\xfe\xfa not text"


def _results(inventory):
    return {f.path_key: f.comparison_result for f in inventory}


def _scan_pair(root_a, root_b):
    return scan_directory(root_a), scan_directory(root_b)


class TestScenarios:
    """End-to-end classification of small trees."""

    def test_removed_added_and_unchanged(self, scenario_roots):
        inventory_a, inventory_b = _scan_pair(*scenario_roots)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_a) == {
            "x.txt": ComparisonResult.REMOVED,
            "y.txt": ComparisonResult.BASELINE,
        }
        assert _results(inventory_b) == {
            "y.txt": ComparisonResult.BASELINE,
            "z.txt": ComparisonResult.ADDED,
        }

    def test_modified_reported_on_b_only(self, make_tree):
        root_a = make_tree("a", {"a.txt": "v1"})
        root_b = make_tree("b", {"a.txt": "v2"})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_a) == {"a.txt": ComparisonResult.BASELINE}
        assert _results(inventory_b) == {"a.txt": ComparisonResult.MODIFIED}

    def test_nested_paths_join_by_relative_path(self, mixed_roots):
        inventory_a, inventory_b = _scan_pair(*mixed_roots)

        summary = compare_inventories(inventory_a, inventory_b)

        results_b = {str(f.relative_path.as_posix()): f.comparison_result for f in inventory_b}
        assert results_b["src/main.py"] == ComparisonResult.BASELINE
        assert results_b["edit.txt"] == ComparisonResult.MODIFIED
        assert results_b["new.txt"] == ComparisonResult.ADDED
        assert summary.added_count == 1
        assert summary.removed_count == 1
        assert summary.modified_count == 1
        # keep.txt and src/main.py on both sides, edit.txt on A
        assert summary.baseline_count == 5

    def test_every_record_classified(self, mixed_roots):
        inventory_a, inventory_b = _scan_pair(*mixed_roots)

        compare_inventories(inventory_a, inventory_b)

        assert all(f.comparison_result is not None for f in inventory_a)
        assert all(f.comparison_result is not None for f in inventory_b)

    def test_renamed_is_never_produced(self, make_tree):
        root_a = make_tree("a", {"old_name.txt": "same body"})
        root_b = make_tree("b", {"new_name.txt": "same body"})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_a) == {"old_name.txt": ComparisonResult.REMOVED}
        assert _results(inventory_b) == {"new_name.txt": ComparisonResult.ADDED}

    def test_paths_are_case_sensitive(self, make_tree):
        root_a = make_tree("a", {"readme.txt": "x"})
        root_b = make_tree("b", {"README.txt": "x"})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_a) == {"readme.txt": ComparisonResult.REMOVED}
        assert _results(inventory_b) == {"README.txt": ComparisonResult.ADDED}

    def test_compare_folders_scans_and_compares(self, scenario_roots):
        inventory_a, inventory_b, summary = compare_folders(*scenario_roots)

        assert len(inventory_a) == 2
        assert len(inventory_b) == 2
        assert summary.added_count == 1
        assert summary.removed_count == 1
        assert str(summary) == "2 baseline, 1 added, 1 removed, 0 modified"


class TestContentEquality:
    """Exact content comparison."""

    def test_line_endings_are_not_normalized(self, make_tree):
        root_a = make_tree("a", {"f.txt": "line\n"})
        root_b = make_tree("b", {"f.txt": "line\r\n"})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_b) == {"f.txt": ComparisonResult.MODIFIED}

    def test_trailing_whitespace_counts(self, make_tree):
        root_a = make_tree("a", {"f.txt": "value"})
        root_b = make_tree("b", {"f.txt": "value "})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_b) == {"f.txt": ComparisonResult.MODIFIED}

    def test_empty_files_are_equal(self, make_tree):
        root_a = make_tree("a", {"empty.txt": ""})
        root_b = make_tree("b", {"empty.txt": ""})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_b) == {"empty.txt": ComparisonResult.BASELINE}


class TestUnreadableContents:
    """Files that cannot be loaded as text."""

    def test_both_unreadable_equal_by_default(self, make_tree):
        # Different bytes, both invalid text: the default policy cannot tell them apart
        root_a = make_tree("a", {"blob.bin": INVALID_UTF8})
        root_b = make_tree("b", {"blob.bin": INVALID_UTF8 + b"\xff"})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_b) == {"blob.bin": ComparisonResult.BASELINE}

    def test_both_unreadable_modified_policy(self, make_tree):
        root_a = make_tree("a", {"blob.bin": INVALID_UTF8})
        root_b = make_tree("b", {"blob.bin": INVALID_UTF8})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(
            inventory_a, inventory_b,
            CompareOptions(unreadable_policy=UnreadablePolicy.MODIFIED),
        )

        assert _results(inventory_b) == {"blob.bin": ComparisonResult.MODIFIED}
        assert _results(inventory_a) == {"blob.bin": ComparisonResult.BASELINE}

    def test_one_side_unreadable_is_modified(self, make_tree):
        root_a = make_tree("a", {"f.txt": "text"})
        root_b = make_tree("b", {"f.txt": INVALID_UTF8})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_b) == {"f.txt": ComparisonResult.MODIFIED}

    def test_file_deleted_after_scan_treated_as_unreadable(self, make_tree):
        root_a = make_tree("a", {"f.txt": "text"})
        root_b = make_tree("b", {"f.txt": "text"})
        inventory_a, inventory_b = _scan_pair(root_a, root_b)
        (root_b / "f.txt").unlink()

        compare_inventories(inventory_a, inventory_b)

        assert _results(inventory_b) == {"f.txt": ComparisonResult.MODIFIED}


class TestMemoryAndIdentity:
    """Lazy loading and release of contents."""

    def test_contents_released_after_comparison(self, mixed_roots):
        inventory_a, inventory_b = _scan_pair(*mixed_roots)
        before = [(f.name, f.relative_path, f.size_bytes) for f in inventory_b]

        compare_inventories(inventory_a, inventory_b)

        assert all(f.contents is None for f in inventory_a)
        assert all(f.contents is None for f in inventory_b)
        assert [(f.name, f.relative_path, f.size_bytes) for f in inventory_b] == before

    def test_only_shared_paths_are_loaded(self, mixed_roots, monkeypatch):
        inventory_a, inventory_b = _scan_pair(*mixed_roots)
        loaded = []
        original = ScannedFile.load_contents

        def tracking_load(self):
            loaded.append(self.path_key)
            return original(self)

        monkeypatch.setattr(ScannedFile, "load_contents", tracking_load)

        compare_inventories(inventory_a, inventory_b)

        assert "gone.txt" not in loaded
        assert "new.txt" not in loaded
        # Each shared path loaded once per side
        assert sorted(loaded).count("edit.txt") == 2

    def test_order_and_length_preserved(self, mixed_roots):
        inventory_a, inventory_b = _scan_pair(*mixed_roots)
        order_a = [f.path_key for f in inventory_a]
        order_b = [f.path_key for f in inventory_b]

        compare_inventories(inventory_a, inventory_b)

        assert [f.path_key for f in inventory_a] == order_a
        assert [f.path_key for f in inventory_b] == order_b


class TestIdempotence:
    """Repeated comparison overwrites instead of folding."""

    def test_compare_twice_gives_same_result(self, mixed_roots):
        inventory_a, inventory_b = _scan_pair(*mixed_roots)
        comparer = FolderComparer()

        first = comparer.compare(inventory_a, inventory_b)
        results_a, results_b = _results(inventory_a), _results(inventory_b)
        second = comparer.compare(inventory_a, inventory_b)

        assert _results(inventory_a) == results_a
        assert _results(inventory_b) == results_b
        assert first == second

    def test_stale_classification_is_overwritten(self, scenario_roots):
        inventory_a, inventory_b = _scan_pair(*scenario_roots)
        for f in list(inventory_a) + list(inventory_b):
            f.set_comparison_result(ComparisonResult.RENAMED)

        compare_inventories(inventory_a, inventory_b)

        assert ComparisonResult.RENAMED not in _results(inventory_a).values()
        assert ComparisonResult.RENAMED not in _results(inventory_b).values()


class TestDuplicatePaths:
    """Duplicate relative paths are a scan anomaly."""

    def test_duplicate_path_in_a_is_rejected(self, make_tree):
        root = make_tree("a", {"dup.txt": "x"})
        record = scan_directory(root)[0]
        twin = ScannedFile.from_path(record.full_path, root.resolve(), record.size_bytes)
        inventory_a = Inventory(root_path=root.resolve(), files=[record, twin])

        with pytest.raises(DuplicatePathError):
            compare_inventories(inventory_a, Inventory(root_path=root.resolve()))

    def test_duplicate_error_is_an_assertion(self):
        assert issubclass(DuplicatePathError, AssertionError)
