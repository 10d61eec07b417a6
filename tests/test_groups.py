import io
import unittest

from synthesia_meta.errors import (
    GroupNotFoundError,
    InvalidArgumentError,
    InvalidPathError,
    MissingParentError,
)
from synthesia_meta.groups import disambiguate_name, validate_path
from synthesia_meta.metadata_file import MetadataFile
from synthesia_meta.models import GroupEntry


def child_names(metadata: MetadataFile, path=()) -> list:
    if path:
        return [group.name for group in metadata.find_group(path).groups]
    return [group.name for group in metadata.groups]


def build(*paths) -> MetadataFile:
    metadata = MetadataFile()
    for path in paths:
        metadata.add_group(path)
    return metadata


class TestPaths(unittest.TestCase):
    def test_validate_path(self) -> None:
        self.assertEqual(validate_path(["A", "B"]), ("A", "B"))
        with self.assertRaises(InvalidPathError):
            validate_path([])
        with self.assertRaises(InvalidPathError):
            validate_path(["A", ""])
        with self.assertRaises(InvalidPathError):
            validate_path(["   "])

    def test_disambiguate_rejects_bad_input(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            disambiguate_name(None, "A")
        metadata = build(["A"])
        with self.assertRaises(InvalidArgumentError):
            disambiguate_name(metadata.document.groups_container(), " ")


class TestGroupTree(unittest.TestCase):
    def test_add_top_level_group_on_empty_document(self) -> None:
        metadata = MetadataFile()
        self.assertEqual(metadata.add_group(["Classical"]), "Classical")
        self.assertIsNotNone(metadata.document.groups_container())
        self.assertEqual(child_names(metadata), ["Classical"])

    def test_disambiguation_suffixes(self) -> None:
        metadata = build(["Songs"], ["Songs", "Intro"])
        self.assertEqual(metadata.add_group(["Songs", "Intro"]), "Intro 2")
        self.assertEqual(metadata.add_group(["Songs", "Intro"]), "Intro 3")
        self.assertEqual(child_names(metadata, ["Songs"]), ["Intro", "Intro 2", "Intro 3"])

    def test_same_name_allowed_under_different_parents(self) -> None:
        metadata = build(["A"], ["B"])
        self.assertEqual(metadata.add_group(["A", "X"]), "X")
        self.assertEqual(metadata.add_group(["B", "X"]), "X")

    def test_add_requires_parent(self) -> None:
        metadata = build(["A"])
        before = metadata.to_bytes()
        with self.assertRaises(MissingParentError):
            metadata.add_group(["A", "Missing", "C"])
        self.assertEqual(metadata.to_bytes(), before)

    def test_add_validates_path(self) -> None:
        metadata = MetadataFile()
        with self.assertRaises(InvalidPathError):
            metadata.add_group([])
        self.assertIsNone(metadata.document.groups_container())

    def test_resolution_misses_report_none(self) -> None:
        metadata = build(["A"])
        self.assertIsNone(metadata.groups.resolve(["A", "B"]))
        self.assertIsNone(metadata.groups.resolve([]))
        self.assertIsNone(MetadataFile().groups.resolve(["A"]))

    def test_remove_missing_path_is_no_op(self) -> None:
        metadata = build(["A"])
        before = metadata.to_bytes()
        metadata.remove_group(["A", "B"])
        self.assertEqual(metadata.to_bytes(), before)

    def test_remove_validates_path(self) -> None:
        with self.assertRaises(InvalidPathError):
            build(["A"]).remove_group([])

    def test_remove_detaches_subtree(self) -> None:
        metadata = build(["A"], ["A", "B"], ["A", "B", "C"], ["D"])
        metadata.remove_group(["A", "B"])
        self.assertEqual(child_names(metadata, ["A"]), [])
        self.assertIsNone(metadata.groups.resolve(["A", "B", "C"]))
        self.assertEqual(child_names(metadata), ["A", "D"])

    def test_rename(self) -> None:
        metadata = build(["A"], ["B"])
        self.assertEqual(metadata.rename_group(["A"], "C"), "C")
        self.assertEqual(child_names(metadata), ["C", "B"])

    def test_rename_to_same_name_is_no_op(self) -> None:
        metadata = build(["A"])
        before = metadata.to_bytes()
        self.assertEqual(metadata.rename_group(["A"], "A"), "A")
        self.assertEqual(metadata.to_bytes(), before)

    def test_rename_disambiguates_against_siblings(self) -> None:
        metadata = build(["A"], ["B"], ["A", "B"])
        self.assertEqual(metadata.rename_group(["A"], "B"), "B 2")
        self.assertEqual(metadata.rename_group(["B 2", "B"], "Other"), "Other")
        self.assertEqual(child_names(metadata), ["B 2", "B"])

    def test_rename_missing_group(self) -> None:
        with self.assertRaises(GroupNotFoundError):
            build(["A"]).rename_group(["Z"], "Y")

    def test_rename_to_blank_name(self) -> None:
        metadata = build(["A"])
        with self.assertRaises(InvalidArgumentError):
            metadata.rename_group(["A"], "")
        self.assertEqual(child_names(metadata), ["A"])

    def test_swap_adjacent(self) -> None:
        metadata = build(["A"], ["B"], ["C"])
        metadata.swap_groups([], "A", "B")
        self.assertEqual(child_names(metadata), ["B", "A", "C"])

    def test_swap_non_adjacent_nested(self) -> None:
        metadata = build(["P"], ["P", "A"], ["P", "B"], ["P", "C"])
        metadata.add_song_to_group(["P", "A"], "s1")
        metadata.swap_groups(["P"], "C", "A")
        self.assertEqual(child_names(metadata, ["P"]), ["C", "B", "A"])
        self.assertEqual(metadata.find_group(["P", "A"]).songs, ["s1"])

    def test_swap_with_itself_is_no_op(self) -> None:
        metadata = build(["A"], ["B"])
        metadata.swap_groups([], "A", "A")
        self.assertEqual(child_names(metadata), ["A", "B"])

    def test_swap_missing_sibling(self) -> None:
        metadata = build(["A"], ["B"])
        before = metadata.to_bytes()
        with self.assertRaises(GroupNotFoundError):
            metadata.swap_groups([], "A", "Z")
        self.assertEqual(metadata.to_bytes(), before)

    def test_swap_does_not_mutate_parent_path(self) -> None:
        metadata = build(["P"], ["P", "A"], ["P", "B"])
        parent = ["P"]
        metadata.swap_groups(parent, "A", "B")
        self.assertEqual(parent, ["P"])

    def test_swap_keeps_whitespace_layout(self) -> None:
        source = (
            b'<SynthesiaMetadata Version="1">\n'
            b"  <Groups>\n"
            b'    <Group Name="A" />\n'
            b"    <!-- between -->\n"
            b'    <Group Name="B" />\n'
            b"  </Groups>\n"
            b"</SynthesiaMetadata>"
        )
        metadata = MetadataFile.load(io.BytesIO(source))
        metadata.swap_groups([], "A", "B")
        expected = source.replace(b'Name="A"', b'Name="TMP"').replace(b'Name="B"', b'Name="A"').replace(
            b'Name="TMP"', b'Name="B"'
        )
        self.assertEqual(metadata.to_bytes(xml_declaration=False), expected)

    def test_groups_are_materialized_recursively(self) -> None:
        metadata = build(["A"], ["A", "B"], ["C"])
        metadata.add_song_to_group(["A", "B"], "s1")
        metadata.add_song_to_group(["A"], "s2")
        expected = [
            GroupEntry(name="A", songs=["s2"], groups=[GroupEntry(name="B", songs=["s1"])]),
            GroupEntry(name="C"),
        ]
        self.assertEqual(list(metadata.groups), expected)
        self.assertEqual(list(metadata.groups), expected)

    def test_first_matching_sibling_wins(self) -> None:
        metadata = MetadataFile.load(
            io.BytesIO(
                b'<SynthesiaMetadata Version="1"><Groups>'
                b'<Group Name="A"><Song UniqueId="first" /></Group>'
                b'<Group Name="A"><Song UniqueId="second" /></Group>'
                b"</Groups></SynthesiaMetadata>"
            )
        )
        self.assertEqual(metadata.find_group(["A"]).songs, ["first"])

    def test_unknown_children_are_ignored_by_views(self) -> None:
        metadata = MetadataFile.load(
            io.BytesIO(
                b'<SynthesiaMetadata Version="1"><Groups>'
                b'<Group Name="A"><!-- note --><Folder Name="B" /><Song /></Group>'
                b"</Groups></SynthesiaMetadata>"
            )
        )
        self.assertEqual(list(metadata.groups), [GroupEntry(name="A", songs=[None])])
        self.assertIsNone(metadata.groups.resolve(["A", "B"]))


if __name__ == "__main__":
    unittest.main()
