import io
import unittest

from synthesia_meta.errors import GroupNotFoundError, InvalidArgumentError, InvalidPathError
from synthesia_meta.metadata_file import MetadataFile
from synthesia_meta.models import SongEntry

DUPLICATED = b"""<SynthesiaMetadata Version="1">
  <Groups>
    <Group Name="Warmups">
      <Song UniqueId="s1" />
      <Song UniqueId="s2" />
      <Song UniqueId="s1" />
      <Group Name="Scales">
        <Song UniqueId="s1" />
      </Group>
    </Group>
  </Groups>
</SynthesiaMetadata>
"""


class TestGroupMembership(unittest.TestCase):
    def setUp(self) -> None:
        self.metadata = MetadataFile()
        self.metadata.add_group(["Warmups"])
        self.metadata.add_group(["Warmups", "Scales"])

    def test_add_song_is_deduplicated_per_group(self) -> None:
        self.metadata.add_song_to_group(["Warmups"], "s1")
        self.metadata.add_song_to_group(["Warmups"], "s1")
        self.assertEqual(self.metadata.find_group(["Warmups"]).songs, ["s1"])

    def test_same_song_in_nested_group_is_allowed(self) -> None:
        self.metadata.add_song_to_group(["Warmups"], "s1")
        self.metadata.add_song_to_group(["Warmups", "Scales"], "s1")
        self.assertEqual(self.metadata.find_group(["Warmups", "Scales"]).songs, ["s1"])

    def test_references_are_not_checked_against_registry(self) -> None:
        self.metadata.add_song_to_group(["Warmups"], "not-in-registry")
        self.assertEqual(self.metadata.find_group(["Warmups"]).songs, ["not-in-registry"])
        self.assertIsNone(self.metadata.get_song("not-in-registry"))

    def test_add_song_validation(self) -> None:
        before = self.metadata.to_bytes()
        with self.assertRaises(InvalidArgumentError):
            self.metadata.add_song_to_group(["Warmups"], " ")
        with self.assertRaises(InvalidPathError):
            self.metadata.add_song_to_group([], "s1")
        with self.assertRaises(GroupNotFoundError):
            self.metadata.add_song_to_group(["Missing"], "s1")
        self.assertEqual(self.metadata.to_bytes(), before)

    def test_remove_song_removes_every_direct_reference(self) -> None:
        metadata = MetadataFile.load(io.BytesIO(DUPLICATED))
        metadata.remove_song_from_group(["Warmups"], "s1")
        self.assertEqual(metadata.find_group(["Warmups"]).songs, ["s2"])
        self.assertEqual(metadata.find_group(["Warmups", "Scales"]).songs, ["s1"])

    def test_remove_song_missing_group(self) -> None:
        with self.assertRaises(GroupNotFoundError):
            self.metadata.remove_song_from_group(["Missing"], "s1")

    def test_remove_all_songs_keeps_child_groups(self) -> None:
        metadata = MetadataFile.load(io.BytesIO(DUPLICATED))
        metadata.remove_all_songs_from_group(["Warmups"])
        group = metadata.find_group(["Warmups"])
        self.assertEqual(group.songs, [])
        self.assertEqual([child.name for child in group.groups], ["Scales"])
        self.assertEqual(group.groups[0].songs, ["s1"])

    def test_groups_containing(self) -> None:
        metadata = MetadataFile.load(io.BytesIO(DUPLICATED))
        self.assertEqual(
            metadata.groups_containing("s1"),
            [("Warmups",), ("Warmups", "Scales")],
        )
        self.assertEqual(metadata.groups_containing("s2"), [("Warmups",)])
        self.assertEqual(metadata.groups_containing("s3"), [])
        self.assertEqual(MetadataFile().groups_containing("s1"), [])

    def test_membership_survives_save_and_load(self) -> None:
        self.metadata.add_song(SongEntry(unique_id="s1", title="Scale"))
        self.metadata.add_song_to_group(["Warmups", "Scales"], "s1")
        reloaded = MetadataFile.load(io.BytesIO(self.metadata.to_bytes()))
        self.assertEqual(reloaded.find_group(["Warmups", "Scales"]).songs, ["s1"])
        self.assertEqual(reloaded.get_song("s1").title, "Scale")


if __name__ == "__main__":
    unittest.main()
