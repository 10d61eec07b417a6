"""In-memory Synthesia metadata document.

The document is kept as a plain ElementTree so that elements, attributes,
comments and processing instructions this package knows nothing about are
written back exactly as they were read. Comments and processing instructions
outside the root element are kept in ``prolog`` / ``epilog``. Typed views
(``SongEntry``, ``GroupEntry``) are built on top of it by the registry and
group tree.
"""

from __future__ import annotations

import copy
import io
import logging
import xml.etree.ElementTree as ET
from typing import BinaryIO, List, Optional

from . import meta_keys as keys
from .errors import FormatError, UnsupportedVersionError

logger = logging.getLogger(__name__)


class _DocumentBuilder:
    """Parser target that keeps top-level comments and PIs the TreeBuilder drops."""

    def __init__(self) -> None:
        self._builder = ET.TreeBuilder(insert_comments=True, insert_pis=True)
        self._depth = 0
        self._seen_root = False
        self.prolog: List[ET.Element] = []
        self.epilog: List[ET.Element] = []

    def start(self, tag, attrs):
        self._depth += 1
        self._seen_root = True
        return self._builder.start(tag, attrs)

    def end(self, tag):
        self._depth -= 1
        return self._builder.end(tag)

    def data(self, data) -> None:
        if self._depth:
            self._builder.data(data)

    def comment(self, text):
        if self._depth:
            return self._builder.comment(text)
        self._top_level(ET.Comment(text))

    def pi(self, target, text=None):
        if self._depth:
            return self._builder.pi(target, text)
        self._top_level(ET.ProcessingInstruction(target, text))

    def close(self) -> ET.Element:
        return self._builder.close()

    def _top_level(self, node: ET.Element) -> None:
        (self.epilog if self._seen_root else self.prolog).append(node)


class MetadataDocument:
    """Owns the element tree and the top-level version contract."""

    def __init__(
        self,
        root: Optional[ET.Element] = None,
        prolog: Optional[List[ET.Element]] = None,
        epilog: Optional[List[ET.Element]] = None,
    ) -> None:
        if root is None:
            root = ET.Element(keys.ROOT, {keys.VERSION: keys.FORMAT_VERSION})
        self.root = root
        self.prolog = list(prolog or [])
        self.epilog = list(epilog or [])

    @classmethod
    def load(cls, channel: BinaryIO) -> "MetadataDocument":
        builder = _DocumentBuilder()
        try:
            tree = ET.parse(channel, parser=ET.XMLParser(target=builder))
        except ET.ParseError as exc:
            raise FormatError(
                f"Stream does not contain a valid Synthesia metadata file: {exc}"
            ) from exc
        root = tree.getroot()
        if root is None or root.tag != keys.ROOT:
            raise FormatError("Stream does not contain a valid Synthesia metadata file.")
        version = root.get(keys.VERSION)
        if version is not None and version != keys.FORMAT_VERSION:
            raise UnsupportedVersionError(version)
        logger.debug("Loaded metadata document (version %s)", version)
        return cls(root, builder.prolog, builder.epilog)

    @property
    def version(self) -> Optional[str]:
        return self.root.get(keys.VERSION)

    def save(
        self,
        channel: BinaryIO,
        *,
        encoding: str = "utf-8",
        xml_declaration: bool = True,
        indent: Optional[str] = None,
    ) -> None:
        root = self.root
        if indent is not None:
            # Indent a copy; the loaded whitespace stays as it was.
            root = copy.deepcopy(self.root)
            ET.indent(root, space=indent)
        newline = "\n".encode(encoding)
        if xml_declaration:
            channel.write(f"<?xml version='1.0' encoding='{encoding}'?>\n".encode(encoding))
        for node in self.prolog:
            self._write_node(channel, node, encoding)
            channel.write(newline)
        self._write_node(channel, root, encoding)
        for node in self.epilog:
            channel.write(newline)
            self._write_node(channel, node, encoding)

    def to_bytes(self, **options) -> bytes:
        buffer = io.BytesIO()
        self.save(buffer, **options)
        return buffer.getvalue()

    def songs_container(self, create: bool = False) -> Optional[ET.Element]:
        return self._container(keys.SONGS, create)

    def groups_container(self, create: bool = False) -> Optional[ET.Element]:
        return self._container(keys.GROUPS, create)

    def _container(self, tag: str, create: bool) -> Optional[ET.Element]:
        element = self.root.find(tag)
        if element is None and create:
            element = ET.SubElement(self.root, tag)
            logger.debug("Created <%s> container", tag)
        return element

    @staticmethod
    def _write_node(channel: BinaryIO, node: ET.Element, encoding: str) -> None:
        ET.ElementTree(node).write(channel, encoding=encoding, xml_declaration=False)
