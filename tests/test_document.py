from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np
import pytest
from PIL import Image

from level_baker.document import GROUP_POSITIONS, Document, Group, locate_group
from level_baker.bake import COLLISIONS_FILE_NAME
from level_baker.config import LevelConfig
from level_baker.document.psd import document_from_psd, read_document
from level_baker.errors import DocumentReadError, MissingGroupError
from level_baker.job import bake_document
from level_baker.mask import CollisionMask
from level_baker.types import AreaType, GroupRole
from tests.test_utils import make_document


class StubNode:
    """Just enough of a ``psd_tools`` layer for the reader."""

    def __init__(
        self,
        name: str,
        layer_id: int = 0,
        visible: bool = True,
        image: Optional[Image.Image] = None,
        left: int = 0,
        top: int = 0,
        children: Optional[List["StubNode"]] = None,
    ) -> None:
        self.name = name
        self.layer_id = layer_id
        self.visible = visible
        self.left = left
        self.top = top
        self._image = image
        self._children = children

    def is_group(self) -> bool:
        return self._children is not None

    def topil(self) -> Optional[Image.Image]:
        return self._image

    def __iter__(self) -> Iterator["StubNode"]:
        return iter(self._children or [])

    def descendants(self) -> Iterator["StubNode"]:
        for child in self:
            yield child
            if child.is_group():
                yield from child.descendants()


class StubPSD(StubNode):
    def __init__(self, width: int, height: int, children: List[StubNode]) -> None:
        super().__init__("root", children=children)
        self.width = width
        self.height = height


def solid(width: int, height: int, rgba: tuple) -> Image.Image:
    return Image.new("RGBA", (width, height), rgba)


def test_locate_group_by_fixed_position() -> None:
    document = make_document(2, 2)
    assert locate_group(document, GroupRole.WALLS) == 10
    assert locate_group(document, GroupRole.AREAS) == 20
    assert locate_group(document, GroupRole.BACKGROUND) == 30
    assert GROUP_POSITIONS[GroupRole.BACKGROUND] == 2


def test_locate_missing_group() -> None:
    document = Document(width=1, height=1, groups=[Group(1, "walls"), Group(2, "areas")])
    assert locate_group(document, GroupRole.AREAS) == 2
    with pytest.raises(MissingGroupError, match="background"):
        locate_group(document, GroupRole.BACKGROUND)


def test_get_group_sub_layers_unknown_id() -> None:
    with pytest.raises(KeyError):
        make_document(1, 1).get_group_sub_layers(99)


def test_document_from_psd_groups_and_layers() -> None:
    psd = StubPSD(
        3,
        3,
        [
            StubNode("loose", image=solid(3, 3, (1, 1, 1, 255))),
            StubNode(
                "walls",
                layer_id=5,
                children=[
                    StubNode("w0", visible=True, image=solid(1, 1, (9, 9, 9, 255)), left=2, top=2),
                    StubNode(
                        "nested",
                        children=[StubNode("w1", visible=False, image=None)],
                    ),
                ],
            ),
            StubNode("areas", layer_id=6, children=[]),
            StubNode("background", layer_id=7, children=[]),
        ],
    )
    document = document_from_psd(psd)
    assert (document.width, document.height) == (3, 3)
    assert document.group_ids_in_order() == [0, 1, 2]

    layers = document.get_group_sub_layers(0)
    assert [layer.name for layer in layers] == ["w0", "w1"]
    # The raw flag is the complement of the decoded visibility
    assert [layer.visible for layer in layers] == [False, True]
    assert layers[0].pixels.shape == (3, 3, 4)
    assert tuple(layers[0].pixels[2, 2]) == (9, 9, 9, 255)
    assert layers[0].pixels[..., 3].sum() == 255
    assert not layers[1].pixels.any()


def test_layer_offsets_are_clipped_to_document() -> None:
    image = Image.fromarray(np.arange(16, dtype=np.uint8).reshape(2, 2, 4))
    psd = StubPSD(
        3, 3, [StubNode("g", children=[StubNode("edge", image=image, left=-1, top=2)])]
    )
    pixels = document_from_psd(psd).groups[0].layers[0].pixels
    # Only the top-right source pixel lands inside, at (0, 2)
    assert tuple(pixels[2, 0]) == (4, 5, 6, 7)
    assert pixels.sum() == 4 + 5 + 6 + 7


def test_layers_entirely_outside_are_blank() -> None:
    psd = StubPSD(
        2,
        2,
        [StubNode("g", children=[StubNode("far", image=solid(2, 2, (1, 2, 3, 4)), left=5)])],
    )
    assert not document_from_psd(psd).groups[0].layers[0].pixels.any()


def test_non_rgba_layers_are_converted() -> None:
    psd = StubPSD(
        1, 1, [StubNode("g", children=[StubNode("rgb", image=Image.new("RGB", (1, 1), (3, 4, 5)))])]
    )
    assert tuple(document_from_psd(psd).groups[0].layers[0].pixels[0, 0]) == (3, 4, 5, 255)


def test_read_missing_document(tmp_path: Path) -> None:
    with pytest.raises(DocumentReadError):
        read_document(tmp_path / "nope.psd")


def test_read_garbage_document(tmp_path: Path) -> None:
    path = tmp_path / "garbage.psd"
    path.write_bytes(b"not a photoshop file")
    with pytest.raises(DocumentReadError, match="garbage.psd"):
        read_document(path)


def unnumbered_psd() -> StubPSD:
    """Three groups that all report ``layer_id`` -1, as files without ids do."""
    return StubPSD(
        4,
        4,
        [
            StubNode(
                "walls",
                layer_id=-1,
                children=[
                    StubNode("wall", visible=True, image=solid(1, 1, (0, 0, 0, 255)), left=3, top=3)
                ],
            ),
            StubNode(
                "areas",
                layer_id=-1,
                children=[StubNode("Kitchen", visible=False, image=solid(4, 4, (255, 255, 255, 255)))],
            ),
            StubNode(
                "background",
                layer_id=-1,
                children=[StubNode("floor", visible=True, image=solid(4, 4, (10, 20, 30, 255)))],
            ),
        ],
    )


def test_groups_sharing_layer_ids_stay_distinct() -> None:
    document = document_from_psd(unnumbered_psd())
    assert len(set(document.group_ids_in_order())) == 3

    def names(role: GroupRole) -> List[str]:
        return [layer.name for layer in document.get_group_sub_layers(locate_group(document, role))]

    assert names(GroupRole.WALLS) == ["wall"]
    assert names(GroupRole.AREAS) == ["Kitchen"]
    assert names(GroupRole.BACKGROUND) == ["floor"]


def test_unnumbered_groups_bake_their_own_layers(tmp_path: Path) -> None:
    report = bake_document(
        tmp_path / "cellar.psd",
        {"cellar": LevelConfig(1, 1)},
        reader=lambda _: document_from_psd(unnumbered_psd()),
    )
    assert report.ok, report.errors

    mask = CollisionMask.open(tmp_path / "cellar" / COLLISIONS_FILE_NAME)
    assert mask.is_blocked(3, 3)
    cell = mask.area_at(0, 0)
    assert cell.rank == 1
    assert cell.area_type is AreaType.KITCHEN
