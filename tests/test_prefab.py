import itertools
import struct

import pytest

from voxelworld.block import Block, BlockType
from voxelworld.prefab import PlacementType, Prefab, PrefabManager


def test_add_appends_in_order():
    prefab = Prefab()
    prefab.add((1, 2, 3), Block(BlockType.STONE))
    prefab.add((-1, 0, 4), Block(BlockType.SAND))
    assert prefab.blocks == [
        ((1, 2, 3), Block(BlockType.STONE)),
        ((-1, 0, 4), Block(BlockType.SAND)),
    ]


def test_empty_prefab_bytes():
    assert Prefab().to_bytes() == bytes(16)


def test_round_trip_keeps_blocks_and_name():
    prefab = Prefab(PlacementType.NO_OVERWRITING, name="hut")
    prefab.add((0, 0, 0), Block(BlockType.DIRT))
    prefab.add((-1, 5, 2), Block(BlockType.OAK_LEAVES))
    loaded = Prefab.from_bytes(prefab.to_bytes())
    assert loaded.blocks == prefab.blocks
    assert loaded.name == "hut"
    assert loaded.type is PlacementType.NO_RESTRICTIONS


def test_truncated_data_raises():
    prefab = Prefab(name="x")
    prefab.add((1, 2, 3), Block(BlockType.STONE))
    data = prefab.to_bytes()
    with pytest.raises(ValueError):
        Prefab.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        Prefab.from_bytes(data[:10])


def test_unknown_block_type_raises():
    data = struct.pack("<Q", 1) + struct.pack("<iiiHB", 0, 0, 0, 999, 0) + struct.pack("<Q", 0)
    with pytest.raises(ValueError):
        Prefab.from_bytes(data)


def test_init_prefabs_builds_builtins(tmp_path):
    manager = PrefabManager(tmp_path)
    manager.init_prefabs()
    tree = manager.prefabs["OakTree"]
    big = manager.prefabs["OakTreeBig"]
    error = manager.prefabs["Error"]
    assert tree.name == "Oak Tree" and tree.type is PlacementType.NO_RESTRICTIONS
    assert big.name == "Oak Tree Big" and big.type is PlacementType.PRIORITY_REQUIRED
    assert error.type is PlacementType.NO_OVERWRITING
    wood = {pos for pos, block in tree.blocks if block.type is BlockType.OAK_WOOD}
    assert wood == {(0, i, 0) for i in range(5)}
    assert len({pos for pos, _ in big.blocks}) == len(big.blocks)
    assert {pos for pos, _ in error.blocks} == set(itertools.product(range(3), repeat=3))
    assert all(block.type is BlockType.ERROR for _, block in error.blocks)


def test_init_prefabs_saves_error_file(tmp_path):
    manager = PrefabManager(tmp_path)
    manager.init_prefabs()
    assert (tmp_path / "Error.bin").exists()
    loaded = manager.load_prefab_from_file("Error")
    assert loaded.blocks == manager.prefabs["Error"].blocks
    assert loaded.name == "Error"


def test_missing_file_gives_error_prefab(tmp_path):
    manager = PrefabManager(tmp_path)
    manager.init_prefabs()
    fallback = manager.load_prefab_from_file("nothing-here")
    assert fallback.blocks == manager.prefabs["Error"].blocks
    assert fallback is not manager.prefabs["Error"]


def test_missing_file_without_init_is_empty(tmp_path):
    manager = PrefabManager(tmp_path)
    fallback = manager.load_prefab_from_file("nothing-here")
    assert fallback.blocks == []
    assert "Error" in manager.prefabs


def test_get_prefab_loads_lazily_and_caches(tmp_path):
    manager = PrefabManager(tmp_path)
    prefab = Prefab(name="pillar")
    prefab.add((0, 0, 0), Block(BlockType.METAL))
    prefab.add((0, 1, 0), Block(BlockType.METAL))
    assert manager.save_prefab_to_file(prefab, "pillar") is True
    first = manager.get_prefab("pillar")
    assert first.blocks == prefab.blocks
    assert first.name == "pillar"
    assert manager.get_prefab("pillar") is first


def test_save_to_missing_directory_fails(tmp_path):
    manager = PrefabManager(tmp_path / "absent")
    assert manager.save_prefab_to_file(Prefab(name="x"), "x") is False
    assert not (tmp_path / "absent" / "x.bin").exists()