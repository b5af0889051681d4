import pytest

from voxelworld.block import Block, BlockType
from voxelworld.light import Light
from voxelworld.manager import ChunkManager
from voxelworld.world import VoxelWorld

CENTER = (48, 48, 48)


def _setup(dim=(1, 1, 1)):
    world = VoxelWorld(dim)
    return world, ChunkManager(world)


def test_light_falls_off_one_level_per_block():
    world, manager = _setup()
    modified = manager.propagate_light_add(CENTER, Light.from_channels(15, 0, 0, 0))
    levels = [world.get_block((48 + d, 48, 48)).light.r for d in range(16)]
    assert levels[0] == 15
    assert all(a - b == 1 for a, b in zip(levels, levels[1:]))
    assert set(modified) == {world.get_chunk((1, 1, 1))}


def test_light_channels_are_independent():
    world, manager = _setup()
    manager.propagate_light_add(CENTER, Light.from_channels(15, 0, 0, 0))
    light = world.get_block((50, 48, 48)).light
    assert light.g == 0 and light.b == 0 and light.s == 0
    assert light.r > 0


def test_light_does_not_enter_opaque_blocks():
    world, manager = _setup()
    world.set_block_type((49, 48, 48), BlockType.STONE)
    manager.propagate_light_add(CENTER, Light.from_channels(15, 0, 0, 0))
    assert world.get_block((49, 48, 48)).light.r == 0
    assert world.get_block((47, 48, 48)).light.r > 0


def test_remove_clears_light():
    world, manager = _setup()
    manager.propagate_light_add(CENTER, Light.from_channels(15, 0, 0, 0))
    modified = manager.propagate_light_remove(CENTER)
    assert sum(world.get_block((x, 48, 48)).light.r for x in range(32, 64)) == 0
    assert sum(world.get_block((48, y, 48)).light.r for y in range(32, 64)) == 0
    assert world.get_chunk((1, 1, 1)) in modified


def test_remove_keeps_other_light():
    world, manager = _setup()
    manager.propagate_light_add((40, 48, 48), Light.from_channels(15, 0, 0, 0))
    manager.propagate_light_add((56, 48, 48), Light.from_channels(15, 0, 0, 0))
    manager.propagate_light_remove((40, 48, 48))
    assert world.get_block((56, 48, 48)).light.r == 15
    assert world.get_block((40, 48, 48)).light.r < 15
    between = [world.get_block((x, 48, 48)).light.r for x in range(49, 56)]
    assert between == sorted(between)


def test_update_block_places_emitter_and_lights_around():
    world, manager = _setup()
    manager.update_block(CENTER, Block(BlockType.R_LIGHT))
    placed = world.get_block(CENTER)
    assert placed.type is BlockType.R_LIGHT
    assert placed.light.channels() == Block(BlockType.R_LIGHT).emittance
    neighbour = world.get_block((48, 49, 48)).light.r
    assert 0 < neighbour < placed.light.r


def test_update_block_meshes_chunk():
    world, manager = _setup()
    manager.update_block(CENTER, Block(BlockType.STONE))
    chunk = world.get_chunk((1, 1, 1))
    assert chunk in manager.update()
    mesh = manager.mesh_for(chunk)
    assert mesh.quad_count == 6
    assert mesh.buffer is not None
    assert len(mesh.buffer) == 4 + 2 * mesh.quad_count


def test_update_block_creates_missing_chunk():
    world, manager = _setup()
    assert world.get_chunk((0, 0, 0)) is None
    manager.update_block((1, 1, 1), Block(BlockType.STONE))
    created = world.get_chunk((0, 0, 0))
    assert created is not None
    assert created.block_type_at((1, 1, 1)) is BlockType.STONE


def test_update_block_outside_grid_raises():
    _, manager = _setup()
    with pytest.raises(IndexError):
        manager.update_block((200, 200, 200), Block(BlockType.STONE))


def test_update_block_cheap_does_not_mesh():
    world, manager = _setup()
    manager.update_block_cheap(CENTER, Block(BlockType.SAND))
    assert world.get_block(CENTER).type is BlockType.SAND
    assert manager.update() == []


def test_update_block_cheap_needs_chunk():
    _, manager = _setup()
    with pytest.raises(LookupError):
        manager.update_block_cheap((0, 0, 0), Block(BlockType.SAND))


def test_threaded_meshing():
    world, manager = _setup()
    chunk = world.get_chunk((1, 1, 1))
    with manager:
        future = manager.update_chunk(chunk)
        future.result(timeout=60)
    assert manager.update() == [chunk]
    assert manager.mesh_for(chunk).quad_count == 0


def test_reload_all_chunks():
    world, manager = _setup((2, 1, 1))
    manager.reload_all_chunks()
    assert set(manager.update()) == set(world.chunks())


def test_update_chunk_at():
    world, manager = _setup()
    manager.update_chunk_at((0, 0, 0))
    assert manager.update() == []
    manager.update_chunk_at(CENTER)
    assert manager.update() == [world.get_chunk((1, 1, 1))]


def test_mesh_for_returns_same_mesh():
    world, manager = _setup()
    chunk = world.get_chunk((1, 1, 1))
    assert manager.mesh_for(chunk) is manager.mesh_for(chunk)
    assert manager.mesh_for(chunk).chunk is chunk