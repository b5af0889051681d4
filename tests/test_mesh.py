import pytest

from voxelworld.block import BlockType
from voxelworld.chunk import Chunk
from voxelworld.light import Light
from voxelworld.mesh import (
    HEADER_PADDING,
    ChunkMesh,
    Face,
    QuadInfo,
    decode_quad,
    encode_quad,
    encode_quad_light,
)
from voxelworld.world import VoxelWorld


def _quads(data):
    body = list(data[4:])
    return [(decode_quad(body[i]), body[i + 1]) for i in range(0, len(body), 2)]


def _ao_values(word):
    ao = word >> 16
    return [(ao >> (2 * i)) & 0x3 for i in range(4)]


@pytest.mark.parametrize(
    "pos,face,tex",
    [((0, 0, 0), 0, 0), ((31, 31, 31), 5, 1023), ((3, 17, 9), 2, 11), ((31, 0, 15), 4, 512)],
)
def test_encode_decode_round_trip(pos, face, tex):
    assert decode_quad(encode_quad(pos, face, tex)) == QuadInfo(pos, Face(face), tex)


def test_encode_quad_x_is_low_bits():
    assert encode_quad((1, 0, 0), 0, 0) == 1
    assert encode_quad((31, 0, 0), 0, 0) == 0x1F


@pytest.mark.parametrize(
    "pos,face,tex",
    [((32, 0, 0), 0, 0), ((0, -1, 0), 0, 0), ((0, 0, 0), 6, 0), ((0, 0, 0), 0, 1024)],
)
def test_encode_quad_rejects_out_of_range(pos, face, tex):
    with pytest.raises(ValueError):
        encode_quad(pos, face, tex)


def test_decode_quad_rejects_bad_face():
    with pytest.raises(ValueError):
        decode_quad(6 << 15)


def test_encode_quad_light_packs_fields():
    assert encode_quad_light(0x1234, 0) == 0x1234
    packed = encode_quad_light(0xFFFF, 0xFF)
    assert packed & 0xFFFF == 0xFFFF
    assert packed >> 16 == 0xFF


@pytest.mark.parametrize("light,ao", [(0x10000, 0), (0, 0x100), (-1, 0)])
def test_encode_quad_light_rejects_out_of_range(light, ao):
    with pytest.raises(ValueError):
        encode_quad_light(light, ao)


@pytest.mark.parametrize(
    "face_index,direction",
    [(0, (0, 0, 1)), (1, (0, 0, -1)), (4, (0, 1, 0)), (5, (0, -1, 0))],
)
def test_face_directions(face_index, direction):
    decoded = decode_quad(encode_quad((0, 0, 0), face_index, 0))
    assert decoded.face.direction == direction
    assert Face(face_index).direction == direction


def test_empty_chunk_has_no_quads():
    mesh = ChunkMesh(Chunk((0, 0, 0)))
    mesh.build_mesh()
    assert mesh.quad_count == 0
    assert mesh.build_buffers() is None
    assert mesh.buffer is None


def test_single_block_emits_six_faces():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((0, 0, 0), BlockType.STONE)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()

    assert mesh.quad_count == 6
    assert mesh.pending[:4] == [0, 0, 0, HEADER_PADDING]
    quads = _quads(mesh.pending)
    assert [q.face for q, _ in quads] == list(Face)
    assert all(q.block_pos == (0, 0, 0) for q, _ in quads)
    assert all(q.tex_idx == BlockType.STONE for q, _ in quads)
    assert all(_ao_values(word) == [3, 3, 3, 3] for _, word in quads)


def test_faces_towards_missing_chunks_get_full_sunlight():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((0, 0, 0), BlockType.STONE)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    lights = {q.face: word & 0xFFFF for q, word in _quads(mesh.pending)}
    sun = Light.from_channels(0, 0, 0, 15).raw
    for face in (Face.NEAR, Face.LEFT, Face.BOTTOM):
        assert lights[face] == sun
    for face in (Face.FAR, Face.RIGHT, Face.TOP):
        assert lights[face] == 0


def test_quad_carries_neighbour_light():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((5, 5, 5), BlockType.STONE)
    light = Light.from_channels(1, 2, 3, 4)
    chunk.set_light_at((6, 5, 5), light)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    lights = {q.face: word & 0xFFFF for q, word in _quads(mesh.pending)}
    assert lights[Face.RIGHT] == light.raw


def test_collider_geometry():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((2, 3, 4), BlockType.DIRT)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    assert len(mesh.collider_vertices) == 24
    assert len(mesh.collider_indices) == 36
    assert set(mesh.collider_indices) == set(range(24))
    xs = {v[0] for v in mesh.collider_vertices}
    assert xs == {2, 3}


def test_adjacent_blocks_hide_shared_faces():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((4, 4, 4), BlockType.STONE)
    chunk.set_block_type_at((5, 4, 4), BlockType.STONE)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    assert mesh.quad_count == 10
    quads = [q for q, _ in _quads(mesh.pending)]
    assert QuadInfo((4, 4, 4), Face.RIGHT, BlockType.STONE) not in quads
    assert QuadInfo((5, 4, 4), Face.LEFT, BlockType.STONE) not in quads


def test_water_next_to_water_hides_face():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((4, 4, 4), BlockType.WATER)
    chunk.set_block_type_at((4, 4, 5), BlockType.WATER)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    quads = [q for q, _ in _quads(mesh.pending)]
    assert QuadInfo((4, 4, 4), Face.FAR, BlockType.WATER) not in quads
    assert mesh.quad_count == 10


def test_partial_neighbour_keeps_face():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((4, 4, 4), BlockType.STONE)
    chunk.set_block_type_at((4, 5, 4), BlockType.R_GLASS)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    quads = [q for q, _ in _quads(mesh.pending)]
    assert QuadInfo((4, 4, 4), Face.TOP, BlockType.STONE) in quads


def test_ambient_occlusion_from_side_block():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((1, 1, 1), BlockType.STONE)
    chunk.set_block_type_at((2, 2, 1), BlockType.STONE)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    top = [w for q, w in _quads(mesh.pending) if q.block_pos == (1, 1, 1) and q.face is Face.TOP]
    assert len(top) == 1
    ao = _ao_values(top[0])
    assert min(ao) < 3
    assert max(ao) == 3


def test_neighbour_chunk_hides_face_across_boundary():
    world = VoxelWorld((2, 1, 1))
    left = world.get_chunk((1, 1, 1))
    right = world.get_chunk((2, 1, 1))
    left.set_block_type_at((31, 0, 0), BlockType.STONE)
    right.set_block_type_at((0, 0, 0), BlockType.STONE)
    mesh = ChunkMesh(left, world)
    mesh.build_mesh()
    faces = [q.face for q, _ in _quads(mesh.pending)]
    assert Face.RIGHT not in faces
    assert mesh.quad_count == 5
    assert tuple(mesh.pending[:3]) == tuple(int(c) for c in left.aabb().min)


def test_build_buffers_publishes_once():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((0, 0, 0), BlockType.STONE)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    expected = tuple(mesh.pending)
    data = mesh.build_buffers()
    assert data == expected
    assert mesh.pending == []
    assert mesh.collider_vertices == []
    assert mesh.build_buffers() == expected


def test_rebuild_reflects_changes():
    chunk = Chunk((0, 0, 0))
    chunk.set_block_type_at((0, 0, 0), BlockType.STONE)
    mesh = ChunkMesh(chunk)
    mesh.build_mesh()
    mesh.build_buffers()
    chunk.set_block_type_at((0, 0, 0), BlockType.AIR)
    mesh.build_mesh()
    assert mesh.quad_count == 0
    assert mesh.build_buffers() is None