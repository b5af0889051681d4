# voxelworld

A chunked voxel world in pure Python. It covers blocks with packed lighting,
chunks of 32³ blocks, a bordered grid of chunks, flood-fill light propagation,
chunk meshing into packed quad words, prefabs stored as small binary files,
console-variable storage, and a set of math and shading helpers. It has no
dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `voxelworld.light`: `Light` is a frozen 16-bit value that holds red, green,
  blue and sun channels of 4 bits each. Build one with
  `Light.from_channels(r, g, b, s)`, which raises `ValueError` for any channel
  outside 0..15. Read it back with `.r`, `.g`, `.b`, `.s`, `.channels()` or `.raw`.
- `voxelworld.block`: `BlockType` (an `IntEnum` of every block kind),
  `Visibility`, `BlockProperties` and `PROPERTIES_TABLE`. A `Block` is a frozen
  pair of type and light. Its properties (`name`, `priority`, `ttk`,
  `destructible`, `emittance`, `visibility`) are looked up in the table.
- `voxelworld.coords`: the chunk size constants, `LocalPos`, `world_to_local`,
  `local_to_world`, `index_from_3d`, `index_from_2d` and `position_from_index`.
  Negative world positions round down to the chunk below.
- `voxelworld.chunk`: `ArrayBlockStorage` and `Chunk`. A chunk accepts either a
  flat index or an in-chunk `(x, y, z)` and raises `IndexError` outside the
  chunk. Every access takes the chunk's reentrant lock, and `with chunk:` holds
  that lock across several accesses. `aabb()` gives the chunk's world bounds
  and `copy()` an independent snapshot.
- `voxelworld.world`: `VoxelWorld` is a grid of chunks with a one-chunk border.
  A world of dimension `(x, y, z)` creates chunks at positions `1..x`, `1..y`,
  `1..z`. `set_dim` may be called only once. The class offers `get_chunk`,
  `get_chunk_no_check`, `create_chunk`, `chunks`, `chunks_region`,
  `chunks_region_world`, `get_block` (raises `LookupError` where there is no
  chunk), `try_get_block`, and `set_block`, `set_block_type`, `set_block_light`,
  which return `False` where there is no chunk.
- `voxelworld.manager`: `ChunkManager` places blocks with `update_block`. It
  then relights the area with `propagate_light_remove` and
  `propagate_light_add`, and remeshes the changed chunk, the chunks whose light
  changed, and the neighbouring chunks across chunk borders. Meshing runs on a
  thread pool between `start()` and `stop()`, or inside `with manager:`.
  Otherwise it runs at once on the calling thread. `update()` publishes the
  buffers of meshed chunks and returns those chunks.
- `voxelworld.mesh`: `ChunkMesh.build_mesh()` reads a snapshot of a chunk and its
  six neighbours. It produces a four-word header (chunk world position and
  `0xDEADBEEF` padding) followed by two 32-bit words per visible quad: position,
  face and texture index from `encode_quad`, and light with per-vertex ambient
  occlusion from `encode_quad_light`. It also produces collision vertices and
  indices. `build_buffers()` turns the pending words into `buffer`. Use
  `decode_quad` to unpack a quad word into a `QuadInfo`.
- `voxelworld.prefab`: `Prefab` is a named list of positioned blocks with a
  `PlacementType`. `to_bytes` and `from_bytes` store block types, positions and
  the name in little-endian binary; light and placement type are not stored.
  `PrefabManager` keeps named prefabs. `init_prefabs` registers `OakTree`,
  `OakTreeBig` and `Error` and writes `Error.bin`. `get_prefab` loads
  `<name>.bin` from its directory the first time a prefab is asked for. Loading
  a missing or malformed file gives a copy of the error prefab.
- `voxelworld.hud`: `HUD` tracks the selected block type. `update(scroll_offset)`
  moves the selection by the whole part of the offset and clamps it to the valid
  types.
- `voxelworld.cvars`: `CVarArray` and `CVarSystemStorage` store console
  variables of float, string and 3-vector kinds. Each array holds at most 1000
  entries and raises `OverflowError` beyond that. A numeric variable added with
  no bounds, or with both bounds zero, has the full float range as its bounds.
- `voxelworld.shapes`: `AABB`, `AABB16` (padded with `w = 0`) and `Timestep`.
- `voxelworld.utilities`: `djb2_hash`, `ivec3_hash`, `rgb_to_hsl`, `hsl_to_rgb`,
  `make_inf_reversed_z_proj_rh`, `noise`, `map_range` and `format_ivec3`.
- `voxelworld.shading`: octahedral normal encoding (`float32x3_to_oct`,
  `oct_to_float32x3`), depth helpers (`unproject_uv`, `linearize_depth_zo`,
  `invert_depth_zo`), hash noise (`gold_noise`, `silver_noise`, `rand`,
  `random3`) and PBR terms (`d_ggx`, `hammersley`, `importance_sample_ggx`,
  `fresnel_schlick`, `fresnel_schlick_roughness`, `g_schlick_ggx`, `g_smith`).

## Example

```python
from voxelworld.block import Block, BlockType
from voxelworld.manager import ChunkManager
from voxelworld.world import VoxelWorld

world = VoxelWorld((2, 2, 2))
world.set_block_type((40, 40, 40), BlockType.STONE)
print(world.get_block((40, 40, 40)).name)  # stone

manager = ChunkManager(world)
manager.update_block((45, 40, 40), Block(BlockType.R_LIGHT))
print(world.get_block((46, 40, 40)).light.r)  # 14
manager.update()
```

## What it does not do

The package models the world and prepares mesh data, but it does not draw
anything. Nothing here uploads buffers to a GPU, loads textures, builds physics
bodies, generates terrain or reads player input. The packed quad words and
collision arrays are left for the caller to use. `PrefabManager` reads and
writes files only in a directory that already exists (`Resources/Prefabs` by
default). The package offers no command-line program.