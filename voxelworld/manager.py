"""Scheduling of chunk meshing and flood-fill propagation of block light."""

from __future__ import annotations

import contextlib
import logging
import queue
import threading
from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from voxelworld.block import Block, Visibility
from voxelworld.chunk import Chunk
from voxelworld.coords import CHUNK_SIZE, IVec3, world_to_local
from voxelworld.light import CHANNEL_MAX, Light
from voxelworld.mesh import ChunkMesh
from voxelworld.world import VoxelWorld

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 8
"""Number of mesher threads started by ChunkManager.start."""

_SUN = 3
_DOWN: IVec3 = (0, -1, 0)

# Neighbours whose chunk may need remeshing after a block changes.
_NEIGHBOUR_DIRS: tuple[IVec3, ...] = (
    (-1, 0, 0),
    (1, 0, 0),
    (0, -1, 0),
    (0, 1, 0),
    (0, 0, -1),
    (0, 0, 1),
)

# Order in which light spreads to the neighbours of a cell.
_LIGHT_DIRS: tuple[IVec3, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def _add(a: Sequence[int], b: Sequence[int]) -> IVec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _offset(a: Sequence[int], amount: int) -> IVec3:
    return (a[0] + amount, a[1] + amount, a[2] + amount)


@contextlib.contextmanager
def _locked(chunks: Iterable[Chunk]) -> Iterator[None]:
    with contextlib.ExitStack() as stack:
        for chunk in chunks:
            stack.enter_context(chunk)
        yield


class ChunkManager:
    """Decides when chunks are remeshed and keeps lighting up to date.

    Meshing runs on a thread pool once ``start`` has been called; before that,
    or after ``stop``, meshes are built at once on the calling thread. Built
    meshes wait in a queue until ``update`` publishes their buffers.
    """

    def __init__(self, world: VoxelWorld, workers: int = DEFAULT_WORKERS) -> None:
        self.world = world
        self.workers = workers
        self._pool: ThreadPoolExecutor | None = None
        self._meshes: dict[Chunk, ChunkMesh] = {}
        self._meshes_lock = threading.Lock()
        self._buffer_queue: queue.SimpleQueue[Chunk] = queue.SimpleQueue()

    def start(self) -> None:
        """Start the mesher threads."""
        if self._pool is None:
            self._pool = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix="chunk-mesher"
            )

    def stop(self) -> None:
        """Stop the mesher threads, dropping jobs that have not begun."""
        pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> ChunkManager:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def update(self) -> list[Chunk]:
        """Publish the buffers of every meshed chunk waiting; return those chunks."""
        buffered: list[Chunk] = []
        while True:
            try:
                chunk = self._buffer_queue.get_nowait()
            except queue.Empty:
                break
            self.mesh_for(chunk).build_buffers()
            buffered.append(chunk)
        return buffered

    def mesh_for(self, chunk: Chunk) -> ChunkMesh:
        """Return the mesh belonging to a chunk, creating it on first use."""
        with self._meshes_lock:
            mesh = self._meshes.get(chunk)
            if mesh is None:
                mesh = ChunkMesh(chunk, self.world)
                self._meshes[chunk] = mesh
            return mesh

    def _mesh_job(self, chunk: Chunk) -> None:
        self.mesh_for(chunk).build_mesh()
        self._buffer_queue.put(chunk)

    def update_chunk(self, chunk: Chunk) -> Future[None] | None:
        """Schedule a chunk to be remeshed.

        Returns the pending job while the thread pool runs, otherwise meshes
        the chunk immediately and returns None.
        """
        if chunk is None:
            raise ValueError("a chunk is required")
        pool = self._pool
        if pool is not None:
            return pool.submit(self._mesh_job, chunk)
        self._mesh_job(chunk)
        return None

    def update_chunk_at(self, wpos: Sequence[int]) -> Future[None] | None:
        """Remesh the chunk holding a world block position, if there is one."""
        chunk = self.world.get_chunk(world_to_local(wpos).chunk_pos)
        if chunk is None:
            return None
        return self.update_chunk(chunk)

    def update_block(self, wpos: Sequence[int], block: Block) -> list[Chunk]:
        """Place a block, relight around it and remesh what changed.

        A chunk is created in an empty grid slot if needed. Returns the
        chunks whose lighting changed, each once.
        """
        wpos = tuple(wpos)
        local = world_to_local(wpos)
        removed = self.world.try_get_block(local)
        chunk = self.world.get_chunk(local.chunk_pos)
        if chunk is None:
            chunk = self.world.create_chunk(local.chunk_pos)
            removed = chunk.block_at(local.block_pos)
        assert removed is not None

        chunk.set_block_type_at(local.block_pos, block.type)

        modified: list[Chunk] = []
        if block.visibility is Visibility.OPAQUE or removed.visibility is Visibility.OPAQUE:
            modified.extend(self.propagate_light_remove(wpos))

        if any(block.emittance):
            modified.extend(
                self.propagate_light_add(wpos, Light.from_channels(*block.emittance))
            )

        self.update_chunk(chunk)

        unique = list(dict.fromkeys(modified))
        log.debug("Updating %d chunks", len(unique))
        for modified_chunk in unique:
            self.update_chunk(modified_chunk)

        for direction in _NEIGHBOUR_DIRS:
            self._update_near_block(wpos, direction)
        return unique

    def update_block_cheap(self, wpos: Sequence[int], block: Block) -> None:
        """Change a block's type only; its chunk must already exist."""
        local = world_to_local(wpos)
        chunk = self.world.get_chunk(local.chunk_pos)
        if chunk is None:
            raise LookupError(f"no chunk at {local.chunk_pos}")
        chunk.set_block_type_at(local.block_pos, block.type)

    def reload_all_chunks(self) -> None:
        """Remesh every chunk in the world."""
        for chunk in list(self.world.chunks()):
            self.update_chunk(chunk)

    def _update_near_block(self, pos: Sequence[int], near: Sequence[int]) -> None:
        here = world_to_local(pos)
        there = world_to_local(_add(pos, near))
        if here.chunk_pos == there.chunk_pos:
            return
        chunk = self.world.get_chunk(there.chunk_pos)
        if chunk is not None:
            self.update_chunk(chunk)

    def propagate_light_add(self, wpos: Sequence[int], light: Light) -> list[Chunk]:
        """Spread light outward from a position; return every chunk written to.

        Each channel loses one level per block, opaque blocks stop it, and
        full sunlight travels straight down without weakening.
        """
        wpos = tuple(wpos)
        modified: list[Chunk] = []
        region = self.world.chunks_region_world(
            _offset(wpos, -CHUNK_SIZE), _offset(wpos, CHUNK_SIZE)
        )
        with _locked(region):
            start = world_to_local(wpos)
            chunk = self.world.get_chunk(start.chunk_pos)
            if chunk is not None:
                existing = chunk.light_at(start.block_pos).channels()
                combined = (max(a, b) for a, b in zip(existing, light.channels()))
                chunk.set_light_at(start.block_pos, Light.from_channels(*combined))

            pending: deque[IVec3] = deque([wpos])
            while pending:
                lightp = pending.popleft()
                here = world_to_local(lightp)
                lchunk = self.world.get_chunk(here.chunk_pos)
                if lchunk is None:
                    continue
                level = lchunk.light_at(here.block_pos).channels()

                for direction in _LIGHT_DIRS:
                    npos = _add(lightp, direction)
                    near = world_to_local(npos)
                    nchunk = self.world.get_chunk(near.chunk_pos)
                    if nchunk is None:
                        continue
                    nblock = nchunk.block_at(near.block_pos)
                    if nblock.visibility is Visibility.OPAQUE:
                        continue
                    nlight = nblock.light.channels()
                    going_down = direction == _DOWN

                    enqueue = False
                    for ci in range(4):
                        sun_falls = (
                            ci == _SUN and going_down and nlight[_SUN] + 1 == level[_SUN]
                        )
                        if nlight[ci] + 2 > level[ci] and not sun_falls:
                            continue
                        val = list(nchunk.light_at(near.block_pos).channels())
                        val[ci] = level[ci] - 1
                        if ci == _SUN and going_down and level[_SUN] == CHANNEL_MAX:
                            val[_SUN] = CHANNEL_MAX
                        nchunk.set_light_at(near.block_pos, Light.from_channels(*val))
                        modified.append(nchunk)
                        enqueue = True

                    if enqueue:
                        pending.append(npos)
        return modified

    def propagate_light_remove(self, wpos: Sequence[int]) -> list[Chunk]:
        """Remove the light at a position and what it lit; return chunks written to.

        Brighter light found at the edge of the darkened area is spread
        back in afterwards so no hard edges are left.
        """
        wpos = tuple(wpos)
        modified: list[Chunk] = []
        readd: deque[tuple[IVec3, Light]] = deque()
        region = self.world.chunks_region_world(
            _offset(wpos, -CHUNK_SIZE), _offset(wpos, CHUNK_SIZE)
        )
        with _locked(region):
            start = world_to_local(wpos)
            chunk = self.world.get_chunk_no_check(start.chunk_pos)
            if chunk is None:
                raise LookupError(f"no chunk at {start.chunk_pos}")
            removal: deque[tuple[IVec3, Light]] = deque(
                [(wpos, chunk.light_at(start.block_pos))]
            )
            chunk.set_light_at(start.block_pos, Light())

            while removal:
                plight, lite = removal.popleft()
                lightv = lite.channels()
                for direction in _LIGHT_DIRS:
                    bpos = _add(plight, direction)
                    near = world_to_local(bpos)
                    nchunk = self.world.get_chunk(near.chunk_pos)
                    if nchunk is None:
                        continue
                    near_light = nchunk.light_at(near.block_pos)
                    nlightv = list(near_light.channels())
                    going_down = direction == _DOWN
                    nue = [0, 0, 0, 0]
                    remove = False
                    re_add = False
                    for ci in range(4):
                        weaker = nlightv[ci] > 0 and nlightv[ci] == lightv[ci] - 1
                        full_sun_below = (
                            ci == _SUN and going_down and nlightv[_SUN] == CHANNEL_MAX
                        )
                        if weaker or full_sun_below:
                            remove = True
                            nlightv[ci] = 0
                        elif nlightv[ci] > lightv[ci] or (
                            ci == _SUN and nlightv[_SUN] > 0 and not going_down
                        ):
                            re_add = True
                            nue[ci] = nlightv[ci]

                    if remove:
                        nchunk.set_light_at(near.block_pos, Light.from_channels(*nlightv))
                        modified.append(nchunk)
                        removal.append((bpos, near_light))
                    if re_add:
                        readd.append((bpos, Light.from_channels(*nue)))

        while readd:
            pos, next_light = readd.popleft()
            modified.extend(self.propagate_light_add(pos, next_light))
        return modified