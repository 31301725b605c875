"""
Randomized backtracking placement search.

Starting from a mandatory start room, the search walks the frontier of open
doors left to right. For each door it draws compatible templates in random
order, commits one at the cell beyond the door, and descends with one fewer
room to place. A branch that cannot reach the requested count is rolled back
completely (frontier delta reverted, instance destroyed, layout popped)
before the next candidate or door is tried.

The recursion is run on an explicit stack of frames, so the requested room
count is not bounded by the interpreter's recursion limit. Exhausting the
search is an ordinary outcome reported through ``SearchResult``; only
broken invariants and bad configuration raise.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple

from ..errors import ConfigurationError, SearchInvariantError
from ..instantiation import InMemoryInstantiator, RoomInstantiator
from ..layout.frontier import Frontier, FrontierDelta
from ..layout.grid_types import CellCoord, Door, ORIGIN
from ..layout.layout_types import Layout, PlacedRoom, RoomConnection
from ..templates.base import RoomTemplate
from ..templates.catalog import RoomCatalog

logger = logging.getLogger(__name__)


REASON_EXHAUSTED = "exhausted"
REASON_BUDGET = "budget_exhausted"


# ---------------------------------------------------------------------------
# Config / result dataclasses
# ---------------------------------------------------------------------------

@dataclass
class SearchConfig:
    total_rooms: int = 10
    grid_origin: CellCoord = ORIGIN
    seed: Optional[int] = None              # None = random seed, otherwise deterministic
    start_template: Optional[str] = None    # None = first 'start' category template

    # Candidates tried per open door (None = every matching template)
    max_candidates_per_door: Optional[int] = None

    # Commit attempts before giving up (None = unbounded)
    max_steps: Optional[int] = None

    def validate(self) -> None:
        errors = []
        if not isinstance(self.total_rooms, int) or self.total_rooms < 1:
            errors.append(f"total_rooms must be a positive integer (got {self.total_rooms!r})")
        try:
            self.grid_origin = CellCoord.of(self.grid_origin)
        except (TypeError, ValueError):
            errors.append(f"grid_origin must be an (x, y) integer pair (got {self.grid_origin!r})")
        if self.max_candidates_per_door is not None and self.max_candidates_per_door < 1:
            errors.append("max_candidates_per_door must be >= 1")
        if self.max_steps is not None and self.max_steps < 0:
            errors.append("max_steps cannot be negative")
        if errors:
            raise ConfigurationError(f"Invalid search config: {'; '.join(errors)}")


@dataclass
class SearchStats:
    steps: int = 0
    placements: int = 0
    backtracks: int = 0
    overlap_rejections: int = 0
    no_candidate_rejections: int = 0
    misaligned_rejections: int = 0
    max_depth: int = 0
    runtime_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class SearchResult:
    success: bool
    seed: int
    rooms: List[Tuple[str, CellCoord]] = field(default_factory=list)
    reason: Optional[str] = None
    stats: SearchStats = field(default_factory=SearchStats)
    layout: Optional[Layout] = None

    @property
    def room_count(self) -> int:
        return len(self.rooms)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

@dataclass
class _Frame:
    """One level of the search: rooms still to place and where it is in the frontier."""
    rooms_remaining: int
    next_index: int = 0
    open_door: Optional[Door] = None
    owner_index: int = -1
    target: Optional[CellCoord] = None
    candidates: Optional[Iterator[RoomTemplate]] = None
    # Placement whose subtree is being explored
    delta: Optional[FrontierDelta] = None
    handle: Optional[Hashable] = None


_COMMITTED = "committed"
_EXHAUSTED = "exhausted"
_BUDGET = "budget"


class PlacementSearch:
    """Places ``total_rooms`` rooms from a catalog by randomized backtracking.

    A search instance may be run repeatedly; each run starts from an empty
    layout and frontier.
    """

    def __init__(self, catalog: RoomCatalog,
                 config: Optional[SearchConfig] = None,
                 instantiator: Optional[RoomInstantiator] = None):
        self.catalog = catalog
        self.config = config or SearchConfig()
        self.instantiator = instantiator or InMemoryInstantiator()
        self.config.validate()

        self.layout = Layout()
        self.frontier = Frontier()
        self.stats = SearchStats()
        self.seed: Optional[int] = None
        self._rng = random.Random()

    # -- main entry --

    def run(self) -> SearchResult:
        config = self.config
        start = self.catalog.resolve_start(config.start_template)

        if config.seed is not None:
            seed = config.seed
        else:
            seed = random.randint(0, 2**31 - 1)
        self.seed = seed
        self._rng = random.Random(seed)
        self.layout = Layout()
        self.stats = SearchStats()
        started = time.perf_counter()

        logger.info("Placement search: %d rooms, start=%s, seed=%d",
                    config.total_rooms, start.template_id, seed)

        handle, doors = self.instantiator.instantiate(start, config.grid_origin)
        self.layout.add(PlacedRoom(handle, start.template_id, config.grid_origin, tuple(doors)))
        self.frontier = Frontier(doors)

        outcome = self._search(config.total_rooms - 1)
        self.stats.runtime_ms = (time.perf_counter() - started) * 1000.0

        if outcome == _COMMITTED:
            logger.info("Placement search succeeded: %d rooms in %d steps (%d backtracks)",
                        len(self.layout), self.stats.steps, self.stats.backtracks)
            return SearchResult(
                success=True,
                seed=seed,
                rooms=self.layout.entries(),
                stats=self.stats,
                layout=self.layout,
            )

        # Every branch has been undone; only the start room remains
        start_room = self.layout.pop_last()
        self.instantiator.destroy(start_room.handle)
        self.frontier = Frontier()
        reason = REASON_BUDGET if outcome == _BUDGET else REASON_EXHAUSTED
        logger.info("Placement search failed (%s) after %d steps, %d backtracks",
                    reason, self.stats.steps, self.stats.backtracks)
        return SearchResult(
            success=False,
            seed=seed,
            reason=reason,
            stats=self.stats,
            layout=self.layout,
        )

    def _search(self, rooms_remaining: int) -> str:
        """Drive the frame stack; returns _COMMITTED on success."""
        stack: List[_Frame] = [_Frame(rooms_remaining)]
        while stack:
            frame = stack[-1]
            if frame.rooms_remaining == 0:
                return _COMMITTED

            outcome = self._advance(frame)
            if outcome == _COMMITTED:
                stack.append(_Frame(frame.rooms_remaining - 1))
                self.stats.max_depth = max(self.stats.max_depth, len(stack) - 1)
            elif outcome == _BUDGET:
                self._unwind(stack)
                return _BUDGET
            else:
                stack.pop()
        return _EXHAUSTED

    def _unwind(self, stack: List[_Frame]) -> None:
        for frame in reversed(stack):
            if frame.delta is not None:
                self._rollback(frame)

    # -- transitions --

    def _advance(self, frame: _Frame) -> str:
        """Commit this frame's next viable placement.

        A placement still held by the frame belongs to a subtree that just
        failed, so it is rolled back first.
        """
        if frame.delta is not None:
            self._rollback(frame)
            self.stats.backtracks += 1

        limit = self.config.max_steps
        while True:
            if frame.candidates is not None:
                for template in frame.candidates:
                    self.stats.steps += 1
                    if limit is not None and self.stats.steps > limit:
                        return _BUDGET
                    if self._commit(frame, template):
                        return _COMMITTED
                frame.candidates = None
                frame.next_index += 1

            if frame.next_index >= len(self.frontier):
                return _EXHAUSTED

            open_door = self.frontier[frame.next_index]
            owner_index = self.layout.index_of_owner(open_door)
            if owner_index is None:
                raise SearchInvariantError(f"Open door {open_door} has no owning room in the layout")
            target = self.layout.placed[owner_index].cell.neighbor(open_door.direction)

            if self.layout.is_occupied(target):
                self.stats.overlap_rejections += 1
                logger.debug("Door %s rejected: %s already occupied", open_door, target)
                frame.next_index += 1
                continue

            required = open_door.matching_direction()
            if not self.catalog.find_matching(required, self.instantiator):
                self.stats.no_candidate_rejections += 1
                logger.debug("Door %s rejected: no template faces %s", open_door, required.name)
                frame.next_index += 1
                continue

            frame.open_door = open_door
            frame.owner_index = owner_index
            frame.target = target
            frame.candidates = self.catalog.draw_candidates(
                required, self._rng,
                limit=self.config.max_candidates_per_door,
                instantiator=self.instantiator,
            )

    def _commit(self, frame: _Frame, template: RoomTemplate) -> bool:
        """Instantiate ``template`` beyond the frame's open door and record it."""
        open_door = frame.open_door
        handle, doors = self.instantiator.instantiate(template, frame.target)
        room = PlacedRoom(handle, template.template_id, frame.target, tuple(doors))

        connecting = room.door_matching(open_door)
        if connecting is None:
            self.instantiator.destroy(handle)
            self.stats.misaligned_rejections += 1
            logger.debug("%s at %s has no door meeting %s", template.template_id, frame.target, open_door)
            return False

        child_index = len(self.layout)
        self.layout.add(room, RoomConnection(frame.owner_index, open_door, child_index, connecting))

        # Doors that meet other open doors close them instead of joining the frontier
        closed = []
        added = []
        for door in room.doors:
            if door == connecting:
                continue
            partner = door.matching()
            if partner != open_door and partner in self.frontier and partner not in closed:
                closed.append(partner)
            else:
                added.append(door)

        frame.delta = self.frontier.plug(frame.next_index, added, closed)
        frame.handle = handle
        self.stats.placements += 1
        logger.debug("Placed %s at %s (%d to go)", template.template_id, frame.target,
                     frame.rooms_remaining - 1)
        return True

    def _rollback(self, frame: _Frame) -> None:
        """Undo the frame's placement: frontier, instance, layout."""
        self.frontier.revert(frame.delta)
        room = self.layout.pop_last()
        if room.handle != frame.handle:
            raise SearchInvariantError(
                f"Rollback out of order: expected {frame.handle}, found {room.handle}"
            )
        self.instantiator.destroy(room.handle)
        logger.debug("Backtracked %s at %s", room.template_id, room.cell)
        frame.delta = None
        frame.handle = None


def generate_layout(catalog: RoomCatalog, total_rooms: int,
                    seed: Optional[int] = None,
                    instantiator: Optional[RoomInstantiator] = None,
                    **options) -> SearchResult:
    """Run a single placement search with the given options."""
    config = SearchConfig(total_rooms=total_rooms, seed=seed, **options)
    return PlacementSearch(catalog, config, instantiator).run()
