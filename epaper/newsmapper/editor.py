"""
Region editor: the drawing session behind the mapper page.

A session is a three-state machine (idle, drawing, active) over a single
page. Every transition is a plain function that takes a DrawState and
returns a new one, so the state can live in the Django session between
requests and nothing here does any I/O.
"""
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .coords import PercentRect, PixelRect, clamp_percent, rescale, to_percentage

logger = logging.getLogger(__name__)

IDLE = 'idle'
DRAWING = 'drawing'
ACTIVE = 'active'

Point = Tuple[float, float]


class EditorError(Exception):
    """A command the current editor state does not allow."""


class NoActiveShape(EditorError):
    def __init__(self):
        super().__init__('There is no area to save. Draw a rectangle first.')


class EmptyShape(EditorError):
    def __init__(self):
        super().__init__('The area must have a positive width and height.')


class SaveInFlight(EditorError):
    def __init__(self):
        super().__init__('This area is already being saved.')


@dataclass(frozen=True)
class DrawState:
    page_number: int
    canvas_width: float
    canvas_height: float
    scale: float = 1.0
    mode: str = IDLE
    origin: Optional[Point] = None
    pointer: Optional[Point] = None
    shape: Optional[PixelRect] = None
    saving: bool = False
    # bumped on every page change and save start; a save result only applies to its own generation
    generation: int = 0

    @property
    def canvas_size(self):
        return (self.canvas_width, self.canvas_height)

    def to_session(self):
        return {
            'page_number': self.page_number,
            'canvas_width': self.canvas_width,
            'canvas_height': self.canvas_height,
            'scale': self.scale,
            'mode': self.mode,
            'origin': list(self.origin) if self.origin else None,
            'pointer': list(self.pointer) if self.pointer else None,
            'shape': self.shape.to_dict() if self.shape else None,
            'saving': self.saving,
            'generation': self.generation,
        }

    @classmethod
    def from_session(cls, data):
        shape = data.get('shape')
        return cls(
            page_number=int(data['page_number']),
            canvas_width=float(data['canvas_width']),
            canvas_height=float(data['canvas_height']),
            scale=float(data.get('scale', 1.0)),
            mode=data.get('mode', IDLE),
            origin=tuple(data['origin']) if data.get('origin') else None,
            pointer=tuple(data['pointer']) if data.get('pointer') else None,
            shape=PixelRect(**shape) if shape else None,
            saving=bool(data.get('saving', False)),
            generation=int(data.get('generation', 0)),
        )


@dataclass(frozen=True)
class SaveTicket:
    """What a save commits to, captured when the save starts."""
    page_number: int
    coordinates: PercentRect
    canvas_width: float
    canvas_height: float
    generation: int = 0

    @property
    def canvas_size(self):
        return (self.canvas_width, self.canvas_height)


def session_key(newspaper_id):
    return f'newsmapper:editor:{newspaper_id}'


def new_session(page_number, canvas_width, canvas_height, scale=1.0, generation=0):
    return DrawState(page_number, canvas_width, canvas_height, scale=scale, generation=generation)


def _clamp_point(state, x, y):
    return (
        min(max(float(x), 0.0), state.canvas_width),
        min(max(float(y), 0.0), state.canvas_height),
    )


def pointer_down(state, x, y, over_shape=False):
    if state.mode != IDLE or state.saving or over_shape:
        return state
    origin = _clamp_point(state, x, y)
    return replace(
        state, mode=DRAWING, origin=origin, pointer=origin,
        shape=PixelRect(origin[0], origin[1], 0.0, 0.0),
    )


def pointer_move(state, x, y):
    if state.mode != DRAWING:
        return state
    pointer = _clamp_point(state, x, y)
    return replace(state, pointer=pointer, shape=PixelRect.from_corners(*state.origin, *pointer))


def pointer_up(state, x=None, y=None):
    if state.mode != DRAWING:
        return state
    if x is not None and y is not None:
        state = pointer_move(state, x, y)
    return replace(state, mode=ACTIVE, origin=None, pointer=None)


def cancel(state):
    return replace(state, mode=IDLE, origin=None, pointer=None, shape=None)


def change_page(state, page_number, canvas_width, canvas_height):
    if state.shape is not None:
        logger.info('Discarding unsaved area on page %s', state.page_number)
    return new_session(page_number, canvas_width, canvas_height, scale=state.scale,
                       generation=state.generation + 1)


def change_zoom(state, scale, canvas_width, canvas_height):
    old_size = state.canvas_size
    new_size = (canvas_width, canvas_height)

    def move(point):
        if point is None:
            return None
        moved = rescale(PixelRect(point[0], point[1], 0.0, 0.0), old_size, new_size)
        return (moved.left, moved.top)

    return replace(
        state,
        scale=scale,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        origin=move(state.origin),
        pointer=move(state.pointer),
        shape=rescale(state.shape, old_size, new_size) if state.shape else None,
    )


def begin_save(state):
    if state.saving:
        raise SaveInFlight()
    if state.mode != ACTIVE or state.shape is None:
        raise NoActiveShape()
    if state.shape.is_empty:
        raise EmptyShape()
    coordinates = clamp_percent(to_percentage(state.shape, *state.canvas_size))
    if coordinates.is_empty:
        raise EmptyShape()
    generation = state.generation + 1
    ticket = SaveTicket(
        page_number=state.page_number,
        coordinates=coordinates,
        canvas_width=state.canvas_width,
        canvas_height=state.canvas_height,
        generation=generation,
    )
    return replace(state, saving=True, generation=generation), ticket


def finish_save(state, ticket, succeeded):
    if state.generation != ticket.generation:
        # the session moved on while the save was running
        return state
    if not succeeded:
        return replace(state, saving=False)
    return replace(cancel(state), saving=False)
