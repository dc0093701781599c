"""
================================================================================
Player - Heatmap Playback Controller
================================================================================

This module drives time-indexed playback of a session's frames.

Design Philosophy:
    "Design is not just what it looks like. Design is how it works."
        - Steve Jobs

State Machine:
    IDLE     no session loaded
    READY    session loaded, paused at frame 0
    PLAYING  timer running, index advancing and wrapping around
    PAUSED   timer stopped, index kept for resume

    set_session()  any state -> READY (index 0), then PLAYING again if the
                   player was playing before the switch
    play()         READY / PAUSED -> PLAYING
    pause()        PLAYING -> PAUSED
    seek()         same state, index clamped, frame re-rendered
    close()        any state -> IDLE

The player borrows the session mapping from the session store and never
modifies it. Drawing is delegated to a FrameRenderer so the controller
itself needs only QtCore.

Every path that replaces the session or tears the player down cancels
the timer first. Cancelling is synchronous and safe to repeat.
"""

import logging
from enum import Enum
from typing import Mapping, Optional, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..config import MonitorConfig
from ..errors import NotFoundError, ValidationError
from ..utils.constants import PALETTES
from .frame_parser import Frame
from .session_store import Session

logger = logging.getLogger(__name__)


class PlayerState(Enum):
    IDLE = "idle"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"


class FrameRenderer(Protocol):
    """Anything that can draw a frame with a named palette."""

    def draw_frame(self, frame: Frame, palette: str) -> None:
        ...


class PlaybackTimer(QObject):
    """
    Cancellable periodic tick owned by a single player.

    Signals:
        timeout: Emitted once per period while active

    Example:
        >>> timer = PlaybackTimer()
        >>> timer.timeout.connect(on_tick)
        >>> timer.start(200)
        >>> timer.cancel()
        >>> timer.cancel()  # no-op
    """

    timeout = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.timeout.connect(self.timeout.emit)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval(self) -> int:
        return self._timer.interval()

    def start(self, interval_ms: int) -> None:
        """Start (or restart) ticking every interval_ms milliseconds."""
        self._timer.start(int(interval_ms))

    def cancel(self) -> None:
        """Stop ticking. Safe to call when already stopped."""
        if self._timer.isActive():
            self._timer.stop()


class Player(QObject):
    """
    Stateful playback of one session at a time.

    Signals:
        frame_changed: Emitted with the new index after every render request
        state_changed: Emitted with the new PlayerState
        session_changed: Emitted with the date key of the new session

    Example:
        >>> player = Player(heatmap_view, config)
        >>> player.set_sessions(sessions)
        >>> player.set_session("2025-10-12")
        >>> player.play()
    """

    frame_changed = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    session_changed = pyqtSignal(str)

    def __init__(self, renderer: Optional[FrameRenderer] = None,
                 config: Optional[MonitorConfig] = None, parent=None):
        """
        Initialize the player.

        Args:
            renderer: Receives (frame, palette) for every frame shown
            config: Frame duration and default palette (defaults if None)
            parent: Parent QObject (optional)
        """
        super().__init__(parent)
        self.renderer = renderer
        self.config = config or MonitorConfig()

        self._sessions: Mapping[str, Session] = {}
        self._session: Optional[Session] = None
        self._date_key: Optional[str] = None
        self._index = 0
        self._state = PlayerState.IDLE
        self._palette = self.config.default_palette

        self._timer = PlaybackTimer(self)
        self._timer.timeout.connect(self._on_tick)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def index(self) -> int:
        return self._index

    @property
    def frame_count(self) -> int:
        return len(self._session.frames) if self._session is not None else 0

    @property
    def active_date(self) -> Optional[str]:
        return self._date_key

    @property
    def active_session(self) -> Optional[Session]:
        return self._session

    @property
    def palette(self) -> str:
        return self._palette

    @property
    def is_playing(self) -> bool:
        return self._state is PlayerState.PLAYING

    @property
    def timer(self) -> PlaybackTimer:
        return self._timer

    # =========================================================================
    # Session Selection
    # =========================================================================

    def set_sessions(self, sessions: Mapping[str, Session]) -> None:
        """
        Borrow a date-keyed session mapping to choose from.

        If the active session is not in the new mapping the player stops
        and returns to IDLE.
        """
        self._sessions = sessions
        if self._date_key is not None and self._date_key not in sessions:
            self._unload()

    def set_session(self, date_key: str) -> None:
        """
        Switch to another session.

        The timer is cancelled and the index reset to 0. If the player was
        playing, playback continues on the new session.

        Raises:
            NotFoundError: The date is not in the borrowed mapping
        """
        if date_key not in self._sessions:
            raise NotFoundError(f"No session loaded for {date_key}")

        was_playing = self.is_playing
        self._timer.cancel()

        self._session = self._sessions[date_key]
        self._date_key = date_key
        self._index = 0
        self._set_state(PlayerState.READY)
        self.session_changed.emit(date_key)

        self.render_frame(0)
        self.frame_changed.emit(0)

        if was_playing:
            self.play()

    # =========================================================================
    # Transport
    # =========================================================================

    def play(self) -> None:
        """Start advancing frames. No-op without frames or when already playing."""
        if self.frame_count == 0:
            return
        if self._state not in (PlayerState.READY, PlayerState.PAUSED):
            return
        self._timer.start(self.config.frame_duration_ms)
        self._set_state(PlayerState.PLAYING)

    def pause(self) -> None:
        """Stop advancing frames, keeping the index."""
        if self._state is not PlayerState.PLAYING:
            return
        self._timer.cancel()
        self._set_state(PlayerState.PAUSED)

    def toggle(self) -> None:
        """Play when paused, pause when playing."""
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, index: int) -> None:
        """
        Jump to a frame and draw it. The timer is left as it is.

        Args:
            index: Target frame, clamped to [0, frame_count - 1]
        """
        count = self.frame_count
        if count == 0:
            return
        self._index = max(0, min(int(index), count - 1))
        self.render_frame(self._index)
        self.frame_changed.emit(self._index)

    def step(self, delta: int = 1) -> None:
        """Advance by delta frames, wrapping around at the end."""
        count = self.frame_count
        if count == 0:
            return
        self._index = (self._index + delta) % count
        self.render_frame(self._index)
        self.frame_changed.emit(self._index)

    def _on_tick(self) -> None:
        self.step(1)

    # =========================================================================
    # Rendering
    # =========================================================================

    def render_frame(self, index: int) -> None:
        """
        Hand one frame to the renderer with the current palette.

        No state changes. Does nothing without a renderer, without frames,
        or for an index outside the session.
        """
        if self.renderer is None or self._session is None:
            return
        if not 0 <= index < self.frame_count:
            return
        self.renderer.draw_frame(self._session.frames[index], self._palette)

    def set_palette(self, name: str) -> None:
        """
        Change the palette and redraw the current frame.

        Raises:
            ValidationError: The palette is not one of PALETTES
        """
        if name not in PALETTES:
            raise ValidationError(f"Unknown palette '{name}', expected one of {list(PALETTES)}")
        self._palette = name
        self.render_frame(self._index)

    # =========================================================================
    # Cleanup
    # =========================================================================

    def close(self) -> None:
        """Cancel the timer and release the session. Safe to call twice."""
        self._timer.cancel()
        self._sessions = {}
        self._unload()

    def _unload(self) -> None:
        self._timer.cancel()
        self._session = None
        self._date_key = None
        self._index = 0
        self._set_state(PlayerState.IDLE)

    def _set_state(self, state: PlayerState) -> None:
        if state is self._state:
            return
        logger.info("Player %s -> %s", self._state.value, state.value)
        self._state = state
        self.state_changed.emit(state)
