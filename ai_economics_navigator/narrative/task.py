"""
Debounced, supersedable narrative requests.

Each scenario keeps a generation counter. Submitting a new snapshot bumps
the counter, cancels the previous debounce timer if it has not fired yet,
and marks the previous handle stale. A request already in flight is left
to finish; its text is discarded.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from .prompts import ScenarioKind

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.5

Generator = Callable[[ScenarioKind, Any], str]


class NarrativeHandle:
    """Result handle for one submitted snapshot."""

    def __init__(self, scheduler: "NarrativeScheduler", scenario: ScenarioKind, generation: int):
        self.scenario = scenario
        self.generation = generation
        self._scheduler = scheduler
        self._done = threading.Event()
        self._text: Optional[str] = None
        self._cancelled = False
        self._timer: Optional[threading.Timer] = None

    @property
    def is_current(self) -> bool:
        """Whether no newer submission for the scenario exists."""
        return not self._cancelled and self._scheduler.current_generation(self.scenario) == self.generation

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self) -> None:
        """Discard this handle's result; an in-flight call still completes."""
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        self._finish(None)

    def result(self, timeout: Optional[float] = None) -> Optional[str]:
        """Wait for the text.

        Returns:
            The generated text, or None if the handle was superseded,
            cancelled, or the timeout elapsed
        """
        if not self._done.wait(timeout):
            return None
        return self._text if self.is_current else None

    def _finish(self, text: Optional[str]) -> None:
        if self._done.is_set():
            return
        self._text = text
        self._done.set()


class NarrativeScheduler:
    """Runs narrative generation after a debounce delay, latest-wins per scenario."""

    def __init__(self, generate: Generator, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS):
        """Initialize scheduler.

        Args:
            generate: Callable producing text for (scenario, snapshot),
                e.g. ``NarrativeClient.generate_commentary``
            debounce_seconds: Delay between submission and the call
        """
        if debounce_seconds < 0:
            raise ValueError("debounce_seconds cannot be negative")
        self._generate = generate
        self.debounce_seconds = debounce_seconds
        self._lock = threading.Lock()
        self._generations: Dict[ScenarioKind, int] = {}
        self._latest: Dict[ScenarioKind, NarrativeHandle] = {}

    def current_generation(self, scenario: ScenarioKind) -> int:
        with self._lock:
            return self._generations.get(scenario, 0)

    def submit(self, scenario: ScenarioKind, snapshot: Any) -> NarrativeHandle:
        """Schedule commentary for a fresh snapshot, superseding older ones."""
        scenario = ScenarioKind(scenario)
        with self._lock:
            generation = self._generations.get(scenario, 0) + 1
            self._generations[scenario] = generation
            previous = self._latest.get(scenario)
            handle = NarrativeHandle(self, scenario, generation)
            # Set under the lock so a concurrent submit can always cancel it
            handle._timer = threading.Timer(self.debounce_seconds, self._run, args=(handle, snapshot))
            handle._timer.daemon = True
            self._latest[scenario] = handle

        if previous is not None and not previous.done:
            # A timer that already fired keeps running; its text is dropped
            if previous._timer is not None:
                previous._timer.cancel()
            previous._finish(None)
            logger.debug("Superseded %s narrative generation %d", scenario.value, previous.generation)

        handle._timer.start()
        return handle

    def _run(self, handle: NarrativeHandle, snapshot: Any) -> None:
        try:
            text = self._generate(handle.scenario, snapshot)
        except Exception:
            # Clients map their own errors; anything reaching here is unexpected
            logger.warning("Narrative generation raised for %s", handle.scenario.value, exc_info=True)
            text = None

        if handle.is_current:
            handle._finish(text)
        else:
            logger.debug("Discarding stale %s narrative generation %d", handle.scenario.value, handle.generation)
            handle._finish(None)

    def cancel_all(self) -> None:
        """Cancel every pending handle."""
        with self._lock:
            handles = list(self._latest.values())
        for handle in handles:
            handle.cancel()
