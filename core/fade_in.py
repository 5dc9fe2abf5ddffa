"""Scroll-triggered fade-in for tagged elements of an HTML document.

Elements carrying one of FADE_IN_CLASSES get the "show" class the first time
they become visible past the threshold, then are no longer observed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol

from bs4 import BeautifulSoup, Tag

from core.config import FADE_IN_THRESHOLD

log = logging.getLogger("blog.fade_in")

FADE_IN_CLASSES = ("fade-in", "fade-in-fast", "fade-in-slow")
FADE_IN_SELECTOR = ", ".join(f".{c}" for c in FADE_IN_CLASSES)
SHOW_CLASS = "show"


@dataclass(frozen=True)
class IntersectionEntry:
    target: Any
    is_intersecting: bool
    intersection_ratio: float = 0.0


class IntersectionObserver(Protocol):
    def observe(self, element: Any) -> None:
        ...

    def unobserve(self, element: Any) -> None:
        ...


ObserverCallback = Callable[[List[IntersectionEntry], IntersectionObserver], None]
ObserverFactory = Callable[[ObserverCallback, float], IntersectionObserver]


class ManualObserver:
    """Observer driven by the host: call report() when an element's visibility changes."""

    def __init__(self, callback: ObserverCallback, threshold: float = FADE_IN_THRESHOLD):
        self.callback = callback
        self.threshold = threshold
        self._observed: List[Any] = []

    def observe(self, element: Any) -> None:
        if not self.is_observing(element):
            self._observed.append(element)

    def unobserve(self, element: Any) -> None:
        self._observed = [e for e in self._observed if e is not element]

    def is_observing(self, element: Any) -> bool:
        return any(e is element for e in self._observed)

    @property
    def observed(self) -> List[Any]:
        return list(self._observed)

    def report(self, element: Any, ratio: float) -> None:
        if not self.is_observing(element):
            return
        entry = IntersectionEntry(
            target=element,
            is_intersecting=ratio > 0 and ratio >= self.threshold,
            intersection_ratio=ratio,
        )
        self.callback([entry], self)


def add_class(element: Tag, name: str) -> None:
    classes = element.get("class") or []
    if name not in classes:
        element["class"] = list(classes) + [name]


def _fade_in_callback(entries: List[IntersectionEntry], observer: IntersectionObserver) -> None:
    for entry in entries:
        if entry.is_intersecting:
            add_class(entry.target, SHOW_CLASS)
            observer.unobserve(entry.target)


def init_fade_in(
    document: BeautifulSoup,
    observer_factory: Optional[ObserverFactory] = None,
    threshold: float = FADE_IN_THRESHOLD,
) -> IntersectionObserver:
    """Observe every tagged element of document; each gets "show" once.

    The observer is returned so a host without a viewport (see reveal_all)
    can report visibility to it.
    """
    elements = document.select(FADE_IN_SELECTOR)
    observer = (observer_factory or ManualObserver)(_fade_in_callback, threshold)
    for el in elements:
        observer.observe(el)
    log.debug("Fade-in: %d element(s) observe(s).", len(elements))
    return observer


def reveal_all(html: str) -> str:
    """Static pre-render: every tagged element is treated as fully visible."""
    soup = BeautifulSoup(html, "html.parser")
    observer = init_fade_in(soup)
    for el in soup.select(FADE_IN_SELECTOR):
        observer.report(el, 1.0)
    return str(soup)
