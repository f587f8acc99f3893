"""Build output modal: geometry, selection, rendering and navigation."""

from buildview.view.geometry import ViewportGeometry, compute_geometry
from buildview.view.keys import KeyAction, KeyOutcome
from buildview.view.locator import DiagnosticLocator, NavigationResult
from buildview.view.modal import BuildView
from buildview.view.selection import ScrollSelection
from buildview.view.spinner import Spinner
from buildview.view.surface import CanvasSurface, Surface

__all__ = [
    "BuildView",
    "CanvasSurface",
    "DiagnosticLocator",
    "KeyAction",
    "KeyOutcome",
    "NavigationResult",
    "ScrollSelection",
    "Spinner",
    "Surface",
    "ViewportGeometry",
    "compute_geometry",
]
