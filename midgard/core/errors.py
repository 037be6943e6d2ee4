"""Exceptions raised by the terrain generation pipeline."""


class MidgardError(Exception):
    """Base class for every error the generation pipeline raises."""


class InvalidCount(MidgardError, ValueError):
    """Requested number of sites is not positive."""


class DegenerateInput(MidgardError, ValueError):
    """Sites cannot form a bounded diagram (too few, or outside the box)."""


class InconsistentDiagram(MidgardError, RuntimeError):
    """Raw diagram output has malformed adjacency.

    This points at a bug in the geometry engine, never at user input.
    """


class UnreachableElevation(MidgardError, RuntimeError):
    """Elevation propagation could not reach every corner from the border."""
