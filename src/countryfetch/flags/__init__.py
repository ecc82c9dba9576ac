"""Flag art rendering for countryfetch.

Provides :class:`FlagRenderer`, the image-render collaborator used by
:class:`~countryfetch.sync.Synchronizer` when a sync is run with flag art
enabled.
"""

from countryfetch.flags.renderer import FlagRenderer, image_to_lines

__all__ = ["FlagRenderer", "image_to_lines"]
