"""Enhancement tracks.

Each track is a subpackage that registers itself with the TrackRegistry.
Import this module to auto-register all available tracks.
"""

# Import all tracks to trigger registration
from . import weapon
from . import element
