"""Static content shipped with the application (emoji catalog, strings, icons)."""

from .local_emoji_data import EMOJI_LIST  # noqa: F401
from .resources import ICONS, STRINGS, icon_glyph, string  # noqa: F401
