"""Static emoji catalog rendered by both layouts.

Each entry doubles as its item key in the list and grid views, so entries
must stay unique.
"""

from __future__ import annotations

from typing import Final, Tuple

EMOJI_LIST: Final[Tuple[str, ...]] = (
    "\U0001F600",  # grinning face
    "\U0001F603",
    "\U0001F604",
    "\U0001F601",
    "\U0001F606",
    "\U0001F605",
    "\U0001F923",
    "\U0001F602",
    "\U0001F642",
    "\U0001F643",
    "\U0001F609",
    "\U0001F60A",
    "\U0001F607",
    "\U0001F970",
    "\U0001F60D",
    "\U0001F929",
    "\U0001F618",
    "\U0001F617",
    "\U0001F61A",
    "\U0001F619",
    "\U0001F60B",
    "\U0001F61B",
    "\U0001F61C",
    "\U0001F92A",
    "\U0001F61D",
    "\U0001F911",
    "\U0001F917",
    "\U0001F92D",
    "\U0001F92B",
    "\U0001F914",
)
