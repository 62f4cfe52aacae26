"""Application layer: preference persistence, error taxonomy and bootstrap.

``bootstrap`` is imported explicitly (``emojigallery.app.bootstrap``) since it
pulls in the service layer.
"""

from .errors import CorruptValueError, PreferenceError, StorageUnavailableError  # noqa: F401
from .preference_store import PreferenceStore, PreferenceWatch, decode_bool  # noqa: F401
