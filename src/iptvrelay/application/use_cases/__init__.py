from .catalog import CatalogUseCase
from .playback import LiveRedirect, PlaybackUseCase

__all__ = ["CatalogUseCase", "LiveRedirect", "PlaybackUseCase"]
