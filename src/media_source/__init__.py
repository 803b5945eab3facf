"""media-source: lazy resolution of URLs, searches and playlists to audio streams."""

__version__ = "0.1.0"
