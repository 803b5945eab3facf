"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Extractor (yt-dlp subprocess)
- Transport (HTTP range and HLS streams over httpx)
- Search (YouTube Data API)
- Queue (in-memory source queue)
"""
