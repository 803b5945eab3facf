"""yt-dlp subprocess adapter."""
