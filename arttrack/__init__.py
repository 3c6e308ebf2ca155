"""ArtTrack: commission tracking dashboard for freelance illustrators."""

__version__ = "1.0.0"
