"""audioenhance - Louder stereo downmixes for multi-track MKV files."""

__version__ = "0.1.0"
