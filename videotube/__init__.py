"""VideoTube API: accounts, credential rotation and channel views."""

__version__ = "1.0.0"
