"""Keep front matter publish and update dates in sync with git history."""

__version__ = "0.1.0"
