"""gitflow-version: GitFlow semantic version calculation for Maven and npm artifacts."""

__version__ = "0.1.0"
