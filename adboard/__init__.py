"""Ad Performance Dashboard — published-sheet ad metrics, summarized."""

__version__ = "0.1.0"
