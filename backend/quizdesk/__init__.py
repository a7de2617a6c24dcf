"""quizdesk: timed multiple-choice quiz attempt service."""

__version__ = "0.1.0"
