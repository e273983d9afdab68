"""AnonQA Board: anonymous questions, answers, votes and reports."""

__version__ = "0.1.0"
