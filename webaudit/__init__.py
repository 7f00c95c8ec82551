"""webaudit - orchestration core of a web application security scanner."""

__version__ = "0.1.0"
