"""timein: city to timezone and timezone to local time lookups for the command line and Alfred."""

__version__ = "1.0.0"
