"""InfiniCLOUD WebDAV proxy: REST-style gateway in front of a WebDAV drive."""

__version__ = "1.0.0"
