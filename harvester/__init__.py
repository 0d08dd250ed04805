"""PDF harvester — scan listing pages and download the documents they link to."""

__version__ = "0.1.0"
