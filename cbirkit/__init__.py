"""Content-based image retrieval with colour, texture, HOG and embedding features."""

__version__ = "0.1.0"