"""contourmap — threaded marching-squares contour maps for raster images."""

__version__ = "0.1.0"
