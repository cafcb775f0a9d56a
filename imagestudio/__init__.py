"""
Image Studio

Image-editing backend: raster filters, attention scoring and mock
text-to-design generation behind a FastAPI service.
"""

__version__ = '1.0.0'
