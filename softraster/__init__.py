"""A small software rasterizer: vectors and matrices, textures, OBJ models, BMP output and a demo scene."""

__version__ = "0.1.0"
__all__ = ["linalg", "texture", "model", "renderer", "demo"]