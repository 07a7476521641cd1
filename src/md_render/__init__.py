from md_render.engine import Md, render

__version__ = "0.1.0"

__all__ = ["Md", "__version__", "render"]
