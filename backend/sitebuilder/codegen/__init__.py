from .generator import generate, page_path, page_source

__all__ = ["generate", "page_path", "page_source"]
