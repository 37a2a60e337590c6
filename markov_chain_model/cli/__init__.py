from .cli import CLI, build_model, main

__all__ = ["CLI", "build_model", "main"]
