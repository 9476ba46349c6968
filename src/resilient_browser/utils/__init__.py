from .diagnostics import describe_failure

__all__ = ["describe_failure"]
