"""module for anything pipeline related."""
from .pipeline import LintPipeline
