"""module for the findings of lint passes."""

from .diagnostic import Applicability, Diagnostic, Suggestion
from .lints import Lint, LintGroup
from .sink import DiagnosticSink
