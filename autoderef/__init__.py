"""Lint engine finding redundant references and dereferences in type checked programs."""
