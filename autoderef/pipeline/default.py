"""Module defining the available lint passes."""

from autoderef.pipeline.dereferencing import Dereferencing

LINT_PASSES = [Dereferencing]
