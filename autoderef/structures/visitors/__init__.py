from .interfaces import HirVisitorInterface
from .source_printer import SourcePrinter
from .walker import LintWalker
