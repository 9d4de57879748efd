"""Main module containing all JSON handlers."""
from .calls import CallHandler
from .controlflow import FlowHandler
from .items import ItemHandler
from .operations import OperationHandler
from .patterns import PatternHandler

# List of all available JSON handlers
HANDLERS = [
    OperationHandler,
    CallHandler,
    FlowHandler,
    PatternHandler,
    ItemHandler,
]
