"""module for anything frontend related."""

from .frontend import Frontend
from .hirjson.frontend import JsonFrontend
from .lifter import Handler, Lifter, ObserverLifter
