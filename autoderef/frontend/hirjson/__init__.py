from .frontend import JsonFrontend
from .lifter import JsonLifter
