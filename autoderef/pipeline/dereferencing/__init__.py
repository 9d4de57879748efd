from .dereferencing import Dereferencing
