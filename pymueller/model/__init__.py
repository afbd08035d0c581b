from .mueller import *
from .stokes import *
from .fresnel import *
from .frame import *
from .components import *
from .train import *
