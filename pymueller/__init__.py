from .paths import *
from .tools import *
from .model import *
