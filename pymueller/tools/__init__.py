from .config_tools import *
