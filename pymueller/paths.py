import os
import inspect

"""
Packaged optical train configs live in pymueller/model/config/ and are found by name, e.g.
pymueller.OpticalTrain('circular_polarizer.yaml')

"""

root = os.path.dirname(os.path.abspath(inspect.getfile(inspect.currentframe())))
config_path = os.path.join(root, 'model', 'config')
