import setuptools

setuptools.setup(
    name='pymueller',
    version='0.1',
    description='Mueller calculus and Stokes reference-frame algebra for polarised light transport',
    install_requires=['numpy', 'xarray>=2024.1', 'numba', 'pyyaml'],
    extras_require={'test': ['pytest']},
    packages=setuptools.find_packages(include=['pymueller', 'pymueller.*']),
    package_data={'pymueller': ['model/config/*.yaml']},
)
