from setuptools import setup, find_packages

import re
import os

this_directory = os.path.abspath(os.path.dirname(__file__))
__version__ = re.findall(
    r"""__version__ = ["']+([0-9\.]*)["']+""",
    open(os.path.join(this_directory, "vlmcore/version.py")).read(),
)[0]

with open(os.path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="vlmcore",
    version=__version__,
    description="""vlmcore is the state container of a vortex lattice method
    aerodynamic solver: pre-allocated storage for the influence coefficients,
    circulation, wake and panel properties of one analysis, together with their
    derivatives with respect to the freestream variables.""",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="vortex lattice method aerodynamic analysis",
    author="",
    author_email="",
    license="BSD 3-Clause License",
    packages=find_packages(
        where='./',
        include=['vlmcore*'],
        exclude=['tests']
        ),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "configobj",
        "colorama",
    ],
    extras_require={
        "test": [
            "pytest",
                 ],
    },
    classifiers=[
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        ],
)
