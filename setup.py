import pathlib
import re
import sys

from setuptools import setup

if sys.version_info < (3, 9):
    raise RuntimeError("setcookie requires Python 3.9+")


HERE = pathlib.Path(__file__).parent

txt = (HERE / "setcookie" / "__init__.py").read_text("utf-8")
try:
    version = re.findall(r'^__version__ = "([^"]+)"\r?$', txt, re.M)[0]
except IndexError:
    raise RuntimeError("Unable to determine version.")


install_requires = [
    "attrs>=21.3",
    "multidict>=4.5",
    "yarl>=1.6",
]

tests_require = [
    "freezegun",
    "pytest",
]


setup(
    name="setcookie",
    version=version,
    description="Outbound HTTP cookie model, serializer and jar",
    long_description=(HERE / "README.rst").read_text("utf-8"),
    long_description_content_type="text/x-rst",
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Development Status :: 5 - Production/Stable",
        "Operating System :: OS Independent",
        "Topic :: Internet :: WWW/HTTP",
    ],
    license="Apache 2",
    packages=["setcookie"],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require={"test": tests_require},
    include_package_data=True,
)
