from setuptools import setup, find_packages

DESC = """Convert the Shift JIS (Windows-31J) filenames in a zip file to UTF-8,
without recompressing anything."""

LONG_DESC = open("README.rst").read()

# defines __version__
exec(open("fjz/version.py").read())

setup(
    name="fix-japanese-zip",
    version=__version__,
    description=DESC,
    long_description=LONG_DESC,
    author="The FJZ developers",
    license="2-clause BSD",
    classifiers =
      [ "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: Japanese",
        "Programming Language :: Python :: 3",
        "Topic :: System :: Archiving :: Compression",
        ],
    packages=find_packages(),
    python_requires=">=3.6",
    entry_points={
        "console_scripts": [
            "fjz = fjz.cmdline.main:entrypoint",
            "fix-japanese-zip = fjz.cmdline.main:convert_entrypoint",
            ],
    },
    install_requires=["docopt"],
    extras_require={
        "test": ["pytest"],
    },
)
