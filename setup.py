import os
import sys
from setuptools import find_packages, setup
from glacierup import __version__


# We use the README as the long_description
readme_path = os.path.join(os.path.dirname(__file__), "README.rst")


setup(
    name='glacierup',
    version=__version__,
    author='Brian McMichael',
    description='Uploader and archive manager for Amazon Glacier',
    long_description=open(readme_path).read(),
    license='GPL',
    zip_safe=False,
    packages=find_packages(exclude=["tests"]),
    include_package_data=True,
    install_requires=["click", "boto3"],
    extras_require={'tests': ["pytest"]},
    entry_points={'console_scripts': [
        'glacierup = glacierup.cli:main',
    ]},
)
