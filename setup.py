import os
from setuptools import setup, find_packages

here =      os.path.abspath(os.path.dirname(__file__))
readme =    open(os.path.join(here, 'README.rst')).read()
changes =   open(os.path.join(here, 'CHANGES.rst')).read()

requires = [
    'docopt',
    'sqlalchemy>=2.0',
    'jinja2',
    'python-dateutil',
]

tests_require = [
    'pytest',
]

setup(
    name='storefront',
    version='0.0',
    description='storefront page generator',
    long_description="\n\n".join([readme, changes]),
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Internet :: WWW/HTTP",
    ],
    author='Jesse Dhillon',
    author_email='jesse@dhillon.com',
    url='',
    keywords='web shop static',
    packages=find_packages(exclude=['tests']),
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.8',
    install_requires=requires,
    tests_require=tests_require,
    extras_require={
        'test': tests_require,
    },
    entry_points={
        'console_scripts': [
            'storefront = storefront.main:main',
        ]
    }
)
