from setuptools import setup, find_packages

setup(
    name = 'lddgraph',
    description = 'Convert shared object dependencies into a directed graph',
    author = 'lddgraph authors',
    version = '0.1',
    license = 'GPL-3.0',
    packages = find_packages(exclude=['test']),
    zip_safe = False,
    install_requires = [
        'pyelftools'
    ],
    entry_points = {
        'console_scripts': [
            'lddgraph = lddgraph.cli:main'
        ]
    }
)
