"""
Setup file for Terminal Shelf
Install: pip install -e .[test]
macOS app bundle: python setup.py py2app
"""

import sys
from setuptools import setup

APP = ['main.py']
DATA_FILES = []
OPTIONS = {
    'argv_emulation': False,
    'iconfile': None,
    'plist': {
        'CFBundleName': 'Terminal Shelf',
        'CFBundleDisplayName': 'Terminal Shelf',
        'CFBundleGetInfoString': 'A terminal with a persistent command shelf',
        'CFBundleIdentifier': 'com.terminalshelf.app',
        'CFBundleVersion': '1.0.0',
        'CFBundleShortVersionString': '1.0.0',
        'NSHighResolutionCapable': True,
    },
    'packages': ['PyQt5', 'pyte', 'qasync', 'aiofiles', 'ui', 'core'],
    'includes': [
        'PyQt5.QtCore',
        'PyQt5.QtGui',
        'PyQt5.QtWidgets',
        'pyte',
    ],
    'excludes': ['tkinter', 'matplotlib', 'numpy', 'scipy'],
    'arch': 'universal2',  # Support both Intel and Apple Silicon
}

extra_options = {}
if 'py2app' in sys.argv:
    extra_options = {
        'app': APP,
        'data_files': DATA_FILES,
        'options': {'py2app': OPTIONS},
        'setup_requires': ['py2app'],
    }

setup(
    name='terminal-shelf',
    version='1.0.0',
    description='Terminal with a persistent command shelf and inline ghost-text suggestions',
    packages=['core', 'ui'],
    py_modules=['main', 'debug_config'],
    python_requires='>=3.10',
    install_requires=[
        'PyQt5>=5.15.0',
        'pyte>=0.8.0',
        'aiofiles>=23.1.0',
        'qasync>=0.24.0',
    ],
    extras_require={
        'test': ['pytest>=7.0', 'pytest-asyncio>=0.21'],
    },
    entry_points={
        'gui_scripts': ['terminal-shelf = main:main'],
    },
    **extra_options,
)
