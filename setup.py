"""Packaging for QuestTimer.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "QuestTimer",
        "CFBundleDisplayName": "QuestTimer",
        "CFBundleIdentifier": "com.questtimer.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

# py2app is only needed when actually building the bundle
bundle_kwargs = {}
if "py2app" in sys.argv:
    bundle_kwargs = dict(
        app=APP,
        data_files=DATA_FILES,
        options={"py2app": OPTIONS},
        setup_requires=["py2app"],
    )

setup(
    name="QuestTimer",
    version="0.1.0",
    description="A gamified Pomodoro timer with dragons, treasures and companions",
    packages=find_packages(include=["questtimer", "questtimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "gui_scripts": ["questtimer = questtimer.__main__:main"],
    },
    **bundle_kwargs,
)
