from setuptools import setup, find_packages

setup(
    name="safelink-unwrap",
    version="0.1.0",
    description="Rewrites Safe Links style redirector URLs on the clipboard",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pyperclip",
    ],
    entry_points={
        "console_scripts": [
            "safelink-unwrap=safelink_unwrap.cli:main",
        ],
    },
)
