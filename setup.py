from setuptools import find_packages, setup

setup(
    name="privilege-enforcement",
    version="0.1.0",
    description="Apply directory privilege policies to sudoers and polkit",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "privilege-enforcement=privilege_enforcement.cli:main",
        ]
    },
    python_requires=">=3.10",
)
