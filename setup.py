from setuptools import setup, find_packages

setup(
    name="knapsack_stepper",
    version="0.1.0",
    description="Step-by-step 0/1 and fractional knapsack engines with undo, backtracking and auto-play.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"knapsack_stepper": ["configs/*.yaml"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "PyYAML",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'knapsack-step = Scripts.step_through:main',
            'knapsack-verify = Scripts.verify_engine:main',
        ],
    }
)
