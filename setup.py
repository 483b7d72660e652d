"""三目並べ MCTS のパッケージ定義

使用方法:
    pip install -e ".[test]"
"""

from setuptools import find_namespace_packages, setup

setup(
    name="tictactoe-mcts",
    version="0.1.0",
    description="Anytime UCT Monte Carlo Tree Search with background search and tree reuse",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["main", "run_web"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "fastapi>=0.100",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
)
