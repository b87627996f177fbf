from setuptools import find_packages, setup


setup(
    name="solidforge",
    version="0.1.0",
    description="Extrude 2D parametric footprints into grouped triangle meshes (JSON -> OBJ/STL)",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "numpy<2.0",
        "shapely==2.1.2",
        "trimesh==4.10.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "solidforge=solidforge.cli:main",
        ]
    },
)
