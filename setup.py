from setuptools import find_packages, setup

setup(
    name="ar-glb-backend",
    version="1.0.0",
    packages=find_packages(include=["ar_glb", "ar_glb.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "pydantic-settings",
        "httpx",
        "pygltflib",
        "numpy",
        "trimesh",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["ar-glb-backend=ar_glb.__main__:main"],
    },
)
